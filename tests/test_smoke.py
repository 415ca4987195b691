from fastapi.testclient import TestClient


def _client():
    import importlib
    server = importlib.import_module("server")
    return TestClient(server.app)


def test_health_ok():
    with _client() as client:
        resp = client.get("/api/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data.get("status") == "ok"
        assert "storeDegraded" in data and "loopRunning" in data


def test_notes_crud_smoke():
    with _client() as client:
        # Create
        r = client.post("/api/notes/", json={"title": "Smoke Note", "content": "Hello\n\nWorld", "tags": ["smoke"]})
        assert r.status_code == 201, r.text
        nid = r.json()["note"]["id"]

        # Read list
        r = client.get("/api/notes/")
        assert r.status_code == 200
        assert any(n["id"] == nid for n in r.json())

        # Read one
        r = client.get(f"/api/notes/{nid}")
        assert r.status_code == 200
        assert r.json()["title"] == "Smoke Note"

        # Delete
        r = client.delete(f"/api/notes/{nid}")
        assert r.status_code == 200
        assert r.json()["deleted"] is True
        # Ensure gone
        r = client.get(f"/api/notes/{nid}")
        assert r.status_code == 404
