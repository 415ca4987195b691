import os
import sys
import json
from fastapi.testclient import TestClient


def main() -> int:
    # Ensure repo root is importable
    repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
    if repo_root not in sys.path:
        sys.path.insert(0, repo_root)

    try:
        import server  # type: ignore
    except Exception as e:
        print(json.dumps({"ok": False, "stage": "import", "error": str(e)}))
        return 2

    payload = {
        "ok": False,
        "created": [],
        "connections": [],
        "frame": None,
    }

    with TestClient(server.app) as client:
        # 1) Create two notes that share a tag
        notes_data = [
            {"title": "Smoke A", "content": "Force layouts settle quickly.", "tags": ["smoke"]},
            {"title": "Smoke B", "content": "Another short paragraph.", "tags": ["#Smoke"]},
        ]
        for nd in notes_data:
            r = client.post("/api/notes/", json=nd)
            if r.status_code != 201:
                print(json.dumps({"ok": False, "stage": "create_note", "status": r.status_code, "body": r.text}))
                return 1
            body = r.json()
            payload["created"].append({"id": body["note"]["id"], "title": body["note"]["title"]})
            payload["connections"] = body["connections"]

        # 2) Read the current layout frame
        r = client.get("/api/graph/frame")
        if r.status_code == 200:
            payload["frame"] = {"heat": r.json()["heat"], "nodes": len(r.json()["positions"])}

        # 3) Clean up
        for c in payload["created"]:
            client.delete(f"/api/notes/{c['id']}")

    created_ids = {c["id"] for c in payload["created"]}
    ok = (
        len(payload["created"]) == 2
        and any({c["source"], c["target"]} == created_ids for c in payload["connections"])
        and payload["frame"] is not None
    )
    payload["ok"] = ok
    print(json.dumps(payload))
    return 0 if ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
