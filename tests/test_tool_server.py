import pytest

from notegraph.mcp_server.server_stdio import TOOLS, handle_request


def _call(name, arguments, mid=1):
    return {"jsonrpc": "2.0", "id": mid, "method": "tools/call", "params": {"name": name, "arguments": arguments}}


@pytest.mark.asyncio
async def test_tools_list(service):
    resp = await handle_request(service, {"jsonrpc": "2.0", "id": 1, "method": "tools/list"})
    names = [t["name"] for t in resp["result"]["tools"]]
    assert names == list(TOOLS)
    add = resp["result"]["tools"][0]
    assert "title" in add["inputSchema"]["properties"]


@pytest.mark.asyncio
async def test_add_view_search_delete_flow(service):
    r1 = await handle_request(service, _call("add-note", {"title": "Intro to AI", "tags": ["ai", "ml"]}))
    first_id = r1["result"]["content"]["note"]["id"]
    r2 = await handle_request(service, _call("add-note", {"title": "Advanced AI", "tags": ["ai"]}, mid=2))
    assert r2["id"] == 2
    [conn] = r2["result"]["content"]["connections"]
    assert conn["reason"] == "Shared tags: #ai"

    view = await handle_request(service, _call("view-knowledge-graph", {"highlightNoteId": first_id}))
    content = view["result"]["content"]
    assert content["highlightNoteId"] == first_id
    assert content["text"] == "Knowledge graph: 2 note(s), 1 connection(s)."

    found = await handle_request(service, _call("search-notes", {"query": "advanced"}))
    assert found["result"]["content"]["total"] == 1

    gone = await handle_request(service, _call("delete-note", {"id": first_id}))
    assert gone["result"]["content"]["deleted"] is True
    assert gone["result"]["content"]["connections"] == []


@pytest.mark.asyncio
async def test_errors(service):
    unknown_tool = await handle_request(service, _call("rename-note", {}))
    assert unknown_tool["error"]["code"] == -32601

    invalid = await handle_request(service, _call("add-note", {"title": ""}))
    assert invalid["error"]["code"] == -32602

    unknown_method = await handle_request(service, {"jsonrpc": "2.0", "id": 9, "method": "prompts/list"})
    assert unknown_method == {"jsonrpc": "2.0", "id": 9, "error": {"code": -32601, "message": "Unknown method"}}
