"""
Line-delimited JSON-RPC 2.0 tool server over stdio.

Exposes the knowledge graph as four tools: add-note, delete-note,
search-notes and view-knowledge-graph. One request per input line, one
response per output line; logs go to stderr.
"""
import asyncio, json, sys
from typing import Any, Dict, List, Optional

from loguru import logger
from pydantic import BaseModel, Field, ValidationError

from notegraph.config import configure_logging, get_settings
from notegraph.database import database
from notegraph.graph.session import GraphSession
from notegraph.services.graph_service import KnowledgeGraphService
from notegraph.services.note_store import NoteStore


class AddNoteArgs(BaseModel):
    title: str = Field(min_length=1, description="A concise title for the note")
    content: str = Field(default="", description="The note body text")
    tags: List[str] = Field(default_factory=list, description="Tags to categorise the note (e.g. ['science', 'biology'])")

class DeleteNoteArgs(BaseModel):
    id: str = Field(description="The ID of the note to delete")

class SearchNotesArgs(BaseModel):
    query: str = Field(description="Search query; matches title, content, or tags")

class ViewGraphArgs(BaseModel):
    highlightNoteId: Optional[str] = Field(default=None, description="Optional note ID to highlight when the graph opens")


TOOLS = {
    "add-note": (AddNoteArgs, "Add a new note. Connections to existing notes are detected from shared tags and keyword overlap and returned with the updated graph."),
    "delete-note": (DeleteNoteArgs, "Delete a note by its ID and return the updated graph."),
    "search-notes": (SearchNotesArgs, "Search notes by keyword or tag."),
    "view-knowledge-graph": (ViewGraphArgs, "Show all notes as nodes with auto-detected connections as edges."),
}


def _dump(items) -> List[Dict[str, Any]]:
    return [i.model_dump() for i in items]


async def call_tool(service: KnowledgeGraphService, name: str, args: BaseModel) -> Dict[str, Any]:
    if name == "add-note":
        r = await service.add_note(args.title, args.content, args.tags)
        return {"note": r.note.model_dump(), "notes": _dump(r.notes), "connections": _dump(r.connections)}
    if name == "delete-note":
        r = await service.delete_note(args.id)
        return {"notes": _dump(r.notes), "connections": _dump(r.connections), "deleted": r.deleted}
    if name == "search-notes":
        results = await service.search(args.query)
        return {"results": _dump(results), "total": len(results)}
    view = await service.view(highlight_note_id=args.highlightNoteId)
    return {
        "notes": _dump(view.notes),
        "connections": _dump(view.connections),
        "highlightNoteId": view.highlight_note_id,
        "text": view.summary,
    }


async def handle_request(service: KnowledgeGraphService, req: Dict[str, Any]) -> Dict[str, Any]:
    mid = req.get("id")
    method = req.get("method")
    if method == "tools/list":
        return {"jsonrpc":"2.0","id":mid,"result":{
            "tools":[
                {"name": name, "description": desc, "inputSchema": model.model_json_schema()}
                for name, (model, desc) in TOOLS.items()
            ]
        }}
    if method == "tools/call":
        params = req.get("params", {}) or {}
        name = params.get("name")
        if name not in TOOLS:
            return {"jsonrpc":"2.0","id":mid,"error":{"code":-32601,"message":f"Unknown tool {name}"}}
        model, _ = TOOLS[name]
        try:
            args = model.model_validate(params.get("arguments", {}) or {})
        except ValidationError as e:
            return {"jsonrpc":"2.0","id":mid,"error":{"code":-32602,"message":str(e)}}
        content = await call_tool(service, name, args)
        return {"jsonrpc":"2.0","id":mid,"result":{"content":content}}
    return {"jsonrpc":"2.0","id":mid,"error":{"code":-32601,"message":"Unknown method"}}


async def build_service() -> KnowledgeGraphService:
    settings = get_settings()
    try:
        await database.init_models()
    except Exception as e:
        logger.warning("Database init skipped due to error: {}", e)
    session = GraphSession(settings.width, settings.height, fps=settings.fps, seed=settings.layout_seed)
    service = KnowledgeGraphService(NoteStore(), session)
    await service.startup()
    return service


async def stdio_server() -> None:
    configure_logging(get_settings().log_level)
    service = await build_service()

    reader = asyncio.StreamReader()
    protocol = asyncio.StreamReaderProtocol(reader)
    loop = asyncio.get_running_loop()
    await loop.connect_read_pipe(lambda: protocol, sys.stdin)
    transport, protocol_w = await loop.connect_write_pipe(asyncio.streams.FlowControlMixin, sys.stdout)
    writer = asyncio.StreamWriter(transport, protocol_w, reader, loop)

    logger.info("Knowledge Graph tool server running")
    while True:
        line = await reader.readline()
        if not line:
            break
        req = None
        try:
            req = json.loads(line.decode().strip() or "{}")
            resp = await handle_request(service, req)
        except Exception as e:
            logger.exception("Tool request failed")
            mid = req.get("id") if isinstance(req, dict) else None
            resp = {"jsonrpc":"2.0","id":mid,"error":{"code":-32000,"message":str(e)}}
        writer.write((json.dumps(resp) + "\n").encode())
        await writer.drain()

    await database.engine.dispose()


def main() -> None:
    asyncio.run(stdio_server())


if __name__ == "__main__":
    main()
