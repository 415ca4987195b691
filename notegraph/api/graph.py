import asyncio
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import StreamingResponse

from notegraph.api.deps import get_service
from notegraph.api.schemas import (
    GraphResponse, InteractionState, PointerEvent, SelectRequest, ViewportRequest, WheelEvent, ZoomRequest,
)
from notegraph.database import schemas
from notegraph.graph.models import GraphFrame
from notegraph.services.graph_service import KnowledgeGraphService

router = APIRouter(
    prefix="/api/graph",
    tags=["graph"],
)


def _state(service: KnowledgeGraphService) -> InteractionState:
    ctl = service.session.controller
    lit = ctl.highlighted(service.session.connections)
    return InteractionState(
        transform=ctl.transform,
        dragging=ctl.dragging,
        panning=ctl.panning,
        selected=ctl.selected,
        pinned=service.session.simulation.pinned,
        hovered=ctl.hovered,
        highlighted=sorted(lit) if lit is not None else None,
    )


@router.get("", response_model=GraphResponse)
async def view_graph(highlight: Optional[str] = None, q: str = "", service: KnowledgeGraphService = Depends(get_service)):
    """
    All notes as nodes with their inferred connections as edges.
    With `q`, only matching notes and the connections between them are returned.
    """
    view = await service.view(highlight_note_id=highlight, query=q)
    return GraphResponse(
        notes=[schemas.Note.model_validate(n) for n in view.notes],
        connections=view.connections,
        highlightNoteId=view.highlight_note_id,
        connectionCounts=view.counts,
        summary=view.summary,
    )


@router.get("/frame", response_model=GraphFrame)
async def current_frame(service: KnowledgeGraphService = Depends(get_service)):
    return service.session.frame()


@router.get("/events")
async def stream_frames(request: Request, max_frames: Optional[int] = None,
                        service: KnowledgeGraphService = Depends(get_service)):
    """
    Server-Sent Events stream of layout frames.

    Emits 'data: {...}\\n\\n' with the full GraphFrame whenever it changes, polled at the
    loop's frame rate. `max_frames` ends the stream after that many events.
    """
    interval = 1.0 / request.app.state.settings.fps

    async def gen():
        last_payload = None
        sent = 0
        while True:
            if await request.is_disconnected():
                break
            frame = service.session.frame()
            # Tick changes every frame; compare on layout content only
            payload = frame.model_dump_json(exclude={"tick"})
            if payload != last_payload:
                last_payload = payload
                sent += 1
                yield f"data: {frame.model_dump_json()}\n\n"
                if max_frames is not None and sent >= max_frames:
                    break
            await asyncio.sleep(interval)

    return StreamingResponse(gen(), media_type="text/event-stream")


@router.post("/viewport", response_model=GraphFrame)
async def resize_viewport(req: ViewportRequest, service: KnowledgeGraphService = Depends(get_service)):
    service.session.on_viewport_resized(req.width, req.height)
    return service.session.frame()


@router.post("/restart", response_model=GraphFrame)
async def restart_layout(service: KnowledgeGraphService = Depends(get_service)):
    service.session.simulation.restart()
    return service.session.frame()


@router.post("/pointer", response_model=InteractionState)
async def pointer_event(evt: PointerEvent, service: KnowledgeGraphService = Depends(get_service)):
    ctl = service.session.controller
    if evt.type == "down":
        if evt.node_id is not None:
            if not ctl.pointer_down_node(evt.node_id):
                raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Node not found")
        else:
            ctl.pointer_down_canvas(evt.x, evt.y)
    elif evt.type == "move":
        ctl.pointer_move(evt.x, evt.y)
    else:
        ctl.pointer_up()
    return _state(service)


@router.post("/wheel", response_model=InteractionState)
async def wheel_event(evt: WheelEvent, service: KnowledgeGraphService = Depends(get_service)):
    service.session.controller.wheel(evt.x, evt.y, evt.delta_y)
    return _state(service)


@router.post("/zoom", response_model=InteractionState)
async def zoom(req: ZoomRequest, service: KnowledgeGraphService = Depends(get_service)):
    ctl = service.session.controller
    if req.action == "in":
        ctl.zoom_in()
    elif req.action == "out":
        ctl.zoom_out()
    else:
        ctl.reset_view()
    return _state(service)


@router.post("/select", response_model=InteractionState)
async def select_node(req: SelectRequest, service: KnowledgeGraphService = Depends(get_service)):
    if req.node_id is not None and service.session.note(req.node_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Note not found")
    service.session.controller.select(req.node_id)
    return _state(service)


@router.post("/hover", response_model=InteractionState)
async def hover_node(req: SelectRequest, service: KnowledgeGraphService = Depends(get_service)):
    if req.node_id is not None and service.session.note(req.node_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Note not found")
    service.session.controller.hover(req.node_id)
    return _state(service)
