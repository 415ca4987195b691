from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from notegraph.database.schemas import Note
from notegraph.graph.models import Connection, Transform

# --- API Models ---

class AddNoteResponse(BaseModel):
    note: Note
    notes: List[Note]
    connections: List[Connection]

class DeleteNoteResponse(BaseModel):
    notes: List[Note]
    connections: List[Connection]
    deleted: bool

class SearchResponse(BaseModel):
    results: List[Note]
    total: int

class GraphResponse(BaseModel):
    notes: List[Note]
    connections: List[Connection]
    highlightNoteId: Optional[str] = None
    connectionCounts: Dict[str, int] = {}
    summary: str

class ViewportRequest(BaseModel):
    width: float = Field(ge=0)
    height: float = Field(ge=0)

class PointerEvent(BaseModel):
    type: Literal["down", "move", "up", "leave"]
    x: float = 0.0
    y: float = 0.0
    # Set on "down" when the pointer landed on a node rather than the canvas
    node_id: Optional[str] = None

class WheelEvent(BaseModel):
    x: float
    y: float
    delta_y: float

class ZoomRequest(BaseModel):
    action: Literal["in", "out", "reset"]

class SelectRequest(BaseModel):
    node_id: Optional[str] = None

class InteractionState(BaseModel):
    transform: Transform
    dragging: Optional[str] = None
    panning: bool = False
    selected: Optional[str] = None
    pinned: Optional[str] = None
    hovered: Optional[str] = None
    # Hovered node plus its neighbours; null when nothing is hovered
    highlighted: Optional[List[str]] = None
