from __future__ import annotations
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional
import uuid

from pydantic import BaseModel, Field, field_validator


def normalize_tags(raw: Iterable[str] | None) -> List[str]:
    """Lower-case tags, drop one leading '#', trim whitespace, drop blanks."""
    out: List[str] = []
    for t in raw or []:
        s = (t or "").strip()
        if s.startswith("#"):
            s = s[1:].strip()
        s = s.lower()
        if s:
            out.append(s)
    return out


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class Note(BaseModel):
    """A user note as seen by the graph core (read-only snapshot item)."""
    id: str
    title: str
    content: str = ""
    tags: List[str] = Field(default_factory=list)
    created_at: str = Field(default_factory=now_iso)

    model_config = {"frozen": True}

    @field_validator("tags", mode="before")
    @classmethod
    def _clean_tags(cls, v):
        return normalize_tags(v)

    @field_validator("content", mode="before")
    @classmethod
    def _content_not_none(cls, v):
        return v or ""

    @classmethod
    def new(cls, title: str, content: str = "", tags: Iterable[str] | None = None) -> "Note":
        return cls(id=str(uuid.uuid4()), title=title, content=content, tags=list(tags or []))


class Connection(BaseModel):
    source: str
    target: str
    strength: float = Field(ge=0.0, le=1.0)
    reason: str

    model_config = {"frozen": True}

    @property
    def key(self) -> str:
        return "~".join(sorted((self.source, self.target)))


class Point(BaseModel):
    x: float
    y: float


class EdgeView(BaseModel):
    source: str
    target: str
    strength: float
    reason: str


class Transform(BaseModel):
    x: float = 0.0
    y: float = 0.0
    scale: float = 1.0


class GraphFrame(BaseModel):
    """One rendering-sink snapshot: live positions plus the current edge list."""
    tick: int
    width: float
    height: float
    heat: int
    positions: Dict[str, Point]
    edges: List[EdgeView]
    transform: Transform
    pinned: Optional[str] = None
    selected: Optional[str] = None
