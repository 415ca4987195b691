"""
KnowledgeGraphService: host glue between the note store and the graph core.

Every mutation goes to the store first and is followed by a full connection
recompute over the store's current snapshot. Both the HTTP routers and the
stdio tool server call into this class.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from loguru import logger

from notegraph.graph.inference import connection_counts, connections_for, filter_connections
from notegraph.graph.models import Connection, Note
from notegraph.graph.session import GraphSession, summarize
from notegraph.services.note_store import NoteStore, matches


@dataclass
class AddResult:
    note: Note
    notes: List[Note]
    connections: List[Connection]


@dataclass
class DeleteResult:
    notes: List[Note]
    connections: List[Connection]
    deleted: bool


@dataclass
class GraphView:
    notes: List[Note]
    connections: List[Connection]
    highlight_note_id: Optional[str] = None
    summary: str = ""
    counts: Dict[str, int] = field(default_factory=dict)


class KnowledgeGraphService:
    def __init__(self, store: NoteStore, session: GraphSession):
        self.store = store
        self.session = session

    async def startup(self) -> int:
        notes = await self.store.load_all()
        self.session.on_notes_changed(notes)
        logger.info("[store] {} note(s) loaded", len(notes))
        return len(notes)

    async def refresh(self) -> List[Note]:
        notes = await self.store.load_all()
        self.session.on_notes_changed(notes)
        return notes

    async def add_note(self, title: str, content: str = "", tags: Iterable[str] | None = None) -> AddResult:
        note = Note.new(title=title, content=content, tags=tags)
        await self.store.insert(note)
        connections = self.session.on_notes_changed(self.store.snapshot)
        own = connections_for(note.id, connections)
        logger.info('[add-note] "{}" - {} new connection(s) detected', title, len(own))
        return AddResult(note=note, notes=self.store.snapshot, connections=connections)

    async def delete_note(self, note_id: str) -> DeleteResult:
        deleted = await self.store.delete(note_id)
        connections = self.session.on_notes_changed(self.store.snapshot)
        return DeleteResult(notes=self.store.snapshot, connections=connections, deleted=deleted)

    async def search(self, query: str) -> List[Note]:
        return await self.store.search(query)

    async def view(self, highlight_note_id: Optional[str] = None, query: str = "") -> GraphView:
        """Latest notes and connections, optionally narrowed by a search query."""
        await self.refresh()
        notes = self.session.notes
        connections = self.session.connections
        if query:
            notes = [n for n in notes if matches(n, query)]
            connections = filter_connections(connections, (n.id for n in notes))
        per_note = connection_counts(connections)
        counts = {n.id: per_note.get(n.id, 0) for n in notes}
        return GraphView(
            notes=notes,
            connections=connections,
            highlight_note_id=highlight_note_id,
            summary=summarize(notes, connections),
            counts=counts,
        )
