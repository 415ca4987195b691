"""
NoteStore: persistence collaborator for the graph core.

Notes live in the database through the app's SQLAlchemy layer and are
mirrored in an in-memory snapshot. Database failures never break the user
flow: they are logged and the last known snapshot is used instead.
"""
from __future__ import annotations
from typing import List, Optional

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from notegraph.database import crud, database
from notegraph.graph.models import Note

_STORE_ERRORS = (SQLAlchemyError, OSError)


def matches(note: Note, query: str) -> bool:
    q = query.lower()
    return (
        q in note.title.lower()
        or q in note.content.lower()
        or any(q in t for t in note.tags)
    )


class NoteStore:
    def __init__(self, session_factory: Optional[async_sessionmaker] = None):
        self.session_factory = session_factory or database.SessionLocal
        self._notes: List[Note] = []
        self.degraded = False

    @property
    def snapshot(self) -> List[Note]:
        return list(self._notes)

    def get(self, note_id: str) -> Optional[Note]:
        for n in self._notes:
            if n.id == note_id:
                return n
        return None

    async def load_all(self) -> List[Note]:
        """Refresh the snapshot from the database, oldest first."""
        try:
            async with self.session_factory() as db:
                rows = await crud.get_notes(db)
                self._notes = [crud.to_snapshot(r) for r in rows]
            self.degraded = False
        except _STORE_ERRORS as e:
            self.degraded = True
            logger.warning("loadAll failed, serving {} cached note(s): {}", len(self._notes), e)
        return self.snapshot

    async def insert(self, note: Note) -> bool:
        self._notes.append(note)
        try:
            async with self.session_factory() as db:
                await crud.create_note(db, note)
                await db.commit()
            return True
        except _STORE_ERRORS as e:
            self.degraded = True
            logger.warning("insert {} failed, kept in memory only: {}", note.id, e)
            return False

    async def delete(self, note_id: str) -> bool:
        found = any(n.id == note_id for n in self._notes)
        self._notes = [n for n in self._notes if n.id != note_id]
        try:
            async with self.session_factory() as db:
                removed = await crud.delete_note(db, note_id)
                await db.commit()
            return found or removed
        except _STORE_ERRORS as e:
            self.degraded = True
            logger.warning("delete {} failed, removed from memory only: {}", note_id, e)
            return found

    async def search(self, query: str) -> List[Note]:
        notes = await self.load_all()
        if not query:
            return notes
        return [n for n in notes if matches(n, query)]
