from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from notegraph.graph.models import Note as NoteSnapshot
from . import models


def to_snapshot(db_note: models.Note) -> NoteSnapshot:
    return NoteSnapshot(
        id=db_note.id,
        title=db_note.title,
        content=db_note.content or "",
        tags=list(db_note.tags or []),
        created_at=db_note.created_at,
    )


async def get_note(db: AsyncSession, note_id: str) -> Optional[models.Note]:
    result = await db.execute(select(models.Note).filter(models.Note.id == note_id))
    return result.scalars().first()


async def get_notes(db: AsyncSession, skip: int = 0, limit: Optional[int] = None) -> List[models.Note]:
    query = select(models.Note).order_by(models.Note.created_at, models.Note.id).offset(skip)
    if limit is not None:
        query = query.limit(limit)
    result = await db.execute(query)
    return list(result.scalars().all())


async def create_note(db: AsyncSession, note: NoteSnapshot) -> models.Note:
    """Adds the note to the session. Does not commit."""
    db_note = models.Note(
        id=note.id,
        title=note.title,
        content=note.content,
        tags=list(note.tags),
        created_at=note.created_at,
    )
    db.add(db_note)
    await db.flush()
    return db_note


async def delete_note(db: AsyncSession, note_id: str) -> bool:
    """Deletes by id. Does not commit. Returns whether a row matched."""
    result = await db.execute(delete(models.Note).where(models.Note.id == note_id))
    return (result.rowcount or 0) > 0
