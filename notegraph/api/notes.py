from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from notegraph.api.deps import get_service
from notegraph.api.schemas import AddNoteResponse, DeleteNoteResponse
from notegraph.database import schemas
from notegraph.services.graph_service import KnowledgeGraphService

router = APIRouter(
    prefix="/api/notes",
    tags=["notes"],
)


def _shape(notes) -> List[schemas.Note]:
    return [schemas.Note.model_validate(n) for n in notes]


@router.post("/", response_model=AddNoteResponse, status_code=status.HTTP_201_CREATED)
async def create_note_endpoint(note: schemas.NoteCreate, service: KnowledgeGraphService = Depends(get_service)):
    """
    Add a note and return it with the full note list and every recomputed connection.
    """
    result = await service.add_note(note.title, note.content, note.tags)
    return AddNoteResponse(
        note=schemas.Note.model_validate(result.note),
        notes=_shape(result.notes),
        connections=result.connections,
    )


@router.get("/", response_model=List[schemas.Note])
async def read_notes_endpoint(skip: int = 0, limit: int = 100, service: KnowledgeGraphService = Depends(get_service)):
    notes = await service.store.load_all()
    return _shape(notes[skip:skip + limit])


@router.get("/{note_id}", response_model=schemas.Note)
async def read_note_endpoint(note_id: str, service: KnowledgeGraphService = Depends(get_service)):
    await service.store.load_all()
    note = service.store.get(note_id)
    if note is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Note not found")
    return schemas.Note.model_validate(note)


@router.delete("/{note_id}", response_model=DeleteNoteResponse)
async def delete_note_endpoint(note_id: str, service: KnowledgeGraphService = Depends(get_service)):
    """
    Delete a note by its ID. Unknown ids are reported with deleted=false rather than 404,
    so the caller always gets the current graph back.
    """
    result = await service.delete_note(note_id)
    return DeleteNoteResponse(notes=_shape(result.notes), connections=result.connections, deleted=result.deleted)
