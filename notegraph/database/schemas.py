from typing import List

from pydantic import BaseModel, Field, field_validator

from notegraph.graph.models import normalize_tags


# Schema for creating a note (request)
class NoteCreate(BaseModel):
    title: str = Field(min_length=1)
    content: str = ""
    tags: List[str] = Field(default_factory=list)

    @field_validator("tags", mode="before")
    @classmethod
    def _clean_tags(cls, v):
        return normalize_tags(v)


# Schema for reading a note (response)
class Note(BaseModel):
    id: str
    title: str
    content: str = ""
    tags: List[str] = []
    created_at: str

    model_config = {
        "from_attributes": True,
    }
