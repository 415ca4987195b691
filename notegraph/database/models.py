from sqlalchemy import Column, String, Text, JSON

from .database import Base


class Note(Base):
    __tablename__ = "notes"

    id = Column(String(36), primary_key=True)
    title = Column(String, nullable=False)
    content = Column(Text, nullable=False, default="")
    tags = Column(JSON, nullable=False, default=list)
    # ISO-8601 UTC text; sorts chronologically as a string
    created_at = Column(String(40), nullable=False, index=True)

    def __repr__(self):
        return f"<Note(id={self.id}, title='{self.title}')>"
