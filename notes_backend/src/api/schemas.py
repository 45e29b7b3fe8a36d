from typing import List, Optional

from pydantic import BaseModel, Field

from src.api.models import TITLE_PATTERN


# Notes

class NoteCreateRequest(BaseModel):
    """Create note request"""
    title: str = Field(..., min_length=1, max_length=255, pattern=TITLE_PATTERN)
    text: str = Field("", description="Note body text")


class NoteUpdateRequest(BaseModel):
    """Update note request (partial)"""
    title: Optional[str] = Field(None, min_length=1, max_length=255, pattern=TITLE_PATTERN)
    text: Optional[str] = Field(None)


class NoteResponse(BaseModel):
    """Note response model"""
    id: int
    title: str
    text: str
    timestamp: int

    class Config:
        from_attributes = True


class NoteListResponse(BaseModel):
    """All notes in index order, shaped like the index file"""
    list: List[NoteResponse]
