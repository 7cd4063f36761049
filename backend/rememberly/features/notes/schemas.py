"""
Notes feature: Schemas for request/response models.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, model_validator


class NoteType(str, Enum):
    TEXT = "text"
    URL = "url"
    FILE = "file"
    IMAGE = "image"


class SortOption(str, Enum):
    NEWEST = "newest"
    OLDEST = "oldest"
    TITLE = "title"
    TYPE = "type"


class ComposeRequest(BaseModel):
    """Request to capture a note; title/summary/tags are generated."""
    content: str
    type: NoteType = NoteType.TEXT


class NoteCreate(BaseModel):
    """Row sent to the notes table (user_id is added by the store).

    The note type decides which reference column is set:
    url -> source_url, file/image -> file_url, text -> neither.
    """
    title: str
    original_content: str
    summary: str = ""
    type: NoteType = NoteType.TEXT
    tags: list[str] = []
    source_url: str | None = None
    file_url: str | None = None

    @model_validator(mode="after")
    def check_reference_matches_type(self):
        if self.type == NoteType.URL:
            if not self.source_url or self.file_url is not None:
                raise ValueError("url notes need source_url and no file_url")
        elif self.type in (NoteType.FILE, NoteType.IMAGE):
            if not self.file_url or self.source_url is not None:
                raise ValueError(f"{self.type.value} notes need file_url and no source_url")
        elif self.source_url is not None or self.file_url is not None:
            raise ValueError("text notes carry neither source_url nor file_url")
        return self


class NoteUpdate(BaseModel):
    """Partial update of an existing note."""
    title: str | None = None
    original_content: str | None = None
    summary: str | None = None
    tags: list[str] | None = None


class Note(BaseModel):
    """A row of the notes table."""
    id: str
    user_id: str
    title: str = ""
    original_content: str = ""
    summary: str = ""
    type: NoteType = NoteType.TEXT
    tags: list[str] = []
    source_url: str | None = None
    file_url: str | None = None
    created_at: datetime
    updated_at: datetime


class CategorySummary(BaseModel):
    id: str
    name: str
    description: str
    count: int
