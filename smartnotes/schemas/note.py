"""
SmartNotes Backend — Note Request/Response Schemas
===================================================

What:  Pydantic models defining the note API contract.
Why:   Strict input validation, automatic serialization, OpenAPI docs.

Design Decision:
    Schemas are separate from SQLAlchemy models because:
    1. We control exactly what data is exposed (user_id is never written by clients)
    2. Create and update payloads have different optionality
    3. Responses can embed computed data (tags on the detail view)
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from smartnotes.models.note import SummaryLength, SummaryTone


def _require_text(v: str) -> str:
    if not v.strip():
        raise ValueError("must not be blank")
    return v


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class NoteCreate(BaseModel):
    """
    What:  Payload for saving a generated summary as a note.
    Who:   Sent by the creation flow after a successful summarize call.
    """
    title: str = Field(min_length=1, description="Generated (or edited) title")
    original_content: str = Field(min_length=1, description="Text that was summarized, verbatim")
    summary: Optional[str] = Field(default=None)
    keywords: List[str] = Field(default_factory=list)
    summary_length: SummaryLength = Field(default=SummaryLength.MEDIUM)
    summary_tone: SummaryTone = Field(default=SummaryTone.PROFESSIONAL)
    is_bullet_points: bool = Field(default=False)
    folder_id: Optional[uuid.UUID] = Field(default=None)

    @field_validator("title", "original_content")
    @classmethod
    def not_blank(cls, v: str) -> str:
        return _require_text(v)


class NoteUpdate(BaseModel):
    """
    What:  Partial update. Only fields present in the request are written.
    Why:   No user_id field: ownership never changes.
    """
    title: Optional[str] = Field(default=None, min_length=1)
    summary: Optional[str] = None
    keywords: Optional[List[str]] = None
    summary_length: Optional[SummaryLength] = None
    summary_tone: Optional[SummaryTone] = None
    is_bullet_points: Optional[bool] = None
    folder_id: Optional[uuid.UUID] = None

    @field_validator("title", "summary_length", "summary_tone", "is_bullet_points")
    @classmethod
    def not_null(cls, v):
        # Omit a field to leave it unchanged; these columns can't be cleared
        if v is None:
            raise ValueError("may be omitted but not null")
        return v

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        return _require_text(v)


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class TagRef(BaseModel):
    id: uuid.UUID
    name: str
    color: str

    model_config = {"from_attributes": True}


class NoteResponse(BaseModel):
    """Full representation of a note."""
    id: uuid.UUID
    user_id: uuid.UUID
    folder_id: Optional[uuid.UUID] = None
    title: str
    original_content: str
    summary: Optional[str] = None
    keywords: List[str] = Field(default_factory=list)
    summary_length: str
    summary_tone: str
    is_bullet_points: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

    @field_validator("keywords", mode="before")
    @classmethod
    def null_keywords(cls, v):
        return v or []


class NoteDetailResponse(NoteResponse):
    tags: List[TagRef] = Field(default_factory=list)


class NoteListResponse(BaseModel):
    """
    What:  Notes list for the list view.
    Fields:
        notes:       notes matching the search query, newest first
        total_count: number of notes owned before filtering
    """
    notes: List[NoteResponse]
    total_count: int


class DashboardResponse(BaseModel):
    first_name: str = Field(description="Greeting name; 'there' when no name is set")
    recent_notes: List[NoteResponse]
    total_notes: int
    notes_this_week: int
