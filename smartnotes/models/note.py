"""
SmartNotes Backend — Note SQLAlchemy Model
============================================

What:  ORM model representing the `notes` table.
Why:   A note is the saved result of one summarization: the original text,
       the generated title/summary/keywords and the options used.
Who:   Read and written exclusively through DataAccessFacade; Alembic reads
       it for migrations.

Table Design Rationale:
    - UUID primary key: non-sequential, cannot be enumerated
    - user_id: owner; every query is scoped by it
    - folder_id: optional, SET NULL when the folder goes away
    - keywords: JSON array (portable between PostgreSQL and SQLite)
    - summary_length / summary_tone: CHECK-constrained enums stored as text
    - created_at / updated_at: UTC; updated_at is refreshed on every UPDATE

    Index on created_at DESC serves the "newest first" list and dashboard.
"""

import uuid
from enum import Enum
from typing import List

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    ForeignKey,
    Index,
    String,
    Text,
    Uuid,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from smartnotes.database import Base
from smartnotes.models.base import OwnedMixin, UpdatedAtMixin


class SummaryLength(str, Enum):
    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"


class SummaryTone(str, Enum):
    ACADEMIC = "academic"
    CASUAL = "casual"
    PROFESSIONAL = "professional"


class Note(OwnedMixin, UpdatedAtMixin, Base):
    """
    A saved, summarized note.

    Lifecycle:
        1. Created when the user saves a generated summary
        2. Optionally edited (title, summary, keywords, folder)
        3. Destroyed on explicit delete
    """

    __tablename__ = "notes"

    folder_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("folders.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    title: Mapped[str] = mapped_column(Text, nullable=False)

    # Stored verbatim, exactly as submitted for summarization
    original_content: Mapped[str] = mapped_column(Text, nullable=False)

    summary: Mapped[str | None] = mapped_column(Text, nullable=True)

    keywords: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)

    summary_length: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default=SummaryLength.MEDIUM.value,
        server_default=text("'medium'"),
    )

    summary_tone: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default=SummaryTone.PROFESSIONAL.value,
        server_default=text("'professional'"),
    )

    is_bullet_points: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=text("false"),
    )

    __table_args__ = (
        CheckConstraint(
            "summary_length IN ('short', 'medium', 'long')",
            name="ck_notes_summary_length",
        ),
        CheckConstraint(
            "summary_tone IN ('academic', 'casual', 'professional')",
            name="ck_notes_summary_tone",
        ),
        Index("idx_notes_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title='{self.title}', created_at='{self.created_at}')>"
