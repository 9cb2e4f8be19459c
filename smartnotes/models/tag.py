"""
Tag model and the `note_tags` association table.

Tags are many-to-many with notes. The join table has no owner column: a
link is visible to whoever owns the note it points at.
"""

from sqlalchemy import Column, ForeignKey, String, Table, Text, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from smartnotes.database import Base
from smartnotes.models.base import OwnedMixin
from smartnotes.models.folder import DEFAULT_COLOR


class Tag(OwnedMixin, Base):
    __tablename__ = "tags"

    name: Mapped[str] = mapped_column(Text, nullable=False)

    color: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default=DEFAULT_COLOR,
        server_default=text(f"'{DEFAULT_COLOR}'"),
    )

    def __repr__(self) -> str:
        return f"<Tag(id={self.id}, name='{self.name}')>"


note_tags = Table(
    "note_tags",
    Base.metadata,
    Column("note_id", Uuid, ForeignKey("notes.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", Uuid, ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
)
