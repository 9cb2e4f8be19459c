"""
Folder model — optional grouping for notes.

Deleting a folder detaches its notes (`notes.folder_id` → NULL); the notes
themselves survive.
"""

from sqlalchemy import String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from smartnotes.database import Base
from smartnotes.models.base import OwnedMixin, UpdatedAtMixin

DEFAULT_COLOR = "#6366f1"


class Folder(OwnedMixin, UpdatedAtMixin, Base):
    __tablename__ = "folders"

    name: Mapped[str] = mapped_column(Text, nullable=False)

    color: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default=DEFAULT_COLOR,
        server_default=text(f"'{DEFAULT_COLOR}'"),
    )

    def __repr__(self) -> str:
        return f"<Folder(id={self.id}, name='{self.name}')>"
