"""
SmartNotes Backend — Identity & Session Models
================================================

What:  ORM models for registered identities (`users`) and their signed-in
       sessions (`auth_sessions`).
Why:   Sign-out must be able to revoke a token before it expires, so each
       access token points at a session row; deleting the row ends it.
"""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from smartnotes.database import Base
from smartnotes.models.base import utcnow


class Identity(Base):
    """
    An authenticated principal.

    Immutable from the API's perspective except `full_name` (display name),
    which is kept in sync with the Profile.
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    # Stored lower-cased; uniqueness is case-insensitive in practice
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True)

    password_hash: Mapped[str] = mapped_column(Text, nullable=False)

    full_name: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"<Identity(id={self.id}, email='{self.email}')>"


class AuthSession(Base):
    """One row per signed-in session."""

    __tablename__ = "auth_sessions"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )

    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    def __repr__(self) -> str:
        return f"<AuthSession(id={self.id}, user_id={self.user_id})>"
