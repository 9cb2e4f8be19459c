"""
Profile model — one-to-one with Identity.

Created by AuthService.sign_up in the same transaction as the Identity and
mutated only by its owner.
"""

from sqlalchemy import Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from smartnotes.database import Base
from smartnotes.models.base import OwnedMixin, UpdatedAtMixin


class Profile(OwnedMixin, UpdatedAtMixin, Base):
    __tablename__ = "profiles"

    full_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        UniqueConstraint("user_id", name="uq_profiles_user_id"),
    )

    def __repr__(self) -> str:
        return f"<Profile(id={self.id}, user_id={self.user_id})>"
