"""Create SmartNotes schema

Revision ID: 001
Revises: None
Create Date: 2026-01-03 19:05:31.000000+00:00

What:  Creates users, auth_sessions, profiles, folders, notes, tags and
       note_tags, with the indexes behind the "my notes, newest first" and
       per-owner lookups.
How:   PostgreSQL UUID keys with gen_random_uuid() defaults and TIMESTAMP
       WITH TIME ZONE columns. The ORM also assigns ids and timestamps in
       Python, so the same models work on SQLite in tests.

Rollback: downgrade() drops every table (destructive).
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

DEFAULT_COLOR = "'#6366f1'"


def _id_column() -> sa.Column:
    return sa.Column(
        "id",
        postgresql.UUID(as_uuid=True),
        server_default=sa.text("gen_random_uuid()"),
        nullable=False,
    )


def _owner_column() -> sa.Column:
    return sa.Column(
        "user_id",
        postgresql.UUID(as_uuid=True),
        sa.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        comment="Owning identity",
    )


def _timestamp(name: str) -> sa.Column:
    return sa.Column(
        name,
        sa.TIMESTAMP(timezone=True),
        server_default=sa.text("now()"),
        nullable=False,
    )


def upgrade() -> None:
    # ── Identities and sessions ───────────────────────────────────────────
    op.create_table(
        "users",
        _id_column(),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("full_name", sa.Text(), nullable=True),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )

    op.create_table(
        "auth_sessions",
        _id_column(),
        sa.Column(
            "user_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        _timestamp("created_at"),
        sa.Column("expires_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_auth_sessions_user_id", "auth_sessions", ["user_id"])

    # ── Profiles ──────────────────────────────────────────────────────────
    op.create_table(
        "profiles",
        _id_column(),
        _owner_column(),
        sa.Column("full_name", sa.Text(), nullable=True),
        sa.Column("avatar_url", sa.Text(), nullable=True),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", name="uq_profiles_user_id"),
    )

    # ── Folders ───────────────────────────────────────────────────────────
    op.create_table(
        "folders",
        _id_column(),
        _owner_column(),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("color", sa.String(32), nullable=False, server_default=sa.text(DEFAULT_COLOR)),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_folders_user_id", "folders", ["user_id"])

    # ── Notes ─────────────────────────────────────────────────────────────
    op.create_table(
        "notes",
        _id_column(),
        _owner_column(),
        sa.Column(
            "folder_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("folders.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("original_content", sa.Text(), nullable=False),
        sa.Column("summary", sa.Text(), nullable=True),
        sa.Column("keywords", sa.JSON(), nullable=False, server_default=sa.text("'[]'")),
        sa.Column("summary_length", sa.String(16), nullable=False, server_default=sa.text("'medium'")),
        sa.Column("summary_tone", sa.String(16), nullable=False, server_default=sa.text("'professional'")),
        sa.Column("is_bullet_points", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "summary_length IN ('short', 'medium', 'long')",
            name="ck_notes_summary_length",
        ),
        sa.CheckConstraint(
            "summary_tone IN ('academic', 'casual', 'professional')",
            name="ck_notes_summary_tone",
        ),
    )
    op.create_index("ix_notes_user_id", "notes", ["user_id"])
    op.create_index("ix_notes_folder_id", "notes", ["folder_id"])
    op.create_index("idx_notes_created_at", "notes", [sa.text("created_at DESC")])

    # ── Tags ──────────────────────────────────────────────────────────────
    op.create_table(
        "tags",
        _id_column(),
        _owner_column(),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("color", sa.String(32), nullable=False, server_default=sa.text(DEFAULT_COLOR)),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_tags_user_id", "tags", ["user_id"])

    op.create_table(
        "note_tags",
        sa.Column(
            "note_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("notes.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "tag_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("tags.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("note_id", "tag_id"),
    )


def downgrade() -> None:
    op.drop_table("note_tags")
    op.drop_index("ix_tags_user_id", table_name="tags")
    op.drop_table("tags")
    op.drop_index("idx_notes_created_at", table_name="notes")
    op.drop_index("ix_notes_folder_id", table_name="notes")
    op.drop_index("ix_notes_user_id", table_name="notes")
    op.drop_table("notes")
    op.drop_index("ix_folders_user_id", table_name="folders")
    op.drop_table("folders")
    op.drop_table("profiles")
    op.drop_index("ix_auth_sessions_user_id", table_name="auth_sessions")
    op.drop_table("auth_sessions")
    op.drop_table("users")
