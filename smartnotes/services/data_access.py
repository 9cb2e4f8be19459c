"""
SmartNotes Backend — Data Access Facade
=========================================

What:  The single object through which every endpoint reads and writes notes,
       folders, tags and profiles.
Why:   Ownership is enforced here, on every call, not left to callers:
       - list/count only ever see the caller's rows
       - get/update/delete treat another identity's row exactly like a
         missing row (NotFoundError), even when the id is valid
       - insert always stamps the caller as owner
       - update can never touch id, user_id or the timestamps
How:   Generic, table-scoped operations keyed by the ORM model class, in the
       shape of a hosted-store client: filter-by-equality, ordering, limit
       and count-only queries.
Who:   Built per request by smartnotes.dependencies.get_facade.

Contract per operation class:
    List      → ordered list; [] is a normal result
    Get-by-id → record, or NotFoundError
    Insert    → stored record with id and timestamps, or ValidationError
    Update    → updated record, or NotFoundError / ValidationError
    Delete    → None; a missing or foreign id changes nothing

Errors:
    Constraint violations  → ValidationError (400)
    Other SQLAlchemy errors → DatabaseError (500, details logged only)
    No operation retries and nothing is cached between calls.
"""

import logging
import uuid
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, AsyncIterator, Dict, List, Mapping, Optional, Type, TypeVar

from sqlalchemy import delete, func, insert, inspect, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from smartnotes.exceptions import (
    DatabaseError,
    NotFoundError,
    SmartNotesError,
    ValidationError,
)
from smartnotes.models import Folder, Identity, Note, Profile, Tag, note_tags
from smartnotes.session import SessionContext

logger = logging.getLogger(__name__)

Record = TypeVar("Record", Note, Folder, Tag, Profile)

# Human-readable resource names used in error messages
RESOURCE_NAMES: Dict[type, str] = {
    Note: "note",
    Folder: "folder",
    Tag: "tag",
    Profile: "profile",
}

# Never writable through insert/update payloads
PROTECTED_FIELDS = frozenset({"id", "user_id", "created_at", "updated_at"})


class DataAccessFacade:
    """
    Owner-scoped CRUD over the note store.

    Every public method requires an authenticated SessionContext; calling
    one without an identity raises AuthenticationError.
    """

    def __init__(self, db: AsyncSession, context: SessionContext):
        self.db = db
        self.context = context

    @property
    def owner_id(self) -> uuid.UUID:
        return self.context.identity_id

    # ══════════════════════════════════════════════════════════════════════
    # Generic operations
    # ══════════════════════════════════════════════════════════════════════

    async def list(
        self,
        model: Type[Record],
        order_by: str = "created_at",
        descending: bool = True,
        limit: Optional[int] = None,
        **equals: Any,
    ) -> List[Record]:
        """
        List the caller's records, e.g. "my notes, newest first".

        Keyword arguments are equality filters on column names
        (`folder_id=None` matches rows without a folder).
        """
        column = self._column(model, order_by)
        query = self._scoped(model, **equals).order_by(
            column.desc() if descending else column.asc()
        )
        if limit is not None:
            query = query.limit(limit)

        async with self._translate_errors("list", model):
            result = await self.db.execute(query)
            return list(result.scalars().all())

    async def find(self, model: Type[Record], record_id: uuid.UUID) -> Optional[Record]:
        """Get-by-id returning None instead of raising."""
        async with self._translate_errors("fetch", model):
            result = await self.db.execute(self._scoped(model, id=record_id))
            return result.scalar_one_or_none()

    async def get(self, model: Type[Record], record_id: uuid.UUID) -> Record:
        record = await self.find(model, record_id)
        if record is None:
            raise NotFoundError(resource=RESOURCE_NAMES[model], resource_id=str(record_id))
        return record

    async def insert(self, model: Type[Record], payload: Mapping[str, Any]) -> Record:
        """
        Store a new record owned by the caller.

        Any `user_id` in the payload is ignored; the owner always comes from
        the session context.
        """
        fields = self._writable(model, payload)
        await self._check_references(model, fields)
        record = model(**fields, user_id=self.owner_id)

        async with self._translate_errors("create", model):
            self.db.add(record)
            await self.db.flush()

        logger.info("Created %s %s", RESOURCE_NAMES[model], record.id)
        return record

    async def update(
        self,
        model: Type[Record],
        record_id: uuid.UUID,
        fields: Mapping[str, Any],
    ) -> Record:
        """Apply a partial update; protected fields are silently dropped."""
        record = await self.get(model, record_id)
        changes = self._writable(model, fields)
        await self._check_references(model, changes)
        if not changes:
            return record

        for name, value in changes.items():
            setattr(record, name, value)

        async with self._translate_errors("update", model):
            await self.db.flush()

        logger.info("Updated %s %s (%s)", RESOURCE_NAMES[model], record.id, ", ".join(sorted(changes)))
        return record

    async def delete(self, model: Type[Record], record_id: uuid.UUID) -> None:
        """
        Delete one of the caller's records.

        Side effects by model:
            Folder → its notes are detached (folder_id = NULL), not deleted
            Note / Tag → their note_tags links are removed
        """
        record = await self.find(model, record_id)
        if record is None:
            logger.debug("Delete of unknown %s %s ignored", RESOURCE_NAMES[model], record_id)
            return

        async with self._translate_errors("delete", model):
            if model is Folder:
                await self.db.execute(
                    update(Note)
                    .where(Note.folder_id == record.id, Note.user_id == self.owner_id)
                    .values(folder_id=None)
                    .execution_options(synchronize_session="fetch")
                )
            elif model is Note:
                await self.db.execute(delete(note_tags).where(note_tags.c.note_id == record.id))
            elif model is Tag:
                await self.db.execute(delete(note_tags).where(note_tags.c.tag_id == record.id))

            await self.db.delete(record)
            await self.db.flush()

        logger.info("Deleted %s %s", RESOURCE_NAMES[model], record_id)

    async def count(
        self,
        model: Type[Record],
        since: Optional[datetime] = None,
        **equals: Any,
    ) -> int:
        """Count-only query over the caller's records."""
        query = select(func.count()).select_from(model).where(model.user_id == self.owner_id)
        for name, value in equals.items():
            query = query.where(self._column(model, name) == value)
        if since is not None:
            query = query.where(model.created_at >= since)

        async with self._translate_errors("count", model):
            result = await self.db.execute(query)
            return result.scalar() or 0

    # ══════════════════════════════════════════════════════════════════════
    # Profile
    # ══════════════════════════════════════════════════════════════════════

    async def get_profile(self) -> Profile:
        async with self._translate_errors("fetch", Profile):
            result = await self.db.execute(self._scoped(Profile))
            profile = result.scalar_one_or_none()
        if profile is None:
            raise NotFoundError(resource="profile")
        return profile

    async def update_profile(self, fields: Mapping[str, Any]) -> Profile:
        """Update the caller's profile; a new display name is mirrored onto the identity."""
        profile = await self.get_profile()
        profile = await self.update(Profile, profile.id, fields)
        if "full_name" in fields:
            async with self._translate_errors("update", Profile):
                await self.db.execute(
                    update(Identity)
                    .where(Identity.id == self.owner_id)
                    .values(full_name=fields["full_name"])
                    .execution_options(synchronize_session="fetch")
                )
        return profile

    # ══════════════════════════════════════════════════════════════════════
    # Note ↔ Tag links
    # ══════════════════════════════════════════════════════════════════════

    async def attach_tag(self, note_id: uuid.UUID, tag_id: uuid.UUID) -> None:
        """Link a tag to a note. Both must belong to the caller; linking twice is a no-op."""
        await self.get(Note, note_id)
        await self.get(Tag, tag_id)

        async with self._translate_errors("tag", Note):
            existing = await self.db.execute(
                select(note_tags.c.note_id).where(
                    note_tags.c.note_id == note_id,
                    note_tags.c.tag_id == tag_id,
                )
            )
            if existing.first() is None:
                await self.db.execute(insert(note_tags).values(note_id=note_id, tag_id=tag_id))

    async def detach_tag(self, note_id: uuid.UUID, tag_id: uuid.UUID) -> None:
        await self.get(Note, note_id)
        await self.get(Tag, tag_id)

        async with self._translate_errors("untag", Note):
            await self.db.execute(
                delete(note_tags).where(
                    note_tags.c.note_id == note_id,
                    note_tags.c.tag_id == tag_id,
                )
            )

    async def list_note_tags(self, note_id: uuid.UUID) -> List[Tag]:
        return await self.tags_of(await self.get(Note, note_id))

    async def tags_of(self, note: Note) -> List[Tag]:
        """Tags of a note record already loaded through this facade, ordered by name."""
        if note.user_id != self.owner_id:
            raise NotFoundError(resource="note", resource_id=str(note.id))

        async with self._translate_errors("list", Tag):
            result = await self.db.execute(
                select(Tag)
                .join(note_tags, note_tags.c.tag_id == Tag.id)
                .where(note_tags.c.note_id == note.id, Tag.user_id == self.owner_id)
                .order_by(Tag.name)
            )
            return list(result.scalars().all())

    # ══════════════════════════════════════════════════════════════════════
    # Internals
    # ══════════════════════════════════════════════════════════════════════

    def _scoped(self, model: Type[Record], **equals: Any):
        query = select(model).where(model.user_id == self.owner_id)
        for name, value in equals.items():
            query = query.where(self._column(model, name) == value)
        return query

    @staticmethod
    def _column(model: Type[Record], name: str):
        columns = inspect(model).columns
        if name not in columns:
            raise ValidationError(
                message=f"Unknown field '{name}' for {RESOURCE_NAMES[model]}",
                field=name,
            )
        return getattr(model, name)

    @staticmethod
    def _writable(model: Type[Record], payload: Mapping[str, Any]) -> Dict[str, Any]:
        columns = inspect(model).columns
        unknown = [name for name in payload if name not in columns]
        if unknown:
            raise ValidationError(
                message=f"Unknown field(s) for {RESOURCE_NAMES[model]}: {', '.join(sorted(unknown))}",
                context={"fields": sorted(unknown)},
            )
        return {
            name: value.value if hasattr(value, "value") else value
            for name, value in payload.items()
            if name not in PROTECTED_FIELDS
        }

    async def _check_references(self, model: Type[Record], fields: Mapping[str, Any]) -> None:
        # A note may only be filed into one of the caller's own folders
        if model is Note and fields.get("folder_id") is not None:
            if await self.find(Folder, fields["folder_id"]) is None:
                raise ValidationError(
                    message="The selected folder does not exist.",
                    field="folder_id",
                )

    @asynccontextmanager
    async def _translate_errors(self, action: str, model: type) -> AsyncIterator[None]:
        resource = RESOURCE_NAMES.get(model, "record")
        try:
            yield
        except SmartNotesError:
            raise
        except IntegrityError as e:
            logger.warning("Constraint violation on %s %s: %s", action, resource, e.orig)
            raise ValidationError(
                message=f"Could not {action} {resource}: a required field is missing or invalid.",
                context={"resource": resource},
            )
        except SQLAlchemyError as e:
            logger.error("Database error on %s %s: %s", action, resource, str(e), exc_info=True)
            raise DatabaseError(
                message=f"Could not {action} the {resource}. Please try again.",
                context={"resource": resource, "error_type": type(e).__name__},
            )
