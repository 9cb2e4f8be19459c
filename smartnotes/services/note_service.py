"""
SmartNotes Backend — Note Service (Business Logic Orchestrator)
================================================================

What:  The note flows: save, list with search, detail, edit, delete, export
       and the dashboard digest.
Why:   Keeps business rules out of the route handlers, independent of HTTP.
How:   Composes DataAccessFacade (owner-scoped storage), the search filter
       and the export formatter.
Who:   Called by the notes and dashboard route handlers.

Orchestration Flow (note creation):
    ┌────────────┐    ┌──────────────┐    ┌──────────────┐
    │ Summarize  │───▶│  Review /    │───▶│  Save        │
    │ (no write) │    │  edit title  │    │  (facade)    │
    └────────────┘    └──────────────┘    └──────────────┘

    Summarization and saving are separate requests: a failed summarize
    writes nothing, and a failed save leaves no partial row.

Design Decision:
    NoteService is stateless. The facade (and through it the identity) is
    passed in on every call, so ownership can never leak between requests.
"""

import logging
from datetime import timedelta
from typing import Optional, Tuple
from uuid import UUID

from smartnotes.models import Note
from smartnotes.models.base import utcnow
from smartnotes.schemas.note import (
    DashboardResponse,
    NoteCreate,
    NoteDetailResponse,
    NoteListResponse,
    NoteResponse,
    NoteUpdate,
    TagRef,
)
from smartnotes.services.auth_service import first_name_of
from smartnotes.services.data_access import DataAccessFacade
from smartnotes.services.export import render_export
from smartnotes.services.search import filter_notes

logger = logging.getLogger(__name__)

RECENT_NOTES_LIMIT = 5
WEEK = timedelta(days=7)


class NoteService:
    """
    Business logic layer for note operations.

    Error Handling Strategy:
        Errors come from the facade already translated: NotFoundError for
        missing or foreign notes, ValidationError for bad payloads,
        DatabaseError for everything else. They propagate unchanged.
    """

    async def create_note(self, facade: DataAccessFacade, payload: NoteCreate) -> NoteResponse:
        """
        Persist a generated summary as a new note.

        `original_content` is stored exactly as submitted. The owner comes
        from the facade's session, never from the payload.

        Raises:
            ValidationError: folder_id does not name one of the caller's folders
        """
        note = await facade.insert(Note, payload.model_dump())
        logger.info("Note %s saved (%d chars, %d keywords)", note.id, len(note.original_content), len(note.keywords or []))
        return NoteResponse.model_validate(note)

    async def list_notes(
        self,
        facade: DataAccessFacade,
        query: Optional[str] = None,
        folder_id: Optional[UUID] = None,
        limit: Optional[int] = None,
    ) -> NoteListResponse:
        """
        The caller's notes, newest first, narrowed by the search query.

        The full list is fetched once; `query` is applied in memory and never
        triggers another database round-trip. `total_count` is the number of
        notes before the search filter.
        """
        filters = {"folder_id": folder_id} if folder_id is not None else {}
        notes = await facade.list(Note, order_by="created_at", descending=True, limit=limit, **filters)
        matching = filter_notes(notes, query)
        return NoteListResponse(
            notes=[NoteResponse.model_validate(n) for n in matching],
            total_count=len(notes),
        )

    async def get_note(self, facade: DataAccessFacade, note_id: UUID) -> NoteDetailResponse:
        """
        Raises:
            NotFoundError: no such note for this identity (→ 404)
        """
        note = await facade.get(Note, note_id)
        tags = await facade.tags_of(note)
        detail = NoteDetailResponse.model_validate(note)
        detail.tags = [TagRef.model_validate(t) for t in tags]
        return detail

    async def update_note(
        self,
        facade: DataAccessFacade,
        note_id: UUID,
        payload: NoteUpdate,
    ) -> NoteResponse:
        changes = payload.model_dump(exclude_unset=True)
        if "keywords" in changes and changes["keywords"] is None:
            changes["keywords"] = []
        note = await facade.update(Note, note_id, changes)
        return NoteResponse.model_validate(note)

    async def delete_note(self, facade: DataAccessFacade, note_id: UUID) -> None:
        await facade.delete(Note, note_id)

    async def export_note(
        self,
        facade: DataAccessFacade,
        note_id: UUID,
        fmt: str,
    ) -> Tuple[str, bytes, str]:
        """Returns (filename, document bytes, media type) for a download response."""
        note = await facade.get(Note, note_id)
        filename, body, media_type = render_export(note, fmt)
        logger.info("Note %s exported as %s (%d bytes)", note_id, fmt, len(body))
        return filename, body, media_type

    async def dashboard(self, facade: DataAccessFacade) -> DashboardResponse:
        """
        Greeting, 5 most recent notes and two counters.

        Both counters are count-only queries; no note bodies are fetched
        for them.
        """
        profile_name = facade.context.require_identity().full_name
        recent = await facade.list(Note, limit=RECENT_NOTES_LIMIT)
        total = await facade.count(Note)
        this_week = await facade.count(Note, since=utcnow() - WEEK)

        return DashboardResponse(
            first_name=first_name_of(profile_name),
            recent_notes=[NoteResponse.model_validate(n) for n in recent],
            total_notes=total,
            notes_this_week=this_week,
        )


# ── Singleton Instance ────────────────────────────────────────────────────
note_service = NoteService()
