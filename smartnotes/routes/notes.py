"""
SmartNotes Backend — Notes Route Handlers
===========================================

What:  Note CRUD, search, export and tag links under /api/notes.
How:   Extracts path/query parameters, delegates to NoteService, returns JSON
       (or a file download for export).
Who:   Called by the list, detail and creation pages of the frontend.

Every handler depends on get_facade, so an unauthenticated request is
rejected with 401 before any handler code runs.

Caching Strategy:
    Notes are mutable and private: every response is `Cache-Control: no-store`
    except export downloads, which are `private, no-cache`.
"""

import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status

from smartnotes.dependencies import get_facade
from smartnotes.schemas.common import ErrorResponse
from smartnotes.schemas.note import (
    NoteCreate,
    NoteDetailResponse,
    NoteListResponse,
    NoteResponse,
    NoteUpdate,
)
from smartnotes.services.data_access import DataAccessFacade
from smartnotes.services.note_service import note_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/notes", tags=["Notes"])

_NOT_FOUND = {404: {"description": "Note not found", "model": ErrorResponse}}
_UNAUTHORIZED = {401: {"description": "Not signed in", "model": ErrorResponse}}


@router.post(
    "",
    response_model=NoteResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"description": "Invalid note", "model": ErrorResponse}, **_UNAUTHORIZED},
    summary="Save a summarized note",
)
async def create_note(
    payload: NoteCreate,
    facade: DataAccessFacade = Depends(get_facade),
) -> NoteResponse:
    return await note_service.create_note(facade, payload)


@router.get(
    "",
    response_model=NoteListResponse,
    responses=_UNAUTHORIZED,
    summary="List notes, newest first",
    description=(
        "Returns the caller's notes ordered by creation time, newest first. "
        "`q` narrows the list to notes whose title, summary or keywords contain "
        "it (case-insensitive). X-Total-Count carries the unfiltered count."
    ),
)
async def list_notes(
    response: Response,
    q: Optional[str] = Query(default=None, description="Case-insensitive search text"),
    folder_id: Optional[UUID] = Query(default=None, description="Only notes in this folder"),
    limit: Optional[int] = Query(default=None, ge=1, le=1000),
    facade: DataAccessFacade = Depends(get_facade),
) -> NoteListResponse:
    result = await note_service.list_notes(facade, query=q, folder_id=folder_id, limit=limit)
    response.headers["X-Total-Count"] = str(result.total_count)
    response.headers["Cache-Control"] = "no-store"
    return result


@router.get(
    "/{note_id}",
    response_model=NoteDetailResponse,
    responses={**_NOT_FOUND, **_UNAUTHORIZED},
    summary="Get a single note with its tags",
)
async def get_note(
    note_id: UUID,
    response: Response,
    facade: DataAccessFacade = Depends(get_facade),
) -> NoteDetailResponse:
    """
    Invalid UUIDs return 422 (FastAPI default). A valid id that belongs to
    someone else is indistinguishable from a missing one: 404.
    """
    result = await note_service.get_note(facade, note_id)
    response.headers["Cache-Control"] = "no-store"
    return result


@router.patch(
    "/{note_id}",
    response_model=NoteResponse,
    responses={**_NOT_FOUND, **_UNAUTHORIZED},
    summary="Edit a note",
)
async def update_note(
    note_id: UUID,
    payload: NoteUpdate,
    facade: DataAccessFacade = Depends(get_facade),
) -> NoteResponse:
    return await note_service.update_note(facade, note_id, payload)


@router.delete(
    "/{note_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=_UNAUTHORIZED,
    summary="Delete a note",
)
async def delete_note(
    note_id: UUID,
    facade: DataAccessFacade = Depends(get_facade),
) -> Response:
    await note_service.delete_note(facade, note_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/{note_id}/export",
    responses={
        200: {"description": "Note document", "content": {"text/plain": {}, "text/markdown": {}}},
        400: {"description": "Unsupported format", "model": ErrorResponse},
        **_NOT_FOUND,
        **_UNAUTHORIZED,
    },
    summary="Download a note as plain text or Markdown",
)
async def export_note(
    note_id: UUID,
    format: str = Query(default="txt", description="'txt' or 'md'"),
    facade: DataAccessFacade = Depends(get_facade),
) -> Response:
    filename, body, media_type = await note_service.export_note(facade, note_id, format)
    return Response(
        content=body,
        media_type=media_type,
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
            "Cache-Control": "private, no-cache",
        },
    )


@router.post(
    "/{note_id}/tags/{tag_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"description": "Note or tag not found", "model": ErrorResponse}, **_UNAUTHORIZED},
    summary="Tag a note",
)
async def attach_tag(
    note_id: UUID,
    tag_id: UUID,
    facade: DataAccessFacade = Depends(get_facade),
) -> Response:
    await facade.attach_tag(note_id, tag_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/{note_id}/tags/{tag_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"description": "Note or tag not found", "model": ErrorResponse}, **_UNAUTHORIZED},
    summary="Remove a tag from a note",
)
async def detach_tag(
    note_id: UUID,
    tag_id: UUID,
    facade: DataAccessFacade = Depends(get_facade),
) -> Response:
    await facade.detach_tag(note_id, tag_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
