"""
SmartNotes Backend — Folder and Tag Route Handlers
====================================================

What:  CRUD for folders (/api/folders) and tags (/api/tags).
How:   Thin wrappers over DataAccessFacade; all scoping happens there.

Deleting a folder keeps its notes (they become unfiled). Deleting a tag
removes it from every note it was attached to.
"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status

from smartnotes.dependencies import get_facade
from smartnotes.models import Folder, Tag
from smartnotes.schemas.common import ErrorResponse
from smartnotes.schemas.organize import (
    FolderCreate,
    FolderResponse,
    FolderUpdate,
    TagCreate,
    TagResponse,
    TagUpdate,
)
from smartnotes.services.data_access import DataAccessFacade

router = APIRouter(prefix="/api")

_NOT_FOUND = {404: {"description": "Not found", "model": ErrorResponse}}


# ══════════════════════════════════════════════════════════════════════════
# Folders
# ══════════════════════════════════════════════════════════════════════════

@router.get("/folders", response_model=List[FolderResponse], tags=["Folders"])
async def list_folders(facade: DataAccessFacade = Depends(get_facade)) -> List[FolderResponse]:
    folders = await facade.list(Folder, order_by="name", descending=False)
    return [FolderResponse.model_validate(f) for f in folders]


@router.post(
    "/folders",
    response_model=FolderResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Folders"],
)
async def create_folder(
    payload: FolderCreate,
    facade: DataAccessFacade = Depends(get_facade),
) -> FolderResponse:
    return FolderResponse.model_validate(await facade.insert(Folder, payload.model_dump()))


@router.patch("/folders/{folder_id}", response_model=FolderResponse, responses=_NOT_FOUND, tags=["Folders"])
async def update_folder(
    folder_id: UUID,
    payload: FolderUpdate,
    facade: DataAccessFacade = Depends(get_facade),
) -> FolderResponse:
    folder = await facade.update(Folder, folder_id, payload.model_dump(exclude_unset=True))
    return FolderResponse.model_validate(folder)


@router.delete("/folders/{folder_id}", status_code=status.HTTP_204_NO_CONTENT, tags=["Folders"])
async def delete_folder(
    folder_id: UUID,
    facade: DataAccessFacade = Depends(get_facade),
) -> Response:
    await facade.delete(Folder, folder_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ══════════════════════════════════════════════════════════════════════════
# Tags
# ══════════════════════════════════════════════════════════════════════════

@router.get("/tags", response_model=List[TagResponse], tags=["Tags"])
async def list_tags(facade: DataAccessFacade = Depends(get_facade)) -> List[TagResponse]:
    tags = await facade.list(Tag, order_by="name", descending=False)
    return [TagResponse.model_validate(t) for t in tags]


@router.post(
    "/tags",
    response_model=TagResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Tags"],
)
async def create_tag(
    payload: TagCreate,
    facade: DataAccessFacade = Depends(get_facade),
) -> TagResponse:
    return TagResponse.model_validate(await facade.insert(Tag, payload.model_dump()))


@router.patch("/tags/{tag_id}", response_model=TagResponse, responses=_NOT_FOUND, tags=["Tags"])
async def update_tag(
    tag_id: UUID,
    payload: TagUpdate,
    facade: DataAccessFacade = Depends(get_facade),
) -> TagResponse:
    tag = await facade.update(Tag, tag_id, payload.model_dump(exclude_unset=True))
    return TagResponse.model_validate(tag)


@router.delete("/tags/{tag_id}", status_code=status.HTTP_204_NO_CONTENT, tags=["Tags"])
async def delete_tag(
    tag_id: UUID,
    facade: DataAccessFacade = Depends(get_facade),
) -> Response:
    await facade.delete(Tag, tag_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
