"""
Profile and dashboard endpoints.
"""

import logging

from fastapi import APIRouter, Depends

from smartnotes.dependencies import get_facade
from smartnotes.schemas.note import DashboardResponse
from smartnotes.schemas.organize import ProfileResponse, ProfileUpdate
from smartnotes.services.data_access import DataAccessFacade
from smartnotes.services.note_service import note_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Profile"])


@router.get("/profile", response_model=ProfileResponse, summary="The caller's profile")
async def get_profile(facade: DataAccessFacade = Depends(get_facade)) -> ProfileResponse:
    return ProfileResponse.model_validate(await facade.get_profile())


@router.patch("/profile", response_model=ProfileResponse, summary="Update display name or avatar")
async def update_profile(
    payload: ProfileUpdate,
    facade: DataAccessFacade = Depends(get_facade),
) -> ProfileResponse:
    profile = await facade.update_profile(payload.model_dump(exclude_unset=True))
    return ProfileResponse.model_validate(profile)


@router.get(
    "/dashboard",
    response_model=DashboardResponse,
    summary="Greeting, recent notes and counters",
)
async def dashboard(facade: DataAccessFacade = Depends(get_facade)) -> DashboardResponse:
    return await note_service.dashboard(facade)
