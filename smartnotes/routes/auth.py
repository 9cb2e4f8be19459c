"""
SmartNotes Backend — Authentication Route Handlers
====================================================

What:  Sign-up, sign-in, sign-out and "who am I" under /api/auth.
Who:   Called by the Auth page and by the session check every protected
       page runs on load.

Tokens are returned in the response body and sent back by the client as
`Authorization: Bearer <token>`. Signing out deletes the server-side
session, so the token stops working immediately.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from smartnotes.database import get_db_session
from smartnotes.dependencies import bearer_scheme, require_session
from smartnotes.exceptions import AuthenticationError
from smartnotes.schemas.auth import (
    IdentityResponse,
    SessionResponse,
    SignInRequest,
    SignUpRequest,
)
from smartnotes.schemas.common import ErrorResponse
from smartnotes.services.auth_service import IssuedSession, auth_service
from smartnotes.session import SessionContext

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


def _session_response(issued: IssuedSession) -> SessionResponse:
    return SessionResponse(
        access_token=issued.access_token,
        expires_at=issued.expires_at,
        user=IdentityResponse.model_validate(issued.identity),
    )


@router.post(
    "/signup",
    response_model=SessionResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"description": "Email already registered", "model": ErrorResponse}},
    summary="Create an account and sign in",
)
async def sign_up(
    payload: SignUpRequest,
    db: AsyncSession = Depends(get_db_session),
) -> SessionResponse:
    issued = await auth_service.sign_up(
        db,
        email=payload.email,
        password=payload.password,
        full_name=payload.full_name,
    )
    return _session_response(issued)


@router.post(
    "/signin",
    response_model=SessionResponse,
    responses={401: {"description": "Invalid email or password", "model": ErrorResponse}},
    summary="Sign in with email and password",
)
async def sign_in(
    payload: SignInRequest,
    db: AsyncSession = Depends(get_db_session),
) -> SessionResponse:
    issued = await auth_service.sign_in(db, email=payload.email, password=payload.password)
    return _session_response(issued)


@router.post(
    "/signout",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="End the current session",
)
async def sign_out(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    """
    Without a session this is a no-op and still returns 204, including for
    a token that is expired, tampered with or already signed out.
    """
    if credentials is not None and credentials.credentials:
        try:
            context = await auth_service.resolve(db, credentials.credentials)
        except AuthenticationError:
            logger.info("Sign-out with an unusable token; nothing to end")
        else:
            await auth_service.sign_out(db, context)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/me",
    response_model=IdentityResponse,
    responses={401: {"description": "Not signed in", "model": ErrorResponse}},
    summary="The signed-in identity",
)
async def me(context: SessionContext = Depends(require_session)) -> IdentityResponse:
    return IdentityResponse.model_validate(context.require_identity())
