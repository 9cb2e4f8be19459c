"""
SmartNotes Backend — Request Dependencies
===========================================

FastAPI dependencies that build the per-request SessionContext and the
DataAccessFacade bound to it. Within one request FastAPI caches each
dependency, so the facade and the context share a single database session.
"""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from smartnotes.database import get_db_session
from smartnotes.services.auth_service import auth_service
from smartnotes.services.data_access import DataAccessFacade
from smartnotes.session import SessionContext

# auto_error=False: a missing header yields an unauthenticated context and
# the 401 comes from our own AuthenticationError handler.
bearer_scheme = HTTPBearer(auto_error=False)


async def get_session_context(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db_session),
) -> SessionContext:
    if credentials is None or not credentials.credentials:
        return SessionContext()
    return await auth_service.resolve(db, credentials.credentials)


async def require_session(
    context: SessionContext = Depends(get_session_context),
) -> SessionContext:
    """Reject the request with 401 unless it carries a live session."""
    context.require_identity()
    return context


async def get_facade(
    db: AsyncSession = Depends(get_db_session),
    context: SessionContext = Depends(require_session),
) -> DataAccessFacade:
    return DataAccessFacade(db, context)
