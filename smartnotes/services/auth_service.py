"""
SmartNotes Backend — Authentication Service
=============================================

What:  Sign-up, sign-in, sign-out and bearer-token resolution.
Why:   Every data operation is scoped by the identity this service resolves.
How:   Passwords are hashed with passlib; access tokens are JWTs signed with
       python-jose. Each token names a row in `auth_sessions` (claim `sid`),
       so sign-out takes effect immediately by deleting that row.

Token claims:
    sub: identity id
    sid: session id
    exp: expiry (settings.access_token_ttl_minutes)
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from smartnotes.config import settings
from smartnotes.exceptions import AuthenticationError, ConflictError
from smartnotes.models import AuthSession, Identity, Profile
from smartnotes.models.base import utcnow
from smartnotes.session import SessionContext

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

INVALID_CREDENTIALS = "Invalid email or password. Please try again."
EMAIL_TAKEN = "This email is already registered. Please sign in instead."


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


@dataclass
class IssuedSession:
    """A freshly opened session and the token that refers to it."""
    access_token: str
    expires_at: datetime
    identity: Identity


class AuthService:
    """
    Stateless; receives the database session on every call.

    Error Handling:
        Wrong credentials and every kind of unusable token raise
        AuthenticationError (401). A duplicate email raises ConflictError.
    """

    async def sign_up(
        self,
        db: AsyncSession,
        email: str,
        password: str,
        full_name: str,
    ) -> IssuedSession:
        """
        Register a new identity, create its profile, and sign it in.

        The profile is created in the same transaction as the identity, so
        an identity never exists without one.
        """
        normalized = email.strip().lower()
        existing = await db.execute(select(Identity.id).where(Identity.email == normalized))
        if existing.scalar_one_or_none() is not None:
            raise ConflictError(message=EMAIL_TAKEN, context={"field": "email"})

        identity = Identity(
            email=normalized,
            password_hash=hash_password(password),
            full_name=full_name.strip(),
        )
        db.add(identity)
        try:
            await db.flush()
        except IntegrityError:
            # Lost a race with a concurrent sign-up for the same email
            await db.rollback()
            raise ConflictError(message=EMAIL_TAKEN, context={"field": "email"})

        db.add(Profile(user_id=identity.id, full_name=identity.full_name))
        await db.flush()
        logger.info("Identity created: %s", identity.id)

        return await self._open_session(db, identity)

    async def sign_in(self, db: AsyncSession, email: str, password: str) -> IssuedSession:
        result = await db.execute(
            select(Identity).where(Identity.email == email.strip().lower())
        )
        identity = result.scalar_one_or_none()
        if identity is None or not verify_password(password, identity.password_hash):
            logger.info("Rejected sign-in attempt")
            raise AuthenticationError(message=INVALID_CREDENTIALS)
        return await self._open_session(db, identity)

    async def sign_out(self, db: AsyncSession, context: SessionContext) -> None:
        """End the session behind `context`. Signing out twice is harmless."""
        if context.session_id is None:
            return
        await db.execute(delete(AuthSession).where(AuthSession.id == context.session_id))
        await db.flush()
        logger.info("Session %s signed out", context.session_id)

    async def resolve(self, db: AsyncSession, token: str) -> SessionContext:
        """
        Turn a bearer token into a SessionContext.

        Raises:
            AuthenticationError: bad signature, expired, malformed claims,
                session signed out, or identity gone.
        """
        try:
            payload = jwt.decode(
                token,
                settings.jwt_secret_key,
                algorithms=[settings.jwt_algorithm],
            )
            identity_id = uuid.UUID(payload["sub"])
            session_id = uuid.UUID(payload["sid"])
        except (JWTError, KeyError, TypeError, ValueError):
            raise AuthenticationError(message="Your session is invalid or has expired. Please sign in again.")

        result = await db.execute(
            select(Identity)
            .join(AuthSession, AuthSession.user_id == Identity.id)
            .where(AuthSession.id == session_id, Identity.id == identity_id)
        )
        identity = result.scalar_one_or_none()
        if identity is None:
            raise AuthenticationError(message="Your session has ended. Please sign in again.")

        return SessionContext(identity=identity, session_id=session_id)

    async def _open_session(self, db: AsyncSession, identity: Identity) -> IssuedSession:
        expires_at = utcnow() + timedelta(minutes=settings.access_token_ttl_minutes)
        session = AuthSession(user_id=identity.id, expires_at=expires_at)
        db.add(session)
        await db.flush()

        token = jwt.encode(
            {"sub": str(identity.id), "sid": str(session.id), "exp": expires_at},
            settings.jwt_secret_key,
            algorithm=settings.jwt_algorithm,
        )
        return IssuedSession(access_token=token, expires_at=expires_at, identity=identity)


def first_name_of(full_name: Optional[str]) -> str:
    """Greeting name for the dashboard: first word of the display name."""
    if full_name and full_name.strip():
        return full_name.split()[0]
    return "there"


# ── Singleton Instance ────────────────────────────────────────────────────
auth_service = AuthService()
