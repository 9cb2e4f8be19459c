"""
SmartNotes Backend — Session Context
======================================

What:  The explicit, per-request holder of the current identity.
Why:   No module keeps a global "current user". Anything that needs the
       identity receives a SessionContext (FastAPI builds one per request in
       smartnotes.dependencies) and the DataAccessFacade scopes every query
       by it.

Lifecycle:
    - Built from the bearer token when the request arrives
    - Unauthenticated when no token is sent (identity is None)
    - Torn down by sign-out, which deletes the session row the token names
"""

import uuid
from dataclasses import dataclass
from typing import Optional

from smartnotes.exceptions import AuthenticationError
from smartnotes.models.identity import Identity


@dataclass(frozen=True)
class SessionContext:
    identity: Optional[Identity] = None
    session_id: Optional[uuid.UUID] = None

    @property
    def is_authenticated(self) -> bool:
        return self.identity is not None

    @property
    def identity_id(self) -> uuid.UUID:
        return self.require_identity().id

    def require_identity(self) -> Identity:
        """Return the signed-in identity or raise AuthenticationError (401)."""
        if self.identity is None:
            raise AuthenticationError()
        return self.identity
