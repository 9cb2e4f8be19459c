"""
SmartNotes Backend — Request ID Middleware
============================================

What:  Assigns a correlation ID to each request and echoes it back.
How:   Uses the client's X-Request-ID when present, otherwise a short UUID.
       Stored in a ContextVar (for loggers and error handlers) and on
       request.state (for route handlers).

Every error body carries the same ID, so a user report can be matched to
the server log lines of that request.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one thread each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

MAX_CLIENT_ID_LENGTH = 64


class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        client_rid = request.headers.get("X-Request-ID", "")
        if client_rid and len(client_rid) <= MAX_CLIENT_ID_LENGTH:
            rid = client_rid
        else:
            rid = str(uuid.uuid4())[:8]

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers["X-Request-ID"] = rid
        return response
