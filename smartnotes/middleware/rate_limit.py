"""
SmartNotes Backend — Summarize Rate Limiting Middleware
=========================================================

What:  Per-client sliding window limit on the summarization endpoint.
Why:   Each summarize call spends model quota; CRUD endpoints do not and
       are left unthrottled.
How:   Keeps request timestamps per client IP in memory. Only paths under
       LIMITED_PREFIXES are counted.

Algorithm: Sliding Window Counter
    1. Each client gets a list of request timestamps
    2. On each limited request, drop timestamps older than the window
    3. If the remaining count >= limit, reject with 429
    4. Otherwise record the request and let it through

    Single-process only; a multi-worker deployment needs shared storage.
"""

import logging
import time
from collections import defaultdict
from typing import Dict, List

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from smartnotes.config import settings
from smartnotes.exceptions import RateLimitExceededError
from smartnotes.middleware.request_id import request_id_var

logger = logging.getLogger(__name__)


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    In-memory sliding window rate limiter for model-backed endpoints.

    Configuration (from settings):
        rate_limit_requests: Max summarize calls per window (default: 30)
        rate_limit_window: Window duration in seconds (default: 3600)

    Response on rate limit:
        HTTP 429 with a Retry-After header and the standard error body.
    """

    LIMITED_PREFIXES = ("/api/summarize",)

    def __init__(self, app, **kwargs):
        super().__init__(app, **kwargs)
        self._requests: Dict[str, List[float]] = defaultdict(list)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.method == "OPTIONS" or not request.url.path.startswith(self.LIMITED_PREFIXES):
            return await call_next(request)

        client_ip = (
            getattr(request.client, "host", "unknown")
            if request.client
            else "unknown"
        )

        now = time.time()
        window_start = now - settings.rate_limit_window

        self._requests[client_ip] = [
            ts for ts in self._requests[client_ip] if ts > window_start
        ]

        if len(self._requests[client_ip]) >= settings.rate_limit_requests:
            oldest = self._requests[client_ip][0]
            retry_after = int(oldest + settings.rate_limit_window - now) + 1
            exc = RateLimitExceededError(retry_after=retry_after)

            logger.warning(
                "Summarize rate limit exceeded for %s: %d requests in %ds window",
                client_ip,
                len(self._requests[client_ip]),
                settings.rate_limit_window,
            )

            return JSONResponse(
                status_code=429,
                content={
                    "error": "rate_limit_exceeded",
                    "message": exc.message,
                    "details": exc.context,
                    "request_id": request_id_var.get("") or None,
                },
                headers={"Retry-After": str(retry_after)},
            )

        self._requests[client_ip].append(now)

        # Drop idle clients now and then so the table stays bounded
        if len(self._requests) > 1000:
            self._cleanup_inactive_clients(window_start)

        return await call_next(request)

    def _cleanup_inactive_clients(self, window_start: float) -> None:
        inactive = [
            ip for ip, timestamps in self._requests.items()
            if not timestamps or timestamps[-1] < window_start
        ]
        for ip in inactive:
            del self._requests[ip]

        if inactive:
            logger.debug("Cleaned up %d inactive rate-limit entries", len(inactive))

    def reset(self) -> None:
        """Forget every recorded request."""
        self._requests.clear()
