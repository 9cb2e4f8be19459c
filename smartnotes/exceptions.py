"""
SmartNotes Backend — Custom Exception Hierarchy
=================================================

What:  Application-specific exceptions for every error class the API surfaces.
Why:   Services raise meaningful exceptions; global handlers in main.py turn
       them into HTTP responses with the right status code and a uniform body.
How:   Each exception carries a user-safe `message` and a `context` dict that
       is logged server-side but not necessarily returned to the client.

Exception Hierarchy:
    SmartNotesError (base)
    ├── ValidationError          → 400 Bad Request (client can fix)
    ├── AuthenticationError      → 401 Unauthorized
    ├── NotFoundError            → 404 Not Found (missing OR owned by someone else)
    ├── ConflictError            → 409 Conflict
    ├── RateLimitExceededError   → 429 Too Many Requests
    ├── LLMServiceError          → 503 Service Unavailable
    ├── CircuitBreakerOpenError  → 503 Service Unavailable (circuit open)
    └── DatabaseError            → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class SmartNotesError(Exception):
    """
    Base exception for all SmartNotes application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, returned only for 4xx errors)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(SmartNotesError):
    """
    Raised when client input fails a business rule.

    When:  Empty content submitted for summarization, content too long,
           unsupported export format, folder id not owned by the caller.
    HTTP:  400 Bad Request. Schema-level problems stay FastAPI's 422.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class AuthenticationError(SmartNotesError):
    """
    Raised when there is no valid session for the request.

    When:  Missing/expired/revoked bearer token, wrong email or password.
    HTTP:  401 Unauthorized
    """

    def __init__(
        self,
        message: str = "Authentication required. Please sign in.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(SmartNotesError):
    """
    Raised when a requested resource does not exist for the caller.

    Records owned by another identity are reported exactly like missing
    ones so that ids of foreign records cannot be discovered.
    HTTP:  404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource = resource


class ConflictError(SmartNotesError):
    """
    Raised when a write collides with existing state.

    When:  Sign-up with an email that is already registered.
    HTTP:  409 Conflict
    """

    def __init__(
        self,
        message: str = "The resource already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class LLMServiceError(SmartNotesError):
    """
    Raised when the summarization model cannot produce a usable result.

    Covers transport failures, upstream AI errors and malformed responses
    (missing title/summary, non-JSON output). The draft content is not
    touched, so the user can simply try again.
    HTTP:  503 Service Unavailable
    """

    def __init__(
        self,
        message: str = "AI summarization service is temporarily unavailable",
        retry_after: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if retry_after:
            ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after


class CircuitBreakerOpenError(SmartNotesError):
    """
    Raised when the circuit breaker is in OPEN state.

    How circuit breaker works:
        CLOSED (normal) → failures increment counter
        → After N failures → OPEN (reject all calls for recovery_timeout seconds)
        → After timeout → HALF-OPEN (allow one test call)
        → Test succeeds → CLOSED; test fails → OPEN again
    HTTP:  503 Service Unavailable
    """

    def __init__(
        self,
        recovery_time: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"AI service is temporarily unavailable due to repeated failures. "
            f"Please try again in approximately {recovery_time} seconds."
        )
        ctx = context or {}
        ctx["recovery_time"] = recovery_time
        super().__init__(message=message, context=ctx)
        self.recovery_time = recovery_time


class DatabaseError(SmartNotesError):
    """
    Raised when database operations fail unexpectedly.

    The message returned to the client is always generic; SQL details are
    logged server-side only.
    HTTP:  500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RateLimitExceededError(SmartNotesError):
    """
    Raised when a client exceeds the summarize rate limit.

    HTTP:  429 Too Many Requests, with a Retry-After header.
    """

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Rate limit exceeded. Please wait {retry_after} seconds before making more requests."
        )
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after
