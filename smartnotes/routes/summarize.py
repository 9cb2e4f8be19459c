"""
SmartNotes Backend — Summarize Route Handler
==============================================

What:  POST /api/summarize, the request/response summarization call.
Why:   First half of note creation; the client shows the result for review
       and saves it with POST /api/notes.
Who:   Called by the New Note page.

Nothing is persisted here. A failed call leaves the store untouched and
the user can simply submit again; the service itself never retries.

Security Checks (this route):
    - Authentication: require_session (401 otherwise)
    - Rate limit: RateLimitMiddleware (429)
    - Content size: SummarizationService (400)
"""

import logging

from fastapi import APIRouter, Depends

from smartnotes.dependencies import require_session
from smartnotes.schemas.common import ErrorResponse
from smartnotes.schemas.summary import SummarizeRequest, SummarizeResponse
from smartnotes.services.gemini_service import gemini_service
from smartnotes.services.llm_base import SummarizationService, validate_content
from smartnotes.session import SessionContext

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Summarize"])


def get_summarizer() -> SummarizationService:
    """Overridable in tests via app.dependency_overrides."""
    return gemini_service


@router.post(
    "/summarize",
    response_model=SummarizeResponse,
    responses={
        400: {"description": "Empty or too-long content", "model": ErrorResponse},
        401: {"description": "Not signed in", "model": ErrorResponse},
        429: {"description": "Rate limit exceeded", "model": ErrorResponse},
        503: {"description": "AI service unavailable or malformed response", "model": ErrorResponse},
    },
    summary="Summarize text into a title, summary and keywords",
)
async def summarize(
    payload: SummarizeRequest,
    context: SessionContext = Depends(require_session),
    summarizer: SummarizationService = Depends(get_summarizer),
) -> SummarizeResponse:
    logger.info(
        "Summarize request from %s: %d chars",
        context.identity_id,
        len(payload.content),
    )
    validate_content(payload.content)
    return await summarizer.summarize(payload)
