"""
SmartNotes Backend — Abstract Summarization Service Interface
===============================================================

What:  Abstract base class defining the contract for AI summarization.
Why:   Routes depend on this interface, not on a provider. Tests swap in a
       mock; a different model vendor only needs a new subclass.
How:   Concrete implementations inherit from SummarizationService and
       implement summarize() and health_check().
Who:   Called by POST /api/summarize and the health endpoint.
"""

from abc import ABC, abstractmethod

from smartnotes.config import settings
from smartnotes.exceptions import ValidationError
from smartnotes.schemas.summary import SummarizeRequest, SummarizeResponse


def validate_content(content: str) -> None:
    """
    Reject input that must never reach a model.

    Raises:
        ValidationError: blank content, or more than settings.max_content_chars
    """
    if not content or not content.strip():
        raise ValidationError(
            message="Please enter some text to summarize.",
            field="content",
        )
    if len(content) > settings.max_content_chars:
        raise ValidationError(
            message=(
                f"Content is too long ({len(content):,} characters). "
                f"Maximum is {settings.max_content_chars:,}."
            ),
            field="content",
            context={"max_chars": settings.max_content_chars, "actual_chars": len(content)},
        )


class SummarizationService(ABC):
    """
    Abstract interface for AI-powered text summarization.

    Contract:
        - summarize() is a pure request/response call; it never persists
        - Empty or over-long content is rejected with ValidationError before
          any network call
        - Upstream and transport failures surface as LLMServiceError
        - A response that does not match SummarizeResponse is reported as
          LLMServiceError ("malformed response"), never partially returned
        - The caller sees exactly one attempt; any transport-level retry
          stays inside the implementation

    Implementations:
        - GeminiService: Google Gemini (default)
    """

    @abstractmethod
    async def summarize(self, request: SummarizeRequest) -> SummarizeResponse:
        """
        Summarize `request.content` into a title, summary body and keywords.

        Raises:
            ValidationError: content empty or longer than max_content_chars
            LLMServiceError: upstream failure or malformed model output
            CircuitBreakerOpenError: upstream marked unavailable
        """
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """Lightweight reachability check. Must not consume generation quota."""
        ...
