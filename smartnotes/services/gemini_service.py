"""
SmartNotes Backend — Google Gemini Summarization Service
==========================================================

What:  Concrete SummarizationService backed by Google Gemini.
Why:   Gemini's JSON response mode lets one call return title, summary and
       keywords together, which the note-creation flow stores as-is.
How:   Builds a prompt from the length/tone/bullet options, asks for a JSON
       object, validates it against SummarizeResponse, and wraps the call in
       a circuit breaker.
Who:   Instantiated once at import; called by POST /api/summarize.

Resilience Strategy:
    1. Content is validated locally first; bad input never reaches Gemini
    2. Circuit breaker fails fast after repeated upstream failures
    3. Tenacity may retry transport errors (ConnectionError/TimeoutError)
       inside one call, up to settings.retry_max_attempts (default 1: no retry)
    4. Malformed model output is reported, never half-returned
"""

import json
import logging
import time
import uuid
from typing import Any, Optional

import google.generativeai as genai
from pydantic import ValidationError as PydanticValidationError
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from smartnotes.config import settings
from smartnotes.exceptions import CircuitBreakerOpenError, LLMServiceError
from smartnotes.models.note import SummaryLength, SummaryTone
from smartnotes.schemas.summary import SummarizeRequest, SummarizeResponse
from smartnotes.services.llm_base import SummarizationService, validate_content

logger = logging.getLogger(__name__)

MALFORMED_RESPONSE = "The AI service returned a malformed response. Please try again."


# ══════════════════════════════════════════════════════════════════════════
# Circuit Breaker Implementation
# ══════════════════════════════════════════════════════════════════════════

class CircuitBreaker:
    """
    Circuit breaker guarding the Gemini API.

    State Machine:
        CLOSED (normal operation)
            → On failure: increment failure_count
            → When failure_count >= threshold: transition to OPEN

        OPEN (rejecting all requests)
            → All calls raise CircuitBreakerOpenError immediately
            → After recovery_timeout seconds: transition to HALF_OPEN

        HALF_OPEN (testing recovery)
            → Allow ONE request through
            → On success: transition to CLOSED (reset failure_count)
            → On failure: transition back to OPEN (reset timer)

    Not thread-safe; uvicorn async workers share a single process.
    """

    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"

    def __init__(self, failure_threshold: int = 5, recovery_timeout: int = 60):
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self.failure_count = 0
        self.state = self.CLOSED
        self.last_failure_time: Optional[float] = None

    def can_execute(self) -> bool:
        """
        Returns True when a call may proceed.

        Raises:
            CircuitBreakerOpenError if OPEN and the recovery timeout hasn't elapsed.
        """
        if self.state == self.CLOSED:
            return True

        if self.state == self.OPEN:
            elapsed = time.time() - (self.last_failure_time or 0)
            if elapsed >= self.recovery_timeout:
                logger.info(
                    "Circuit breaker transitioning to HALF_OPEN after %.1fs",
                    elapsed,
                )
                self.state = self.HALF_OPEN
                return True
            remaining = int(self.recovery_timeout - elapsed)
            raise CircuitBreakerOpenError(recovery_time=remaining)

        return True

    def record_success(self) -> None:
        if self.state == self.HALF_OPEN:
            logger.info("Circuit breaker transitioning to CLOSED (service recovered)")
        self.failure_count = 0
        self.state = self.CLOSED
        self.last_failure_time = None

    def record_failure(self) -> None:
        self.failure_count += 1
        self.last_failure_time = time.time()

        if self.state == self.HALF_OPEN:
            logger.warning("Circuit breaker returning to OPEN (test request failed)")
            self.state = self.OPEN
        elif self.failure_count >= self.failure_threshold:
            logger.warning(
                "Circuit breaker OPENING after %d consecutive failures",
                self.failure_count,
            )
            self.state = self.OPEN


# ══════════════════════════════════════════════════════════════════════════
# Gemini Service
# ══════════════════════════════════════════════════════════════════════════

class GeminiService(SummarizationService):
    """
    Google Gemini implementation of the summarization contract.

    Error Handling Chain:
        Empty/over-long content → ValidationError (no network call)
        Circuit open → CircuitBreakerOpenError
        API call fails → LLMServiceError, failure recorded on the breaker
        Output not a valid {title, summary, keywords} object → LLMServiceError
    """

    LENGTH_GUIDANCE = {
        SummaryLength.SHORT: "2-3 sentences",
        SummaryLength.MEDIUM: "one paragraph of 4-6 sentences",
        SummaryLength.LONG: "several paragraphs covering every main point",
    }

    TONE_GUIDANCE = {
        SummaryTone.ACADEMIC: "formal and academic, precise terminology",
        SummaryTone.CASUAL: "friendly and conversational",
        SummaryTone.PROFESSIONAL: "clear, concise and business-like",
    }

    PROMPT_TEMPLATE = """You are an expert note-taking assistant. Summarize the content below.

Requirements:
1. Summary length: {length}
2. Tone: {tone}
3. {layout}
4. Write a short, descriptive title (at most 10 words)
5. Extract 3 to 7 keywords that capture the main topics

Respond with ONLY a JSON object of this exact shape:
{{"title": "...", "summary": "...", "keywords": ["...", "..."]}}

Content:
{content}"""

    def __init__(self):
        if settings.gemini_api_key and settings.gemini_api_key != "your_gemini_api_key_here":
            genai.configure(api_key=settings.gemini_api_key)

        self.model = genai.GenerativeModel(settings.gemini_model)

        self.circuit_breaker = CircuitBreaker(
            failure_threshold=settings.cb_failure_threshold,
            recovery_timeout=settings.cb_recovery_timeout,
        )

        logger.info(
            "GeminiService initialized with model=%s, "
            "circuit_breaker(threshold=%d, recovery=%ds)",
            settings.gemini_model,
            settings.cb_failure_threshold,
            settings.cb_recovery_timeout,
        )

    def build_prompt(self, request: SummarizeRequest) -> str:
        if request.bullet_points:
            layout = "Format the summary as a bulleted list, one point per line starting with '- '"
        else:
            layout = "Write the summary as flowing prose, not a list"
        return self.PROMPT_TEMPLATE.format(
            length=self.LENGTH_GUIDANCE[request.length],
            tone=self.TONE_GUIDANCE[request.tone],
            layout=layout,
            content=request.content.strip(),
        )

    async def summarize(self, request: SummarizeRequest) -> SummarizeResponse:
        """
        Summarize content with Gemini.

        Flow:
            1. Validate content locally
            2. Check circuit breaker → may raise CircuitBreakerOpenError
            3. One upstream call (transport retries per settings)
            4. Record success/failure on the breaker
            5. Parse and validate the JSON output
        """
        validate_content(request.content)

        request_id = str(uuid.uuid4())[:8]
        self.circuit_breaker.can_execute()

        logger.info(
            "[%s] Starting Gemini summarization (%d chars, length=%s, tone=%s, bullets=%s)",
            request_id,
            len(request.content),
            request.length.value,
            request.tone.value,
            request.bullet_points,
        )

        try:
            raw = await self._call_gemini_with_retry(self.build_prompt(request), request_id)
            self.circuit_breaker.record_success()
        except CircuitBreakerOpenError:
            raise
        except (ConnectionError, TimeoutError) as e:
            self.circuit_breaker.record_failure()
            logger.error("[%s] Gemini unreachable: %s", request_id, str(e))
            raise LLMServiceError(
                message="The AI service could not be reached. Please try again later.",
                retry_after=self.circuit_breaker.recovery_timeout,
                context={"request_id": request_id, "error_type": type(e).__name__},
            )
        except Exception as e:
            self.circuit_breaker.record_failure()
            logger.error(
                "[%s] Unexpected Gemini error: %s",
                request_id,
                str(e),
                exc_info=True,
            )
            raise LLMServiceError(
                message="An unexpected error occurred while summarizing.",
                context={"request_id": request_id, "error_type": type(e).__name__},
            )

        return self.parse_response(raw, request_id)

    @staticmethod
    def parse_response(raw: str, request_id: str = "-") -> SummarizeResponse:
        """
        Turn the model's text output into a SummarizeResponse.

        Accepts a bare JSON object, optionally wrapped in a ``` fence.

        Raises:
            LLMServiceError: not JSON, not an object, or missing/invalid fields
        """
        text = (raw or "").strip()
        if text.startswith("```"):
            text = text.strip("`").strip()
            if text.lower().startswith("json"):
                text = text[4:].strip()

        try:
            payload: Any = json.loads(text)
        except json.JSONDecodeError:
            logger.warning("[%s] Gemini returned non-JSON output (%d chars)", request_id, len(text))
            raise LLMServiceError(message=MALFORMED_RESPONSE, context={"request_id": request_id})

        if not isinstance(payload, dict):
            logger.warning("[%s] Gemini returned %s instead of an object", request_id, type(payload).__name__)
            raise LLMServiceError(message=MALFORMED_RESPONSE, context={"request_id": request_id})

        try:
            return SummarizeResponse.model_validate(payload)
        except PydanticValidationError as e:
            logger.warning("[%s] Gemini output failed validation: %s", request_id, e.errors())
            raise LLMServiceError(
                message=MALFORMED_RESPONSE,
                context={"request_id": request_id, "fields": [".".join(map(str, err["loc"])) for err in e.errors()]},
            )

    @retry(
        # Transport errors only; API errors and bad output are not retried
        retry=retry_if_exception_type((ConnectionError, TimeoutError)),
        stop=stop_after_attempt(settings.retry_max_attempts),
        wait=wait_exponential_jitter(
            initial=settings.retry_min_wait,
            max=settings.retry_max_wait,
            jitter=1,
        ),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    async def _call_gemini_with_retry(self, prompt: str, request_id: str) -> str:
        start_time = time.time()

        try:
            response = await self.model.generate_content_async(
                prompt,
                generation_config={"response_mime_type": "application/json"},
                request_options={"timeout": settings.gemini_timeout},
            )
            duration_ms = (time.time() - start_time) * 1000
            text = response.text or ""

            logger.info(
                "[%s] Gemini summarization completed in %.0fms, %d chars returned",
                request_id,
                duration_ms,
                len(text),
            )
            return text

        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.warning(
                "[%s] Gemini API call failed after %.0fms: %s",
                request_id,
                duration_ms,
                str(e),
            )
            raise

    async def health_check(self) -> bool:
        """Lists models (no token cost) to verify the key and connectivity."""
        try:
            models = genai.list_models()
            model_names = [m.name for m in models]
            target = f"models/{settings.gemini_model}"
            if target not in model_names:
                logger.warning("Configured model %s not found in available models", target)
            return True
        except Exception as e:
            logger.warning("Gemini health check failed: %s", str(e))
            return False


# ── Singleton Instance ────────────────────────────────────────────────────
# Shared so the circuit breaker state spans all requests
gemini_service = GeminiService()
