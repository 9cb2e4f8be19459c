"""
SmartNotes Backend — Gemini Service Unit Tests (Mocked)
=========================================================

What:  Tests for GeminiService with a mocked Google Generative AI SDK.
Why:   Tests should not make real API calls (costs money, requires network).
How:   Patches the genai module and the model's generate_content_async.

What we test:
    ✅ JSON output becomes a SummarizeResponse (bare or fenced)
    ✅ Malformed output → LLMServiceError, never a partial result
    ✅ Upstream failures → LLMServiceError and a breaker failure
    ✅ Empty / over-long content rejected before any model call
    ✅ Circuit breaker state machine
    ✅ Prompt reflects the length, tone and layout options
    ❌ Real API calls (use integration tests for that)
"""

import json
import time
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from smartnotes.config import settings
from smartnotes.exceptions import CircuitBreakerOpenError, LLMServiceError, ValidationError
from smartnotes.models.note import SummaryLength, SummaryTone
from smartnotes.schemas.summary import SummarizeRequest
from smartnotes.services.gemini_service import MALFORMED_RESPONSE, CircuitBreaker, GeminiService

GOOD_OUTPUT = {
    "title": "Photosynthesis Basics",
    "summary": "Plants turn light into chemical energy.",
    "keywords": ["biology", "plants", "energy"],
}


def make_service(output=None, side_effect=None):
    """GeminiService whose model returns `output` (a str) or raises `side_effect`."""
    with patch("smartnotes.services.gemini_service.genai"):
        service = GeminiService()

    model = MagicMock()
    if side_effect is not None:
        model.generate_content_async = AsyncMock(side_effect=side_effect)
    else:
        model.generate_content_async = AsyncMock(return_value=MagicMock(text=output))
    service.model = model
    return service


def request(content="Plants convert light energy into chemical energy.", **options):
    return SummarizeRequest(content=content, **options)


class TestCircuitBreaker:
    """Tests for the CircuitBreaker resilience pattern."""

    def test_initial_state_is_closed(self):
        cb = CircuitBreaker(failure_threshold=5, recovery_timeout=60)
        assert cb.state == "closed"
        assert cb.failure_count == 0

    def test_stays_closed_under_threshold(self):
        cb = CircuitBreaker(failure_threshold=5, recovery_timeout=60)
        for _ in range(4):
            cb.record_failure()
        assert cb.state == "closed"
        assert cb.can_execute()

    def test_opens_at_threshold(self):
        cb = CircuitBreaker(failure_threshold=3, recovery_timeout=60)
        for _ in range(3):
            cb.record_failure()
        assert cb.state == "open"

    def test_open_circuit_rejects_calls(self):
        cb = CircuitBreaker(failure_threshold=1, recovery_timeout=60)
        cb.record_failure()

        with pytest.raises(CircuitBreakerOpenError) as exc_info:
            cb.can_execute()
        assert exc_info.value.recovery_time > 0

    def test_success_resets_failure_count(self):
        cb = CircuitBreaker(failure_threshold=5, recovery_timeout=60)
        cb.record_failure()
        cb.record_failure()
        assert cb.failure_count == 2

        cb.record_success()
        assert cb.failure_count == 0
        assert cb.state == "closed"

    def test_half_open_after_recovery_timeout(self):
        cb = CircuitBreaker(failure_threshold=1, recovery_timeout=0)
        cb.record_failure()
        assert cb.state == "open"

        time.sleep(0.01)
        assert cb.can_execute()
        assert cb.state == "half_open"

    def test_failure_in_half_open_reopens(self):
        cb = CircuitBreaker(failure_threshold=1, recovery_timeout=0)
        cb.record_failure()
        time.sleep(0.01)
        cb.can_execute()

        cb.record_failure()
        assert cb.state == "open"

    def test_success_after_half_open_closes(self):
        cb = CircuitBreaker(failure_threshold=1, recovery_timeout=0)
        cb.record_failure()
        time.sleep(0.01)
        cb.can_execute()

        cb.record_success()
        assert cb.state == "closed"
        assert cb.failure_count == 0


class TestSummarize:

    @pytest.mark.asyncio
    async def test_success(self):
        service = make_service(json.dumps(GOOD_OUTPUT))

        result = await service.summarize(request())

        assert result.title == "Photosynthesis Basics"
        assert result.summary == "Plants turn light into chemical energy."
        assert result.keywords == ["biology", "plants", "energy"]
        service.model.generate_content_async.assert_awaited_once()
        kwargs = service.model.generate_content_async.call_args.kwargs
        assert kwargs["generation_config"] == {"response_mime_type": "application/json"}

    @pytest.mark.asyncio
    async def test_fenced_json_is_accepted(self):
        service = make_service("```json\n" + json.dumps(GOOD_OUTPUT) + "\n```")
        result = await service.summarize(request())
        assert result.title == "Photosynthesis Basics"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "output",
        [
            "Here is your summary: plants are green.",
            json.dumps(["not", "an", "object"]),
            json.dumps({"summary": "no title here", "keywords": []}),
            json.dumps({"title": "No keywords", "summary": "keywords field absent"}),
            json.dumps({"title": "T", "summary": "S", "keywords": "biology, plants"}),
            json.dumps({"title": "   ", "summary": "blank title"}),
            "",
        ],
    )
    async def test_malformed_output_is_reported(self, output):
        service = make_service(output)

        with pytest.raises(LLMServiceError) as exc_info:
            await service.summarize(request())
        assert exc_info.value.message == MALFORMED_RESPONSE

    @pytest.mark.asyncio
    async def test_malformed_output_does_not_trip_breaker(self):
        service = make_service("not json")
        with pytest.raises(LLMServiceError):
            await service.summarize(request())
        assert service.circuit_breaker.failure_count == 0

    @pytest.mark.asyncio
    async def test_api_error_is_llm_error_and_recorded(self):
        service = make_service(side_effect=RuntimeError("quota exceeded"))

        with pytest.raises(LLMServiceError):
            await service.summarize(request())
        assert service.circuit_breaker.failure_count == 1
        assert service.model.generate_content_async.await_count == 1

    @pytest.mark.asyncio
    async def test_transport_error_carries_retry_after(self):
        service = make_service(side_effect=ConnectionError("connection reset"))

        with pytest.raises(LLMServiceError) as exc_info:
            await service.summarize(request())
        assert exc_info.value.retry_after == service.circuit_breaker.recovery_timeout
        assert service.model.generate_content_async.await_count == settings.retry_max_attempts

    @pytest.mark.asyncio
    async def test_circuit_open_fails_fast(self):
        service = make_service(json.dumps(GOOD_OUTPUT))
        for _ in range(service.circuit_breaker.failure_threshold):
            service.circuit_breaker.record_failure()

        with pytest.raises(CircuitBreakerOpenError):
            await service.summarize(request())
        service.model.generate_content_async.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", ["", "   \n\t "])
    async def test_blank_content_rejected_without_call(self, content):
        service = make_service(json.dumps(GOOD_OUTPUT))

        with pytest.raises(ValidationError) as exc_info:
            await service.summarize(request(content=content))
        assert exc_info.value.field == "content"
        service.model.generate_content_async.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_too_long_content_rejected_without_call(self):
        service = make_service(json.dumps(GOOD_OUTPUT))

        with pytest.raises(ValidationError):
            await service.summarize(request(content="x" * (settings.max_content_chars + 1)))
        service.model.generate_content_async.assert_not_awaited()


class TestBuildPrompt:

    def setup_method(self):
        with patch("smartnotes.services.gemini_service.genai"):
            self.service = GeminiService()

    def test_includes_content_and_json_shape(self):
        prompt = self.service.build_prompt(request(content="  The mitochondria.  "))
        assert prompt.endswith("The mitochondria.")
        assert '"keywords"' in prompt

    def test_length_and_tone(self):
        prompt = self.service.build_prompt(
            request(length=SummaryLength.SHORT, tone=SummaryTone.CASUAL)
        )
        assert GeminiService.LENGTH_GUIDANCE[SummaryLength.SHORT] in prompt
        assert GeminiService.TONE_GUIDANCE[SummaryTone.CASUAL] in prompt

    def test_bullet_points_toggle(self):
        bullets = self.service.build_prompt(SummarizeRequest(content="x", bulletPoints=True))
        prose = self.service.build_prompt(request(content="x"))
        assert "bulleted list" in bullets
        assert "bulleted list" not in prose


class TestHealthCheck:

    @pytest.mark.asyncio
    async def test_reachable(self):
        with patch("smartnotes.services.gemini_service.genai") as mock_genai:
            model_info = MagicMock()
            model_info.name = f"models/{settings.gemini_model}"
            mock_genai.list_models.return_value = [model_info]
            service = GeminiService()
            assert await service.health_check() is True

    @pytest.mark.asyncio
    async def test_unreachable(self):
        with patch("smartnotes.services.gemini_service.genai") as mock_genai:
            mock_genai.list_models.side_effect = ConnectionError("offline")
            service = GeminiService()
            assert await service.health_check() is False
