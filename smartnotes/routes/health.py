"""
SmartNotes Backend — Health Check Route
=========================================

What:  GET /health for container health checks and monitoring.
How:   Runs SELECT 1 against the database and asks the summarizer whether
       it is reachable (or reports its open circuit without calling it).

Status levels:
    - healthy:   database and summarizer available
    - degraded:  summarizer down; notes still readable and editable
    - unhealthy: database down
"""

import logging
import time

from fastapi import APIRouter, Depends
from sqlalchemy import text

from smartnotes import __version__
from smartnotes.database import engine
from smartnotes.routes.summarize import get_summarizer
from smartnotes.schemas.common import HealthResponse
from smartnotes.services.llm_base import SummarizationService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(
    summarizer: SummarizationService = Depends(get_summarizer),
) -> HealthResponse:
    db_status = "connected"
    summarizer_status = "available"
    overall = "healthy"

    # ── Check Database ────────────────────────────────────────────────────
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", str(e))

    # ── Check Summarizer ──────────────────────────────────────────────────
    breaker = getattr(summarizer, "circuit_breaker", None)
    if breaker is not None and breaker.state == breaker.OPEN:
        summarizer_status = "circuit_open"
    elif not await summarizer.health_check():
        summarizer_status = "unavailable"

    if summarizer_status != "available" and overall == "healthy":
        overall = "degraded"

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        summarizer=summarizer_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
