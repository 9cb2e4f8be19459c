"""
SmartNotes Backend — Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   A fresh in-memory SQLite database (aiosqlite) per test, two signed-up
       identities, facades bound to each, and an HTTPX client whose database
       and summarizer dependencies are overridden.

Fixture Hierarchy (all function-scoped):
    db_engine → session_factory → db_session
                                ├── alice / bob (Identity + Profile)
                                └── alice_facade / bob_facade
    mock_summarizer
    test_client (session_factory + mock_summarizer)
"""

import os

# Override settings for testing BEFORE any smartnotes import
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["GEMINI_API_KEY"] = "test-key-not-real"
os.environ["JWT_SECRET_KEY"] = "test-secret-key-only-used-by-the-suite"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["RATE_LIMIT_REQUESTS"] = "1000"

from typing import Dict
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import smartnotes.models  # noqa: F401
from smartnotes.database import Base, get_db_session
from smartnotes.models import Identity, Profile
from smartnotes.routes.summarize import get_summarizer
from smartnotes.schemas.summary import SummarizeResponse
from smartnotes.services.auth_service import hash_password
from smartnotes.services.data_access import DataAccessFacade
from smartnotes.services.llm_base import SummarizationService
from smartnotes.session import SessionContext

PASSWORD = "secret123"


# ══════════════════════════════════════════════════════════════════════════
# Database
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine():
    """One shared in-memory connection, schema created from the ORM metadata."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


async def create_identity(db: AsyncSession, email: str, full_name: str) -> Identity:
    identity = Identity(email=email, password_hash=hash_password(PASSWORD), full_name=full_name)
    db.add(identity)
    await db.flush()
    db.add(Profile(user_id=identity.id, full_name=full_name))
    await db.flush()
    return identity


@pytest_asyncio.fixture
async def alice(db_session):
    return await create_identity(db_session, "alice@example.com", "Alice Liddell")


@pytest_asyncio.fixture
async def bob(db_session):
    return await create_identity(db_session, "bob@example.com", "Bob Builder")


@pytest.fixture
def alice_facade(db_session, alice):
    return DataAccessFacade(db_session, SessionContext(identity=alice))


@pytest.fixture
def bob_facade(db_session, bob):
    return DataAccessFacade(db_session, SessionContext(identity=bob))


@pytest.fixture
def note_payload() -> Dict:
    return {
        "title": "Photosynthesis Basics",
        "original_content": "Plants convert light energy into chemical energy.\nChlorophyll absorbs light.",
        "summary": "Plants turn light into chemical energy using chlorophyll.",
        "keywords": ["biology", "plants", "Energy"],
        "summary_length": "short",
        "summary_tone": "academic",
        "is_bullet_points": False,
    }


# ══════════════════════════════════════════════════════════════════════════
# Summarizer
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_summarizer():
    """A SummarizationService double returning a fixed summary."""
    summarizer = AsyncMock(spec=SummarizationService)
    summarizer.summarize.return_value = SummarizeResponse(
        title="Photosynthesis Basics",
        summary="Plants turn light into chemical energy using chlorophyll.",
        keywords=["biology", "plants"],
    )
    summarizer.health_check.return_value = True
    return summarizer


# ══════════════════════════════════════════════════════════════════════════
# HTTP client
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def test_client(session_factory, mock_summarizer):
    """
    HTTPX AsyncClient talking to a fresh app instance.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from smartnotes.main import create_app

    app = create_app()

    async def override_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_db_session
    app.dependency_overrides[get_summarizer] = lambda: mock_summarizer

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


async def _sign_up(client: AsyncClient, email: str, full_name: str) -> Dict[str, str]:
    response = await client.post(
        "/api/auth/signup",
        json={"email": email, "password": PASSWORD, "full_name": full_name},
    )
    assert response.status_code == 201, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def sign_up(test_client):
    """
    Registers an account through the API and returns its auth headers.

    Usage:
        headers = await sign_up("bob@example.com", "Bob Builder")
    """
    async def _register(email: str, full_name: str = "Test User") -> Dict[str, str]:
        return await _sign_up(test_client, email, full_name)
    return _register


@pytest_asyncio.fixture
async def auth_headers(test_client):
    return await _sign_up(test_client, "alice@example.com", "Alice Liddell")
