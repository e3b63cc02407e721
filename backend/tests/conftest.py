"""
Bug Reporter Backend — Test Configuration (conftest.py)
=========================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    ├── mock_db_session: Mock AsyncSession (no real DB needed)
    ├── sample_bug: Transient Bug ORM instance
    ├── session_factory: Sessions on a fresh in-memory SQLite database
    ├── db_session: One session from session_factory
    ├── test_app: FastAPI app whose DB dependency uses session_factory
    ├── test_client: HTTPX AsyncClient talking to test_app in-process
    └── form_factory: BugReporterForm wired to test_client
"""

import os

# Must happen before any app import: settings are read at import time
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["CORS_ORIGINS"] = "*"

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.database import Base, get_db_session
from app.main import create_app
from app.models.bug import Bug
from app.reporter.form import BugReporterForm
from app.schemas.bug import BugPriority, BugStatus

BASE_URL = "http://test"
API_ENDPOINT = f"{BASE_URL}/api/bugs"


# ══════════════════════════════════════════════════════════════════════════
# Unit-test fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_get_bug(mock_db_session):
            mock_db_session.execute.return_value.scalar_one_or_none.return_value = bug
            result = await bug_service.get_bug(mock_db_session, 1)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.delete = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def sample_bug():
    """A Bug as it would come back from the database."""
    return Bug(
        id=7,
        title="Save button does nothing",
        description="Clicking save on the profile page has no effect",
        screenshot_url="https://example.com/shot.png",
        created_at=datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc),
        status=BugStatus.OPEN,
        priority=BugPriority.HIGH,
        metadata_={"browser": "Chrome"},
    )


# ══════════════════════════════════════════════════════════════════════════
# Database-backed fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def session_factory():
    """
    Session factory bound to a fresh in-memory SQLite database.

    StaticPool keeps the single in-memory connection alive across sessions.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def test_app(session_factory):
    """A fresh app whose get_db_session dependency uses the test database."""
    application = create_app()

    async def override_get_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    application.dependency_overrides[get_db_session] = override_get_db_session
    return application


@pytest_asyncio.fixture
async def test_client(test_app):
    """
    Provides an async HTTP test client for endpoint testing.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url=BASE_URL) as client:
        yield client


@pytest.fixture
def form_factory(test_client):
    """Builds BugReporterForm instances that submit to the test app."""

    def build(options=None, **kwargs):
        merged = {"apiEndpoint": API_ENDPOINT}
        merged.update(options or {})
        return BugReporterForm(merged, client=test_client, **kwargs)

    return build
