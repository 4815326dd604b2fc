"""
Main Blog Backend — Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every test that talks HTTP gets a fresh SQLite database (aiosqlite) in
       its own tmp_path, wired into a fresh app through dependency_overrides.

Fixture Hierarchy:
    Function-scoped:
    ├── mock_db_session: AsyncMock session for service unit tests
    ├── db_engine → session_factory: real SQLite database per test
    ├── test_app: create_app() with get_db_session overridden
    ├── test_client: HTTPX AsyncClient over ASGITransport
    ├── upload_dir: the directory uploads land in during this run
    └── sample_image_bytes / blog_fields: request payloads
"""

import os
import tempfile
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

# Must happen before any mainblog import: settings are read at import time
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///" + os.path.join(
    tempfile.mkdtemp(prefix="mainblog_db_"), "unused.db"
)
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="mainblog_uploads_")
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["BCRYPT_ROUNDS"] = "4"  # minimum cost keeps the suite fast

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from mainblog.database import create_tables, get_db_session
from mainblog.services.file_service import file_service


@pytest.fixture
def mock_db_session():
    """
    A MagicMock that simulates AsyncSession behavior.

    Usage:
        async def test_get(mock_db_session):
            mock_db_session.get.return_value = blog
            await blog_service.delete_blog(mock_db_session, str(blog.id))
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock()
    session.flush = AsyncMock()
    session.delete = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest_asyncio.fixture
async def db_engine(tmp_path):
    """A SQLite database file unique to this test, with all tables created."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def test_app(session_factory):
    """
    A fresh application whose session dependency uses the per-test database.

    The override mirrors get_db_session: commit on success, rollback on error.
    """
    from mainblog.main import create_app

    app = create_app()

    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session
    return app


@pytest_asyncio.fixture
async def test_client(test_app):
    """
    HTTPX AsyncClient routed directly into the app (no server, no lifespan).

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
    """
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def upload_dir():
    """Directory the FileService singleton writes to during the test run."""
    return file_service.upload_dir


@pytest.fixture
def sample_image_bytes():
    """Smallest valid PNG: signature + IHDR + IDAT + IEND for a 1x1 pixel."""
    return (
        b"\x89PNG\r\n\x1a\n"
        b"\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01\x08\x06\x00\x00\x00\x1f\x15\xc4\x89"
        b"\x00\x00\x00\rIDATx\x9cc\xf8\x0f\x00\x00\x01\x01\x00\x05\x18\xd8N"
        b"\x00\x00\x00\x00IEND\xaeB`\x82"
    )


@pytest.fixture
def blog_fields():
    """Form fields for a valid create/update request."""
    return {
        "title": "Category Theory",
        "content": "Objects, arrows, and composition.",
        "author": "alice",
        "category": "math",
        "externalLink": "https://example.com/ct",
    }
