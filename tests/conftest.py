"""
RecipeShare Backend - Test Configuration (conftest.py)
=======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixtures (all function-scoped):
    ├── mock_db_session:      AsyncMock standing in for AsyncSession
    ├── temp_storage:         Image root in tmp_path, wired into file_service
    ├── db_session_factory:   Fresh SQLite database (aiosqlite) per test
    ├── db_session:           One session on that database
    ├── sample_image_bytes:   Minimal JPEG bytes
    └── test_client:          httpx AsyncClient bound to a fresh app
"""

import os
import tempfile

# Override settings for testing BEFORE any application imports
_TEST_ROOT = tempfile.mkdtemp(prefix="recipeshare_test_")
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///" + os.path.join(_TEST_ROOT, "recipes.db")
os.environ["STORAGE_ROOT"] = os.path.join(_TEST_ROOT, "images")
os.environ["LOG_LEVEL"] = "WARNING"

from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from recipeshare.database import Base, get_db_session  # noqa: E402
from recipeshare.models.recipe import Recipe  # noqa: E402,F401
from recipeshare.services.file_service import file_service  # noqa: E402


@pytest.fixture
def mock_db_session():
    """
    A MagicMock that simulates AsyncSession behavior.

    Usage:
        async def test_store_error(mock_db_session):
            mock_db_session.execute.side_effect = OperationalError(...)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    session.expire_all = MagicMock()
    return session


@pytest.fixture
def temp_storage(tmp_path, monkeypatch):
    """
    Point the shared file_service at a per-test image root.

    Returns the root; thumbnails live in <root>/thumbnail/.
    """
    storage_dir = (tmp_path / "images").resolve()
    monkeypatch.setattr(file_service, "storage_root", storage_dir)
    file_service.ensure_directories()
    return storage_dir


@pytest_asyncio.fixture
async def db_session_factory(tmp_path):
    """Session factory on a brand-new SQLite file, so ids start at 1."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'recipes.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_session_factory):
    async with db_session_factory() as session:
        yield session


@pytest.fixture
def sample_image_bytes():
    """
    Minimal JPEG: Start of Image (FFD8) + JFIF marker + End of Image (FFD9).

    Content is never inspected; only the upload's extension matters.
    """
    return (
        b'\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00'
        b'\xff\xd9'
    )


@pytest_asyncio.fixture
async def test_client(db_session_factory, temp_storage):
    """
    HTTPX AsyncClient talking to a fresh app over ASGITransport.

    The app's database dependency is overridden to use the per-test SQLite
    file; lifespan does not run, so nothing touches the default database.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/get-recipes")
            assert response.status_code == 200
    """
    from recipeshare.main import create_app

    app = create_app()

    async def override_get_db_session():
        async with db_session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
