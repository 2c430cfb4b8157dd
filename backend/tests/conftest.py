"""
RecipeBox Backend: Test Configuration (conftest.py)
=====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every API test gets its own app built by create_app() around a
       Settings object pointing at a throwaway SQLite file and upload
       directory under tmp_path. No environment variables are mutated.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── settings:          Settings for an isolated app instance
    ├── app:               FastAPI app with its schema created
    ├── test_client:       HTTPX AsyncClient bound to `app`
    ├── signup:            helper that registers a user and returns its body
    ├── mock_db_session:   AsyncSession stand-in for service unit tests
    ├── temp_storage:      temporary upload directory
    └── sample_image_bytes: minimal JPEG bytes
"""

from typing import Any, Awaitable, Callable, Dict
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from recipebox.config import Settings
from recipebox.main import create_app


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        jwt_secret="test-secret-not-for-production",
        bcrypt_rounds=4,  # fastest cost bcrypt accepts
        upload_dir=str(tmp_path / "uploads"),
        public_base_url="http://test",
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def app(settings):
    """
    Application under test.

    ASGITransport does not run the lifespan, so tables are created here.
    """
    application = create_app(settings)
    await application.state.database.create_schema()
    yield application
    await application.state.database.dispose()


@pytest_asyncio.fixture
async def test_client(app):
    """
    Async HTTP client talking to `app` without a server.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/recipes")
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def signup(test_client) -> Callable[..., Awaitable[Dict[str, Any]]]:
    """Register a user through the API and return the signup response body."""

    async def _signup(name: str = "A", email: str = "a@x.com", password: str = "secret1"):
        response = await test_client.post(
            "/signup", json={"name": name, "email": email, "password": password}
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _signup


@pytest.fixture
def mock_db_session():
    """
    Mock async database session.

    Usage:
        mock_db_session.execute = AsyncMock(return_value=result)
        result = await service.get_recipe(mock_db_session, 1, 1)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.refresh = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def temp_storage(tmp_path):
    storage_dir = tmp_path / "storage"
    storage_dir.mkdir()
    return str(storage_dir)


@pytest.fixture
def sample_image_bytes():
    """Smallest JPEG-looking payload: SOI + JFIF header + EOI."""
    return (
        b'\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00'
        b'\xff\xd9'
    )
