"""
Pytest configuration and fixtures for Drive tests.

Every test gets a fresh in-memory SQLite database (shared through a
StaticPool so the async engine sees one connection) and a blob store rooted
in pytest's tmp_path. API tests drive the FastAPI app through httpx with the
database and blob store dependencies overridden.
"""
import logging
from typing import AsyncGenerator, Generator

import pytest
import pytest_asyncio
from dotenv import load_dotenv
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from drive.auth.dependencies import get_blob_store
from drive.auth.passwords import hash_password
from drive.config import Settings, get_settings
from drive.database import build_engine, get_db_session
from drive.main import app
from drive.models import Base, User
from drive.services.drive import DriveService
from drive.storage import BlobStore, BlobStoreConfig

load_dotenv()

logger = logging.getLogger(__name__)

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_SECRET = "test-secret-key-for-testing"


# ============================================
# Settings
# ============================================


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Settings pointing at in-memory storage with a fixed signing secret."""
    return Settings(
        DATABASE_URL=TEST_DATABASE_URL,
        JWT_SECRET_KEY=TEST_SECRET,
        BLOB_ROOT=str(tmp_path / "blobs"),
        MAX_UPLOAD_BYTES=1024 * 1024,
        MAX_FOLDER_DEPTH=32,
        DEBUG=True,
    )


# ============================================
# Database
# ============================================


@pytest_asyncio.fixture
async def db_engine():
    """Create a test database engine with all tables."""
    engine = build_engine(TEST_DATABASE_URL, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(db_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    session = session_factory()
    try:
        yield session
    finally:
        await session.rollback()
        await session.close()


# ============================================
# Storage and services
# ============================================


@pytest.fixture
def blobs(tmp_path) -> BlobStore:
    """Blob store rooted in a per-test temporary directory."""
    return BlobStore(BlobStoreConfig(root=str(tmp_path / "blobs")))


@pytest.fixture
def service(db_session, blobs, test_settings) -> DriveService:
    return DriveService(db_session, blobs, test_settings)


async def make_user(session: AsyncSession, email: str, name: str = "Test User") -> User:
    user = User(email=email, name=name, password_hash=hash_password("secret123"))
    session.add(user)
    await session.flush()
    return user


@pytest_asyncio.fixture
async def alice(db_session) -> User:
    return await make_user(db_session, "alice@example.com", "Alice")


@pytest_asyncio.fixture
async def bob(db_session) -> User:
    return await make_user(db_session, "bob@example.com", "Bob")


# ============================================
# HTTP client
# ============================================


@pytest.fixture
def app_settings(monkeypatch, tmp_path) -> Generator[Settings, None, None]:
    """Environment-driven settings for the app under test.

    Individual tests can ``monkeypatch.setenv`` more values and call
    ``get_settings.cache_clear()`` to apply them.
    """
    monkeypatch.setenv("DATABASE_URL", TEST_DATABASE_URL)
    monkeypatch.setenv("JWT_SECRET_KEY", TEST_SECRET)
    monkeypatch.setenv("BLOB_ROOT", str(tmp_path / "blobs"))
    monkeypatch.setenv("MAX_UPLOAD_BYTES", str(1024 * 1024))
    monkeypatch.setenv("PUBLIC_PREVIEW_ENABLED", "false")
    get_settings.cache_clear()
    yield get_settings()
    get_settings.cache_clear()


@pytest_asyncio.fixture
async def async_client(session_factory, blobs, app_settings) -> AsyncGenerator[AsyncClient, None]:
    """Async client against the app with per-request committing sessions."""

    async def override_get_db_session():
        session = session_factory()
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    app.dependency_overrides[get_db_session] = override_get_db_session
    app.dependency_overrides[get_blob_store] = lambda: blobs

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def register(async_client):
    """Register an account through the API.

    Returns a coroutine function giving ``{"headers", "user", "token"}``.
    """

    async def _register(email: str, name: str = "Test User") -> dict:
        response = await async_client.post(
            "/api/v1/auth/register",
            json={"name": name, "email": email, "password": "secret123"},
        )
        assert response.status_code == 201, response.text
        body = response.json()
        return {
            "headers": {"Authorization": f"Bearer {body['token']}"},
            "user": body["user"],
            "token": body["token"],
        }

    return _register


# ============================================
# Pytest Configuration
# ============================================


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "fast: Fast unit tests (no network, no disk outside tmp_path)")
    config.addinivalue_line("markers", "integration: Tests that drive the HTTP API")
