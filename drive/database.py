"""Async database engine and request-scoped sessions.

SQLite (aiosqlite) is the default for development and tests; PostgreSQL
(asyncpg) is used in production. One session is opened per request and
committed when the request finishes, so every catalog change a request makes,
a whole cascade delete included, lands as one transaction.

Examples:
    >>> from drive.database import init_db, session_scope
    >>> await init_db()
    >>> async with session_scope() as session:
    ...     await catalog.find_folders_by_owner_and_parent(session, user_id, None)
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from drive.config import get_settings

logger = logging.getLogger(__name__)

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def _apply_sqlite_pragmas(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    # Enforce parent references of folder and file rows
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.execute("PRAGMA busy_timeout=5000")
    cursor.close()


def build_engine(url: str, **kwargs: Any) -> AsyncEngine:
    """Create an async engine for ``url``.

    SQLite engines get WAL, foreign key enforcement and a busy timeout on
    every new connection. Other backends get a small pre-pinged pool.
    Extra keyword arguments go straight to ``create_async_engine``.
    """
    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
        engine = create_async_engine(url, **kwargs)
        event.listen(engine.sync_engine, "connect", _apply_sqlite_pragmas)
        return engine

    kwargs.setdefault("pool_size", 5)
    kwargs.setdefault("max_overflow", 10)
    kwargs.setdefault("pool_pre_ping", True)
    return create_async_engine(url, **kwargs)


def get_engine() -> AsyncEngine:
    """Process-wide engine, created from settings on first use."""
    global _engine

    if _engine is None:
        url = get_settings().DATABASE_URL
        _engine = build_engine(url)
        logger.info("Database engine created: %s", url.split("@")[-1])

    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    global _session_factory

    if _session_factory is None:
        _session_factory = async_sessionmaker(
            get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    return _session_factory


@asynccontextmanager
async def session_scope() -> AsyncGenerator[AsyncSession, None]:
    """Open a session that commits on success and rolls back on any error."""
    session = get_session_factory()()
    try:
        yield session
        await session.commit()
    except Exception:
        logger.debug("Rolling back session after error")
        await session.rollback()
        raise
    finally:
        await session.close()


async def init_db() -> None:
    """Create any missing tables. Migrations remain the source of truth in production."""
    from drive.models import Base

    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info("Database tables ensured")


async def check_db_connection() -> bool:
    """Return True when a trivial query succeeds."""
    try:
        async with get_engine().connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        logger.error("Database health check failed: %s", e)
        return False
    return True


async def close_db() -> None:
    """Dispose of the engine at shutdown."""
    global _engine, _session_factory

    if _engine is None:
        return
    await _engine.dispose()
    _engine = None
    _session_factory = None
    logger.info("Database connections closed")


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding the request's session."""
    async with session_scope() as session:
        yield session
