"""
Shared async engine and session factory

Every resolver opens its own session from one process-wide pool. The pool is
created lazily on first use, or explicitly by the application lifespan and by
tests that point it at a throwaway database.
"""

import os
import threading
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from ..config import settings
from ..logging import get_logger

logger = get_logger(__name__)

DATABASE_URL_ENV = "USERGRAPH_DATABASE_URL"

# Drivers we accept in configuration; the pool always talks through asyncpg
_SYNC_POSTGRES_DRIVERS = {"postgres", "postgresql", "postgresql+psycopg", "postgresql+psycopg2"}

_lock = threading.Lock()
_engine: AsyncEngine | None = None
_sessions: async_sessionmaker[AsyncSession] | None = None


def get_database_url() -> str:
    # Read the environment directly: tests export the URL after settings load
    return os.environ.get(DATABASE_URL_ENV) or settings.database_url


def to_async_url(db_url: str) -> str:
    """Point a PostgreSQL URL at the asyncpg driver."""
    url = make_url(db_url)
    if url.drivername in _SYNC_POSTGRES_DRIVERS:
        url = url.set(drivername="postgresql+asyncpg")
    return url.render_as_string(hide_password=False)


def redact_url(db_url: str) -> str:
    return make_url(db_url).render_as_string(hide_password=True)


def init_database(database_url: str | None = None, force_reinit: bool = False) -> AsyncEngine:
    """Create the shared pool, or return the existing one.

    An explicit ``database_url`` or ``force_reinit`` always builds a new pool.
    """
    global _engine, _sessions

    with _lock:
        if _engine is not None and database_url is None and not force_reinit:
            return _engine

        db_url = database_url or get_database_url()
        _engine = create_async_engine(
            to_async_url(db_url),
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
            pool_pre_ping=True,
            echo=settings.sql_echo,
        )
        _sessions = async_sessionmaker(_engine, autoflush=False, expire_on_commit=False)

        logger.info(
            "Database pool created",
            database_url=redact_url(db_url),
            pool_size=settings.database_pool_size,
        )
        return _engine


def get_async_engine() -> AsyncEngine:
    return _engine if _engine is not None else init_database()


def reset_database() -> None:
    """Forget the shared pool without closing it (tests swap databases this way)."""
    global _engine, _sessions
    _engine = None
    _sessions = None


async def dispose_database() -> None:
    if _engine is not None:
        await _engine.dispose()
        logger.info("Database pool closed")
    reset_database()


async def check_database_connection() -> str | None:
    """Round-trip ``SELECT 1`` through the pool.

    Returns:
        None when the database answered, otherwise a message for the operator
    """
    if _engine is None:
        return "Database engine not initialized"

    try:
        async with _engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        target = _engine.url.render_as_string(hide_password=True)
        return f"Cannot reach database at {target}: {e}"

    return None


@asynccontextmanager
async def get_async_session() -> AsyncIterator[AsyncSession]:
    """Session in its own transaction: committed on exit, rolled back on error."""
    if _sessions is None:
        init_database()
    if _sessions is None:
        raise RuntimeError("Database not initialized")

    async with _sessions() as session, session.begin():
        yield session
