"""Database dependency injection for FastAPI.

Provides the async session factory with explicit transaction management.
"""

from __future__ import annotations

import threading
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from infrastructure.database.engines import create_engine
from infrastructure.observability import DefaultDatabaseProbe
from infrastructure.settings import get_database_settings

_probe = DefaultDatabaseProbe()

_engine: AsyncEngine | None = None
_sessionmaker: async_sessionmaker[AsyncSession] | None = None

_engine_lock = threading.Lock()


def get_engine() -> AsyncEngine:
    """Get the database engine (singleton).

    Creates engine and sessionmaker on first call using double-check locking.
    """
    global _engine, _sessionmaker
    if _engine is None:
        with _engine_lock:
            if _engine is None:
                settings = get_database_settings()
                _engine = create_engine(settings)
                _sessionmaker = async_sessionmaker(
                    _engine,
                    expire_on_commit=False,
                    class_=AsyncSession,
                )
                _probe.engine_created(
                    host=settings.host,
                    database=settings.database,
                    pool_size=settings.pool_size,
                )
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get the session factory for work that runs outside a request.

    Used by the outbox worker and by notification dispatch, which must not
    share the request's transaction.
    """
    get_engine()
    assert _sessionmaker is not None
    return _sessionmaker


async def get_write_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide a session for the current request (FastAPI dependency).

    The session does NOT auto-commit. Services own the transaction
    boundary using ``async with session.begin():``, and permission checks
    run inside the same block as the mutation they guard.

    Yields:
        AsyncSession for database operations
    """
    async with get_session_factory()() as session:
        yield session


async def close_database_connections() -> None:
    """Dispose of the engine on application shutdown."""
    global _engine, _sessionmaker

    if _engine is not None:
        await _engine.dispose()
        _probe.engine_disposed()
        _engine = None
        _sessionmaker = None
