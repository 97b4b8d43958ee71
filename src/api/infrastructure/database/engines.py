"""Connection URLs and the async engine for PostgreSQL."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy.engine import URL
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

if TYPE_CHECKING:
    from infrastructure.settings import DatabaseSettings

__all__ = [
    "build_async_url",
    "build_listen_url",
    "create_engine",
]


def create_engine(settings: DatabaseSettings) -> AsyncEngine:
    """Engine shared by request handlers, dispatch and the outbox worker.

    The pool never grows past ``pool_size``.
    """
    return create_async_engine(
        build_async_url(settings),
        pool_size=settings.pool_size,
        max_overflow=0,
        pool_pre_ping=True,
    )


def _render(settings: DatabaseSettings, drivername: str) -> str:
    # URL.create percent-encodes the credentials.
    return URL.create(
        drivername,
        username=settings.username,
        password=settings.password.get_secret_value(),
        host=settings.host,
        port=settings.port,
        database=settings.database,
    ).render_as_string(hide_password=False)


def build_async_url(settings: DatabaseSettings) -> str:
    return _render(settings, "postgresql+asyncpg")


def build_listen_url(settings: DatabaseSettings) -> str:
    """Plain libpq URL for the LISTEN connection, which asyncpg opens itself."""
    return _render(settings, "postgresql")
