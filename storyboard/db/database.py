"""
Async SQLAlchemy database setup.

Supports SQLite (default, via aiosqlite) and PostgreSQL (asyncpg).
"""
from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from storyboard.config import settings

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./storyboard.db"


class Base(DeclarativeBase):
    """Base class for SQLAlchemy models."""
    pass


# Global engine and session factory (initialized by init_db)
_engine: AsyncEngine | None = None
_async_session_factory: async_sessionmaker[AsyncSession] | None = None


def get_database_url(url: str | None = None) -> str:
    """Resolve the database URL: explicit argument, then settings, then SQLite."""
    url = url or settings.database_url
    if not url:
        url = DEFAULT_DATABASE_URL
        logger.warning(f"No database URL configured, using SQLite: {url}")
    return url


def create_engine_for(url: str | None = None, **kwargs: Any) -> AsyncEngine:
    """Create an async engine for ``url`` with SQLite thread checks disabled."""
    database_url = get_database_url(url)
    connect_args: dict[str, Any] = kwargs.pop("connect_args", {})
    if database_url.startswith("sqlite"):
        connect_args.setdefault("check_same_thread", False)
    return create_async_engine(
        database_url,
        echo=settings.debug,
        connect_args=connect_args,
        **kwargs,
    )


async def init_db(url: str | None = None, create_schema: bool = True) -> async_sessionmaker[AsyncSession]:
    """Initialize the global engine and session factory.

    Creates the ``project_states`` table when ``create_schema`` is set;
    the table is the only schema this package owns.
    """
    global _engine, _async_session_factory

    if _engine is not None:
        await close_db()

    _engine = create_engine_for(url)
    database_url = str(_engine.url)
    logger.info(f"Initializing database: {database_url.split('@')[-1] if '@' in database_url else database_url}")

    _async_session_factory = async_sessionmaker(
        bind=_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    from storyboard.db import models  # noqa: F401  registers tables with Base.metadata

    if create_schema:
        async with _engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    logger.info("Database initialized successfully")
    return _async_session_factory


async def close_db() -> None:
    """Close database connection."""
    global _engine, _async_session_factory

    if _engine:
        await _engine.dispose()
        _engine = None
        _async_session_factory = None
        logger.info("Database connection closed")
