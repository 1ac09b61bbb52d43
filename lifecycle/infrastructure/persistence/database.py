"""Persistence: async engine, session factory, and Base for SQLAlchemy ORM.

Engine and session factory are created lazily on first use (get_db /
get_db_transactional) so import does not trigger Settings validation.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from lifecycle.core.config import get_settings

logger = logging.getLogger(__name__)

# Set by _ensure_engine() on first use; avoids get_settings() at import time.
engine: AsyncEngine | None = None
AsyncSessionLocal: async_sessionmaker[AsyncSession] | None = None


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy declarative models."""


def _ensure_engine() -> async_sessionmaker[AsyncSession]:
    """Create engine and AsyncSessionLocal on first use; return the session factory."""
    global engine, AsyncSessionLocal
    if AsyncSessionLocal is not None:
        return AsyncSessionLocal
    settings = get_settings()
    kwargs: dict[str, Any] = {
        "echo": settings.database_echo,
        "pool_pre_ping": True,
    }
    if settings.database_url.startswith("postgresql"):
        kwargs["pool_size"] = settings.db_pool_size if settings.db_pool_size is not None else 20
        kwargs["max_overflow"] = (
            settings.db_max_overflow if settings.db_max_overflow is not None else 30
        )
        kwargs["pool_recycle"] = 3600
        kwargs["connect_args"] = {
            "command_timeout": (
                settings.db_command_timeout
                if settings.db_command_timeout is not None
                else 60
            )
        }
    engine = create_async_engine(settings.database_url, **kwargs)
    AsyncSessionLocal = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    logger.debug("Created database engine for %s", engine.url.render_as_string(hide_password=True))
    return AsyncSessionLocal


@asynccontextmanager
async def get_db() -> AsyncIterator[AsyncSession]:
    """Session for read operations.

    Does not commit; use get_db_transactional for writes.
    """
    session_factory = _ensure_engine()
    async with session_factory() as session:
        yield session


@asynccontextmanager
async def get_db_transactional() -> AsyncIterator[AsyncSession]:
    """Session for write operations.

    Begins a transaction, commits on success, rolls back on exception.
    """
    session_factory = _ensure_engine()
    async with session_factory() as session:
        async with session.begin():
            yield session


async def create_tables() -> None:
    """Create all tables for the registered models (tests and local setup)."""
    import lifecycle.infrastructure.persistence.models  # noqa: F401

    _ensure_engine()
    assert engine is not None
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine() -> None:
    """Dispose the engine and forget the session factory."""
    global engine, AsyncSessionLocal
    if engine is not None:
        await engine.dispose()
    engine = None
    AsyncSessionLocal = None
