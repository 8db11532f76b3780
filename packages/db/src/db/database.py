# This project was developed with assistance from AI tools.
"""Async engine, session factory and declarative base.

The engine is created lazily so importing the models (tests, tooling)
never requires a reachable database or an installed driver.
"""

import logging
from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from .config import db_settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Declarative base shared by all ORM models."""


_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def get_engine(url: str | None = None) -> AsyncEngine:
    """Return the process-wide async engine, creating it on first use."""
    global _engine  # noqa: PLW0603
    if _engine is None:
        _engine = create_async_engine(
            url or db_settings.DATABASE_URL,
            echo=db_settings.SQL_ECHO,
            pool_pre_ping=True,
        )
    return _engine


def get_session_factory(url: str | None = None) -> async_sessionmaker[AsyncSession]:
    """Return the session factory bound to the process-wide engine."""
    global _session_factory  # noqa: PLW0603
    if _session_factory is None:
        _session_factory = async_sessionmaker(get_engine(url), expire_on_commit=False)
    return _session_factory


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding a session per request."""
    async with get_session_factory()() as session:
        yield session


async def init_models(url: str | None = None) -> None:
    """Create all tables that do not exist yet."""
    engine = get_engine(url)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database schema ready (%d tables)", len(Base.metadata.tables))


async def dispose_engine() -> None:
    """Close pooled connections; safe to call when no engine exists."""
    global _engine, _session_factory  # noqa: PLW0603
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _session_factory = None
