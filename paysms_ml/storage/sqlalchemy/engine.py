"""Async engine and session factories for the pattern database."""

import logging
from functools import lru_cache

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from paysms_ml.config.settings import get_settings

from .tables import Base

logger = logging.getLogger(__name__)


def create_pattern_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """Engine for a database URL; pre-ping only for server databases."""
    is_sqlite = database_url.startswith("sqlite")
    return create_async_engine(database_url, echo=echo, pool_pre_ping=not is_sqlite)


def create_pattern_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # Patterns are read after commit, outside the session
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def create_tables(engine: AsyncEngine) -> None:
    """Create the pattern tables if they do not exist."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Pattern tables ready")


@lru_cache(maxsize=1)
def get_engine() -> AsyncEngine:
    """Shared engine for the configured database (singleton)."""
    settings = get_settings()
    return create_pattern_engine(settings.database_url, echo=settings.database_echo)


@lru_cache(maxsize=1)
def get_session_maker() -> async_sessionmaker[AsyncSession]:
    """Shared session maker bound to :func:`get_engine` (singleton)."""
    return create_pattern_session_maker(get_engine())
