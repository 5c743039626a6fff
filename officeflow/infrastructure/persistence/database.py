"""Async engine, session factory and declarative Base.

The engine is built on first use, not at import, so models and migrations
import without DATABASE_URL. Sessions never autobegin a unit of work for the
caller: use cases wrap their writes in ``async with session.begin()``.
"""

from collections.abc import AsyncIterator
from typing import Any

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from officeflow.core.config import Settings, get_settings
from officeflow.domain.exceptions import SqlNotConfiguredException
from officeflow.shared.logging import get_logger

logger = get_logger(__name__)

engine: AsyncEngine | None = None
AsyncSessionLocal: async_sessionmaker[AsyncSession] | None = None


class Base(DeclarativeBase):
    pass


def _engine_options(settings: Settings) -> dict[str, Any]:
    options: dict[str, Any] = {"echo": settings.database_echo, "pool_pre_ping": True}
    if settings.database_url.startswith("postgresql"):
        options.update(
            pool_size=settings.db_pool_size or 20,
            max_overflow=settings.db_max_overflow or 30,
            pool_recycle=3600,
            connect_args={"command_timeout": settings.db_command_timeout or 60},
        )
    return options


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Session factory, creating the engine on first call.

    Raises:
        SqlNotConfiguredException: DATABASE_URL is empty.
    """
    global engine, AsyncSessionLocal
    if AsyncSessionLocal is None:
        settings = get_settings()
        if not settings.database_url:
            logger.error("DATABASE_URL is not set; run alembic upgrade head once it is")
            raise SqlNotConfiguredException()
        engine = create_async_engine(settings.database_url, **_engine_options(settings))
        AsyncSessionLocal = async_sessionmaker(
            bind=engine, expire_on_commit=False, autoflush=False
        )
    return AsyncSessionLocal


async def dispose_engine() -> None:
    """Close pooled connections; the next get_session_factory() starts over."""
    global engine, AsyncSessionLocal
    if engine is not None:
        await engine.dispose()
        logger.info("Database engine disposed")
    engine = None
    AsyncSessionLocal = None


async def get_db() -> AsyncIterator[AsyncSession]:
    """FastAPI dependency: one session per request, closed afterwards."""
    async with get_session_factory()() as session:
        yield session
