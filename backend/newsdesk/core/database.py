"""
Relational database connection

Async SQLAlchemy engine and session factory.
"""

from typing import Optional
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
import logging

from newsdesk.core.config import settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


# Global engine instance
_engine: Optional[AsyncEngine] = None
_session_factory: Optional[async_sessionmaker[AsyncSession]] = None


def get_database_url() -> str:
    """Get database URL from settings."""
    return settings.DATABASE_URL


def create_engine(url: Optional[str] = None, **kwargs) -> AsyncEngine:
    """Create an async engine without registering it globally."""
    return create_async_engine(
        url or get_database_url(), echo=settings.DATABASE_ECHO, **kwargs
    )


def get_engine() -> AsyncEngine:
    """Get (or lazily create) the application engine."""
    global _engine, _session_factory

    if _engine is None:
        _engine = create_engine()
        _session_factory = async_sessionmaker(_engine, expire_on_commit=False)
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    get_engine()
    return _session_factory


async def create_tables(engine: AsyncEngine):
    """Create the userInfo, chats and messages tables if missing."""
    # Register the mapped classes on Base.metadata
    from newsdesk.core import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def init_db():
    """Connect and make sure the schema exists."""
    engine = get_engine()
    logger.info(f"Connecting to database: {engine.url.render_as_string(hide_password=True)}")
    await create_tables(engine)
    logger.info("Database tables are ready")


async def close_db():
    """Dispose the engine and its connection pool."""
    global _engine, _session_factory

    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _session_factory = None
        logger.info("Database connection closed")
