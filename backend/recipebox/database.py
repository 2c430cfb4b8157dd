"""
RecipeBox Backend: Database Session Management
================================================

What:  Async SQLAlchemy engine, session factory, and FastAPI dependency.
How:   A Database object owns one async engine and its session factory. The
       application factory builds it from Settings and stores it on
       app.state; the get_db_session dependency opens one session per request
       and rolls back on error.
When:  Engine is created with the app (no connection is opened until first
       use); sessions are created per request.

Connection Pooling:
    Server databases (PostgreSQL via asyncpg) use pool_size/max_overflow from
    Settings with pre-ping and hourly recycling. SQLite keeps SQLAlchemy's
    default pool for the file or memory database; writes are serialized by
    the storage engine itself.
"""

import logging
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from recipebox.config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares a single metadata object used by create_schema() and by Alembic.
    """
    pass


def build_engine(settings: Settings) -> AsyncEngine:
    """Create the async engine for settings.database_url."""
    kwargs = {"echo": settings.log_level == "DEBUG"}
    if not settings.is_sqlite:
        kwargs.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return create_async_engine(settings.database_url, **kwargs)


class Database:
    """
    Engine plus session factory for one application instance.

    expire_on_commit=False keeps ORM attributes readable after commit, so
    services can build responses from the objects they just wrote.
    """

    def __init__(self, settings: Settings):
        self.engine = build_engine(settings)
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def create_schema(self) -> None:
        """Create any missing tables (existing tables are left untouched)."""
        # Models register themselves on Base.metadata at import time
        from recipebox import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema ensured (%d tables)", len(Base.metadata.tables))

    async def dispose(self) -> None:
        """Close all pooled connections. Called on application shutdown."""
        await self.engine.dispose()


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Opens a session from the app's Database
        2. Yields it to the route handler
        3. On error: rolls back so a failed insert leaves nothing behind
        4. Always: closes the session (returns connection to pool)

    Services commit their own writes; nothing is committed here.
    """
    database: Database = request.app.state.database
    async with database.session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
