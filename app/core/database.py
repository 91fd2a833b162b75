"""
Database connection and session management.

Sets up the asynchronous SQLAlchemy engine and session factory and provides
the FastAPI session dependency. The engine can be rebuilt at runtime with
``configure_database`` (scripts and tests point it at another URL).
"""

import re
from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator, Optional

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool, StaticPool

from app.core.config import get_database_url
from app.models.db import Base


def create_engine(db_url: str) -> AsyncEngine:
    """Create an async engine.

    ``postgres://`` and ``postgresql://`` URLs are rewritten to
    ``postgresql+asyncpg://``. In-memory SQLite shares one connection so every
    session sees the same database.
    """
    url = re.sub(r"^postgres(?:ql)?(?:\+[a-z0-9_]+)?://", "postgresql+asyncpg://", db_url, count=1)
    if not url.startswith("sqlite"):
        return create_async_engine(url, pool_pre_ping=True)

    if ":memory:" in url or url.rstrip("/").endswith("sqlite+aiosqlite:"):
        sqlite_engine = create_async_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        sqlite_engine = create_async_engine(url, poolclass=NullPool)

    # SQLite ignores ON DELETE CASCADE unless foreign keys are switched on per connection
    @event.listens_for(sqlite_engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return sqlite_engine


def create_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)


engine: AsyncEngine = create_engine(get_database_url())
async_session_maker: async_sessionmaker[AsyncSession] = create_sessionmaker(engine)


def configure_database(db_url: Optional[str] = None) -> AsyncEngine:
    """Rebuild the global engine and session factory."""
    global engine, async_session_maker
    engine = create_engine(db_url or get_database_url())
    async_session_maker = create_sessionmaker(engine)
    return engine


def get_sessionmaker() -> async_sessionmaker[AsyncSession]:
    return async_session_maker


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Dependency generator for database sessions."""
    async with async_session_maker() as session:
        yield session


@asynccontextmanager
async def session_scope() -> AsyncIterator[AsyncSession]:
    """Session for work outside a request (SSE streams, tools, scripts).

    Commits on success and rolls back on error.
    """
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """Create all tables that do not exist yet."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
