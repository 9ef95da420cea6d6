"""
Database connection and session management.
"""

import os
from typing import AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from .models import Base


def normalize_database_url(url: str) -> str:
    """Point plain Postgres URLs (as handed out by hosting providers) at asyncpg."""
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql+asyncpg://", 1)
    if url.startswith("postgresql://") and "+asyncpg" not in url:
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return url


def build_engine(url: str, echo: bool = False) -> AsyncEngine:
    """
    Create an async engine for a database URL.

    In-memory SQLite is pinned to a single connection so every session
    sees the same tables.
    """
    kwargs = {"echo": echo, "pool_pre_ping": True}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if ":memory:" in url:
            kwargs["poolclass"] = StaticPool
    return create_async_engine(url, **kwargs)


def make_session_maker(bind: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(bind, class_=AsyncSession, expire_on_commit=False)


DATABASE_URL = normalize_database_url(
    os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./nba_playoffs.db")
)
SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() == "true"

engine = build_engine(DATABASE_URL, echo=SQL_ECHO)
async_session_maker = make_session_maker(engine)


async def create_tables(bind: Optional[AsyncEngine] = None) -> None:
    """Create all database tables (on the app engine unless another is given)."""
    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency for getting a database session.

    Routes commit explicitly; anything left uncommitted is rolled back on close.
    """
    async with async_session_maker() as session:
        yield session
