"""
Database engine and session management.

Wraps a SQLAlchemy async engine and the session factory shared by the
repositories.
"""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from application.entity.chat import Base

logger = logging.getLogger(__name__)


class Database:
    """Owns the async engine and hands out sessions."""

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        engine_kwargs = {"echo": echo}
        if url.startswith("sqlite") and ":memory:" in url:
            # A single shared connection keeps an in-memory database alive
            engine_kwargs["poolclass"] = StaticPool
            engine_kwargs["connect_args"] = {"check_same_thread": False}

        self.engine: AsyncEngine = create_async_engine(url, **engine_kwargs)
        self.session_factory: async_sessionmaker[AsyncSession] = async_sessionmaker(
            self.engine, expire_on_commit=False
        )

    async def create_all(self) -> None:
        """Create missing tables."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema ready")

    async def dispose(self) -> None:
        await self.engine.dispose()
        logger.info("Database engine disposed")


_database: Optional[Database] = None


def init_database(url: str, echo: bool = False) -> Database:
    """Create the process-wide database, replacing any previous one."""
    global _database
    _database = Database(url, echo=echo)
    logger.info(f"Database initialized: {url.split('://', 1)[0]}")
    return _database


def get_database() -> Database:
    if _database is None:
        raise RuntimeError("Database not initialized. Call init_database() first.")
    return _database
