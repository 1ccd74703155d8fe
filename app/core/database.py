"""
Async SQLAlchemy database setup.

The Database object is built by the application lifespan and handed to the
services that need it; there is no module-level engine.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import structlog
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

logger = structlog.get_logger(__name__)


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""
    pass


class Database:
    """Owns the async engine and session factory for one database URL."""

    def __init__(
        self,
        url: str,
        pool_size: Optional[int] = None,
        max_overflow: Optional[int] = None,
        echo: bool = False,
    ):
        engine_kwargs: dict = {"echo": echo}
        # SQLite (tests, local runs) uses a static pool without sizing options
        if not url.startswith("sqlite"):
            engine_kwargs["pool_pre_ping"] = True
            if pool_size is not None:
                engine_kwargs["pool_size"] = pool_size
            if max_overflow is not None:
                engine_kwargs["max_overflow"] = max_overflow

        self.url = url
        self.engine: AsyncEngine = create_async_engine(url, **engine_kwargs)
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Yield a session, rolling back if the block raises."""
        async with self.session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    async def create_all(self) -> None:
        """Create tables for all imported models."""
        import app.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables ensured")

    async def dispose(self) -> None:
        """Close all pooled connections."""
        await self.engine.dispose()
