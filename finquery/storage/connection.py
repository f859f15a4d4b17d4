"""Async PostgreSQL engine for the finance database (read-only access)."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from ..core.config import DatabaseSettings, ensure_asyncpg_url, get_settings

_logger = structlog.get_logger(__name__)


class DatabaseManager:
    """Owns the engine and session factory; sessions never write."""

    def __init__(
        self,
        postgres_url: str | None = None,
        settings: DatabaseSettings | None = None,
    ) -> None:
        settings = settings or get_settings().database
        url = postgres_url or settings.postgres_url
        if not url:
            raise ValueError("DATABASE__POSTGRES_URL is not configured")
        self.pg_engine = create_async_engine(
            ensure_asyncpg_url(url),
            pool_size=settings.pool_size,
            max_overflow=settings.max_overflow,
            pool_pre_ping=True,
        )
        self.pg_session_factory: async_sessionmaker[AsyncSession] | None = async_sessionmaker(
            self.pg_engine, expire_on_commit=False
        )

    @asynccontextmanager
    async def pg_session(self) -> AsyncGenerator[AsyncSession, None]:
        """Yield a session inside a READ ONLY transaction that is always rolled back."""
        if self.pg_session_factory is None:
            raise RuntimeError("DatabaseManager is closed")
        async with self.pg_session_factory() as session:
            await session.execute(text("SET TRANSACTION READ ONLY"))
            try:
                yield session
            finally:
                await session.rollback()

    async def close(self) -> None:
        if self.pg_session_factory is None:
            return
        await self.pg_engine.dispose()
        self.pg_session_factory = None
        _logger.info("finance_db_engine_disposed")
