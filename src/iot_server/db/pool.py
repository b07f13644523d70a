"""Asyncpg connection pool and per-request transactions."""
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

import asyncpg  # type: ignore[import-untyped]
import structlog

logger = structlog.get_logger(__name__)


class Database:
    """Owns the asyncpg pool and hands out transactional connections."""

    def __init__(self, dsn: str, pool_size: int, *, pool: asyncpg.Pool | None = None) -> None:
        self._dsn = dsn
        self._pool_size = pool_size
        self._pool = pool

    async def init_pool(self, _app: Any = None) -> None:
        """Initialize the pool (aiohttp on_startup hook)."""
        if self._pool is None:
            self._pool = await asyncpg.create_pool(
                dsn=self._dsn,
                max_size=self._pool_size,
            )
            logger.info("db_pool_opened", max_size=self._pool_size)

    async def close_pool(self, _app: Any = None) -> None:
        """Close the pool (aiohttp on_cleanup hook)."""
        if self._pool is not None:
            await self._pool.close()
            self._pool = None
            logger.info("db_pool_closed")

    @property
    def pool(self) -> asyncpg.Pool:
        if self._pool is None:
            raise RuntimeError("Database pool not initialized. Call init_pool() first.")
        return self._pool

    @asynccontextmanager
    async def begin(self) -> AsyncIterator[asyncpg.Connection]:
        """Yield a connection inside a transaction.

        The transaction commits when the block exits normally and rolls back
        on any exception, which is then re-raised unchanged.
        """
        async with self.pool.acquire() as conn:
            tx = conn.transaction()
            await tx.start()
            try:
                yield conn
            except BaseException as exc:
                await tx.rollback()
                logger.debug("transaction_rolled_back", reason=type(exc).__name__)
                raise
            await tx.commit()
