"""
Shared plumbing for asyncpg repositories.

Connection acquisition is bounded by ``database_pool_timeout``; a pool that
cannot hand out a connection in time raises ``InternalError`` instead of
waiting indefinitely.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import asyncpg
import structlog

from health_api.config import Settings, get_settings
from health_api.errors import InternalError

logger = structlog.get_logger(__name__)


class BaseRepository:
    """Base class holding the pool and settings."""

    def __init__(self, pool: asyncpg.Pool, settings: Optional[Settings] = None):
        """
        Initialize repository.

        Args:
            pool: asyncpg connection pool
            settings: Application settings (defaults to cached settings)
        """
        self.pool = pool
        self.settings = settings or get_settings()

    @asynccontextmanager
    async def connection(self) -> AsyncIterator[asyncpg.Connection]:
        """
        Acquire a pooled connection for a single statement.

        Yields:
            asyncpg.Connection: Database connection

        Raises:
            InternalError: If no connection is available within the timeout
        """
        try:
            conn = await self.pool.acquire(timeout=self.settings.database_pool_timeout)
        except asyncio.TimeoutError:
            logger.error(
                "database_acquire_timeout",
                timeout=self.settings.database_pool_timeout
            )
            raise InternalError("Database connection unavailable")

        try:
            yield conn
        finally:
            await self.pool.release(conn)
