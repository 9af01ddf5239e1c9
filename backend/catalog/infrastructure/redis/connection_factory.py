"""
Redis Connection Factory

Builds the single pooled ``redis.asyncio`` client shared by the process.
The cache is optional: a failing startup probe is logged, not fatal, and
requests fall back to the store until Redis becomes reachable.
"""

import asyncio
from typing import Optional

from redis.asyncio import ConnectionPool, Redis
from redis.exceptions import RedisError
import structlog

from ...core.config import Settings

logger = structlog.get_logger()


class RedisConnectionFactory:
    """
    Factory for the shared Redis client.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self._pool: Optional[ConnectionPool] = None
        self._client: Optional[Redis] = None
        self._lock = asyncio.Lock()

    async def initialize(self) -> Redis:
        """Create the connection pool and client, then probe connectivity."""
        async with self._lock:
            if self._client is not None:
                return self._client

            self._pool = ConnectionPool.from_url(
                self.settings.REDIS_URL,
                max_connections=self.settings.REDIS_MAX_CONNECTIONS,
                socket_connect_timeout=self.settings.REDIS_CONNECTION_TIMEOUT,
                socket_timeout=self.settings.CACHE_OPERATION_TIMEOUT,
                decode_responses=True,
                encoding="utf-8",
            )
            self._client = Redis(connection_pool=self._pool)

        try:
            await self._client.ping()
            logger.info(
                "Redis client initialized",
                max_connections=self.settings.REDIS_MAX_CONNECTIONS,
            )
        except (RedisError, OSError) as e:
            logger.warning(
                "Redis unreachable at startup, continuing with degraded cache",
                error=str(e),
            )

        return self._client

    async def close(self) -> None:
        """Close the client and disconnect the pool."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
        if self._pool is not None:
            await self._pool.disconnect()
            self._pool = None
            logger.info("Redis connections closed")
