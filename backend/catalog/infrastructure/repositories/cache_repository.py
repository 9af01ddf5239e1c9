"""
Redis Cache Repository Implementation

Infrastructure implementation of the ``CacheRepository`` port using Redis.
Values are stored as JSON text with a per-key expiry (``SET key value EX ttl``).

Concurrency: the ``redis.asyncio`` client is backed by a connection pool and is
safe to share between concurrent coroutines, so cache access is not serialized
behind a lock.
"""

import asyncio
import json
from typing import Any, Awaitable, Optional, TypeVar, Union

from redis.asyncio import Redis
from redis.exceptions import RedisError
import structlog

from ...core.timeouts import run_with_timeout
from ...domain.cache.exceptions import (
    CacheFailure,
    CacheDeserializationError,
    CacheTimeoutError,
)
from ...domain.cache.repository_interfaces import CacheRepository
from ...domain.cache.value_objects import CacheKey, TTL

logger = structlog.get_logger()

T = TypeVar("T")


def serialize_value(key: str, value: Any) -> str:
    """Encode a JSON-compatible value for storage."""
    try:
        return json.dumps(value, separators=(",", ":"))
    except (TypeError, ValueError) as e:
        raise CacheFailure(
            f"Value for key {key} is not JSON serializable",
            key=key,
            operation="set",
            cause=e,
        ) from e


def deserialize_value(key: str, payload: Union[str, bytes]) -> Any:
    """Decode a stored payload; corrupt data raises ``CacheDeserializationError``."""
    try:
        return json.loads(payload)
    except (TypeError, ValueError) as e:
        raise CacheDeserializationError(key, cause=e) from e


class RedisCacheRepository(CacheRepository):
    """Redis implementation of the cache port."""

    def __init__(self, client: Redis, operation_timeout: Optional[float] = None):
        if client is None:
            raise ValueError("client must not be None")
        self._client = client
        self._operation_timeout = operation_timeout

    async def _run(self, operation: str, key: CacheKey, awaitable: Awaitable[T]) -> T:
        """Apply the timeout and translate Redis errors into ``CacheFailure``."""
        try:
            return await run_with_timeout(awaitable, self._operation_timeout)

        except asyncio.TimeoutError:
            raise CacheTimeoutError(operation, self._operation_timeout, key=key.value)

        except RedisError as e:
            logger.warning(
                "Redis operation failed",
                operation=operation,
                key=key.value,
                error=str(e),
            )
            raise CacheFailure(
                f"Redis {operation} failed for key {key.value}",
                key=key.value,
                operation=operation,
                cause=e,
            ) from e

    async def get(self, key: CacheKey) -> Optional[Any]:
        payload = await self._run("get", key, self._client.get(key.value))
        if payload is None:
            return None
        return deserialize_value(key.value, payload)

    async def set(self, key: CacheKey, value: Any, ttl: TTL) -> None:
        payload = serialize_value(key.value, value)
        await self._run("set", key, self._client.set(key.value, payload, ex=ttl.seconds))
        logger.debug("Cache entry stored", key=key.value, ttl_seconds=ttl.seconds)

    async def delete(self, key: CacheKey) -> None:
        await self._run("delete", key, self._client.delete(key.value))

    async def health_check(self) -> bool:
        try:
            return bool(
                await run_with_timeout(self._client.ping(), self._operation_timeout)
            )
        except (RedisError, asyncio.TimeoutError) as e:
            logger.warning("Redis health check failed", error=str(e))
            return False
