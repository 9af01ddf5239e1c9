"""
Composition root.

Selects the store and cache adapters from settings, wraps the store in the
cache-aside layer when a cache is enabled, and builds the product service.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

import structlog

from .core.config import Settings
from .core.database import DatabaseManager
from .domain.cache.repository_interfaces import CacheRepository
from .domain.cache.value_objects import TTL
from .domain.products.repository_interfaces import ProductRepository
from .infrastructure.redis.connection_factory import RedisConnectionFactory
from .infrastructure.repositories import (
    SqlAlchemyProductRepository,
    RedisCacheRepository,
    InMemoryProductRepository,
    InMemoryCacheRepository,
)
from .services.cache.cache_aside import CacheAsideProductRepository
from .services.products.product_service import ProductService

logger = structlog.get_logger()


@dataclass
class AppResources:
    """Everything the application owns for its lifetime."""

    service: ProductService
    store: ProductRepository
    cache: Optional[CacheRepository] = None
    database: Optional[DatabaseManager] = None
    redis: Optional[RedisConnectionFactory] = None

    async def health(self) -> Dict[str, Any]:
        """Probe the store and cache; the cache never makes the app unready."""
        checks: Dict[str, Any] = {}

        if self.database is not None:
            checks["store"] = await self.database.health_check()
        else:
            checks["store"] = {"status": "healthy", "backend": "memory"}

        if self.cache is None:
            checks["cache"] = {"status": "disabled"}
        else:
            healthy = await self.cache.health_check()
            checks["cache"] = {"status": "healthy" if healthy else "degraded"}

        ready = checks["store"].get("status") == "healthy"
        return {"status": "ready" if ready else "not_ready", "checks": checks}

    async def close(self) -> None:
        if self.redis is not None:
            await self.redis.close()
        if self.database is not None:
            await self.database.close()


async def build_store(settings: Settings):
    """Return ``(store, database_manager)`` for the configured backend."""
    if settings.STORE_BACKEND == "memory":
        return InMemoryProductRepository(), None

    database = DatabaseManager(settings)
    await database.initialize()
    store = SqlAlchemyProductRepository(
        database.session_factory,
        operation_timeout=settings.STORE_OPERATION_TIMEOUT,
    )
    return store, database


async def build_cache(settings: Settings):
    """Return ``(cache, redis_factory)``; both None when caching is disabled."""
    if settings.CACHE_BACKEND == "disabled":
        return None, None
    if settings.CACHE_BACKEND == "memory":
        return InMemoryCacheRepository(), None

    redis_factory = RedisConnectionFactory(settings)
    client = await redis_factory.initialize()
    cache = RedisCacheRepository(
        client, operation_timeout=settings.CACHE_OPERATION_TIMEOUT
    )
    return cache, redis_factory


async def build_resources(settings: Settings) -> AppResources:
    store, database = await build_store(settings)
    try:
        cache, redis_factory = await build_cache(settings)
    except Exception:
        if database is not None:
            await database.close()
        raise

    repository: ProductRepository = store
    if cache is not None:
        repository = CacheAsideProductRepository(
            store, cache, ttl=TTL.of_seconds(settings.CACHE_TTL_SECONDS)
        )

    logger.info(
        "Catalog resources built",
        store_backend=settings.STORE_BACKEND,
        cache_backend=settings.CACHE_BACKEND,
        cache_ttl_seconds=settings.CACHE_TTL_SECONDS,
    )
    return AppResources(
        service=ProductService(repository),
        store=store,
        cache=cache,
        database=database,
        redis=redis_factory,
    )
