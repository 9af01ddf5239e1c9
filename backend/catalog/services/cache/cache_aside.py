"""
Cache-Aside Product Repository

Wraps a persistent ``ProductRepository`` with a ``CacheRepository`` and
exposes the same port, so the product service never knows whether caching is
on.

Reads consult the cache first. On a miss, or on any cache failure, the store
is read and the result written back with the configured TTL. Absent records
are not cached.

Writes go to the store first. After any non-error result, including "not
found" outcomes of update and delete, the record key and the collection key
are invalidated independently. A store error skips invalidation and
propagates unchanged. Cache failures are logged and counted, never raised.

A caller ``timeout`` is passed to the store call only. Cache reads and
invalidation are bounded by the cache adapter's own operation timeout, so a
slow cache never turns a committed write into a timeout.
"""

from functools import partial
from typing import Any, Callable, List, Optional, TypeVar
from uuid import UUID

from opentelemetry import trace
import structlog

from ...domain.cache.exceptions import CacheFailure, CacheDeserializationError
from ...domain.cache.repository_interfaces import CacheRepository
from ...domain.cache.value_objects import CacheKey, TTL
from ...domain.products.entities import Product
from ...domain.products.exceptions import ProductValidationError
from ...domain.products.repository_interfaces import ProductRepository
from ...monitoring.metrics import (
    CACHE_HITS,
    CACHE_MISSES,
    CACHE_ERRORS,
    CACHE_INVALIDATIONS,
)

logger = structlog.get_logger()
tracer = trace.get_tracer(__name__)

T = TypeVar("T")


def _decode_product(
    key: CacheKey, payload: Any, expected_id: Optional[UUID] = None
) -> Product:
    try:
        product = Product.from_dict(payload)
    except ProductValidationError as e:
        raise CacheDeserializationError(key.value, cause=e) from e
    if expected_id is not None and product.id != expected_id:
        raise CacheDeserializationError(
            key.value,
            cause=ValueError(f"cached id {product.id} does not match {expected_id}"),
        )
    return product


def _decode_products(key: CacheKey, payload: Any) -> List[Product]:
    if not isinstance(payload, list):
        raise CacheDeserializationError(
            key.value, cause=TypeError(f"expected list, got {type(payload).__name__}")
        )
    return [_decode_product(key, item) for item in payload]


class CacheAsideProductRepository(ProductRepository):
    """Product repository decorated with cache-aside reads and write invalidation."""

    def __init__(
        self,
        store: ProductRepository,
        cache: CacheRepository,
        ttl: Optional[TTL] = None,
    ):
        self._store = store
        self._cache = cache
        self._ttl = ttl or TTL.default()

    @property
    def ttl(self) -> TTL:
        return self._ttl

    # Read path

    async def read_all(self, *, timeout: Optional[float] = None) -> List[Product]:
        key = CacheKey.products()
        with tracer.start_as_current_span("cache_aside.read_all") as span:
            cached = await self._lookup("read_all", key, _decode_products)
            if cached is not None:
                span.set_attribute("cache.hit", True)
                return cached

            span.set_attribute("cache.hit", False)
            products = await self._store.read_all(timeout=timeout)
            await self._populate(
                "read_all", key, [product.to_dict() for product in products]
            )
            return products

    async def read_one(
        self, product_id: UUID, *, timeout: Optional[float] = None
    ) -> Optional[Product]:
        key = CacheKey.product(product_id)
        with tracer.start_as_current_span("cache_aside.read_one") as span:
            span.set_attribute("product.id", str(product_id))
            cached = await self._lookup(
                "read_one", key, partial(_decode_product, expected_id=product_id)
            )
            if cached is not None:
                span.set_attribute("cache.hit", True)
                return cached

            span.set_attribute("cache.hit", False)
            product = await self._store.read_one(product_id, timeout=timeout)
            if product is not None:
                await self._populate("read_one", key, product.to_dict())
            return product

    # Write path

    async def create(
        self,
        name: str,
        description: str,
        price: int,
        *,
        timeout: Optional[float] = None,
    ) -> Product:
        with tracer.start_as_current_span("cache_aside.create"):
            product = await self._store.create(
                name, description, price, timeout=timeout
            )
            await self._invalidate("create", product.id)
            return product

    async def update(
        self,
        product_id: UUID,
        name: str,
        description: str,
        price: int,
        *,
        timeout: Optional[float] = None,
    ) -> Optional[Product]:
        with tracer.start_as_current_span("cache_aside.update") as span:
            span.set_attribute("product.id", str(product_id))
            product = await self._store.update(
                product_id, name, description, price, timeout=timeout
            )
            await self._invalidate("update", product_id)
            return product

    async def delete(
        self, product_id: UUID, *, timeout: Optional[float] = None
    ) -> bool:
        with tracer.start_as_current_span("cache_aside.delete") as span:
            span.set_attribute("product.id", str(product_id))
            deleted = await self._store.delete(product_id, timeout=timeout)
            await self._invalidate("delete", product_id)
            return deleted

    # Cache helpers

    async def _lookup(
        self, operation: str, key: CacheKey, decode: Callable[[CacheKey, Any], T]
    ) -> Optional[T]:
        """Return the decoded cached value, or None on miss or cache failure."""
        try:
            payload = await self._cache.get(key)
            if payload is None:
                CACHE_MISSES.labels(operation=operation).inc()
                return None
            value = decode(key, payload)
        except CacheFailure as e:
            CACHE_ERRORS.labels(operation=operation, stage="get").inc()
            logger.warning(
                "Cache read failed, falling back to store",
                operation=operation,
                key=key.value,
                error_code=e.error_code,
                error=e.message,
            )
            return None

        CACHE_HITS.labels(operation=operation).inc()
        logger.debug("Cache hit", operation=operation, key=key.value)
        return value

    async def _populate(self, operation: str, key: CacheKey, value: Any) -> None:
        try:
            await self._cache.set(key, value, self._ttl)
        except CacheFailure as e:
            CACHE_ERRORS.labels(operation=operation, stage="set").inc()
            logger.warning(
                "Cache write-back failed",
                operation=operation,
                key=key.value,
                error_code=e.error_code,
                error=e.message,
            )

    async def _invalidate(self, operation: str, product_id: UUID) -> None:
        """Delete the record key and the collection key; each failure is independent."""
        for key in (CacheKey.product(product_id), CacheKey.products()):
            try:
                await self._cache.delete(key)
            except CacheFailure as e:
                CACHE_ERRORS.labels(operation=operation, stage="invalidate").inc()
                logger.warning(
                    "Cache invalidation failed",
                    operation=operation,
                    key=key.value,
                    error_code=e.error_code,
                    error=e.message,
                )
            else:
                CACHE_INVALIDATIONS.labels(operation=operation).inc()
