"""
In-memory adapters.

Process-local implementations of the product store and cache ports, used for
local development (``STORE_BACKEND=memory`` / ``CACHE_BACKEND=memory``) and in
tests. Both guard their dictionaries with an ``asyncio.Lock``.
"""

import asyncio
import itertools
import time
import uuid
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, List, Optional, TypeVar
from uuid import UUID

import structlog

from ...constants import get_current_timestamp
from ...core.timeouts import run_with_timeout
from ...domain.cache.repository_interfaces import CacheRepository
from ...domain.cache.value_objects import CacheKey, TTL
from ...domain.products.entities import Product
from ...domain.products.exceptions import StoreTimeoutError
from ...domain.products.repository_interfaces import ProductRepository
from .cache_repository import serialize_value, deserialize_value

logger = structlog.get_logger()

T = TypeVar("T")


@dataclass(frozen=True)
class _StoredProduct:
    product: Product
    created_at: datetime
    updated_at: datetime
    revision: int


class InMemoryProductRepository(ProductRepository):
    """Dictionary-backed product store.

    Ordering for ``read_all`` uses a monotonically increasing revision so that
    writes landing within the same clock tick still sort deterministically.
    A caller ``timeout`` bounds the wait for the lock and raises
    ``StoreTimeoutError`` like the SQL adapter does.
    """

    def __init__(self):
        self._records: Dict[UUID, _StoredProduct] = {}
        self._revisions = itertools.count(1)
        self._lock = asyncio.Lock()

    async def _bounded(
        self, operation: str, awaitable: Awaitable[T], timeout: Optional[float]
    ) -> T:
        try:
            return await run_with_timeout(awaitable, timeout)
        except asyncio.TimeoutError:
            logger.warning(
                "InMemoryProductRepository: Operation timed out",
                operation=operation,
                timeout_seconds=timeout,
            )
            raise StoreTimeoutError(operation, timeout)

    async def create(
        self,
        name: str,
        description: str,
        price: int,
        *,
        timeout: Optional[float] = None,
    ) -> Product:
        product = await self._bounded(
            "create", self._create(name, description, price), timeout
        )
        logger.debug("InMemoryProductRepository: Product created", product_id=str(product.id))
        return product

    async def read_all(self, *, timeout: Optional[float] = None) -> List[Product]:
        return await self._bounded("read_all", self._read_all(), timeout)

    async def read_one(
        self, product_id: UUID, *, timeout: Optional[float] = None
    ) -> Optional[Product]:
        return await self._bounded("read_one", self._read_one(product_id), timeout)

    async def update(
        self,
        product_id: UUID,
        name: str,
        description: str,
        price: int,
        *,
        timeout: Optional[float] = None,
    ) -> Optional[Product]:
        return await self._bounded(
            "update", self._update(product_id, name, description, price), timeout
        )

    async def delete(
        self, product_id: UUID, *, timeout: Optional[float] = None
    ) -> bool:
        return await self._bounded("delete", self._delete(product_id), timeout)

    async def _create(self, name: str, description: str, price: int) -> Product:
        product = Product(id=uuid.uuid4(), name=name, description=description, price=price)
        now = get_current_timestamp()
        async with self._lock:
            self._records[product.id] = _StoredProduct(
                product=product,
                created_at=now,
                updated_at=now,
                revision=next(self._revisions),
            )
        return product

    async def _read_all(self) -> List[Product]:
        async with self._lock:
            stored = sorted(
                self._records.values(), key=lambda s: s.revision, reverse=True
            )
        return [entry.product for entry in stored]

    async def _read_one(self, product_id: UUID) -> Optional[Product]:
        async with self._lock:
            entry = self._records.get(product_id)
        return entry.product if entry else None

    async def _update(
        self, product_id: UUID, name: str, description: str, price: int
    ) -> Optional[Product]:
        async with self._lock:
            entry = self._records.get(product_id)
            if entry is None:
                return None
            product = Product(
                id=product_id, name=name, description=description, price=price
            )
            self._records[product_id] = replace(
                entry,
                product=product,
                updated_at=get_current_timestamp(),
                revision=next(self._revisions),
            )
        return product

    async def _delete(self, product_id: UUID) -> bool:
        async with self._lock:
            return self._records.pop(product_id, None) is not None

    def __len__(self) -> int:
        return len(self._records)


@dataclass(frozen=True)
class _CacheEntry:
    payload: str
    expires_at: float


class InMemoryCacheRepository(CacheRepository):
    """Dictionary-backed cache with TTL expiry.

    Payloads are stored serialized, as Redis would hold them. ``clock`` returns
    seconds on a monotonic scale and can be replaced in tests.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._entries: Dict[str, _CacheEntry] = {}
        self._clock = clock
        self._lock = asyncio.Lock()

    async def get(self, key: CacheKey) -> Optional[Any]:
        async with self._lock:
            entry = self._entries.get(key.value)
            if entry is None:
                return None
            if self._clock() >= entry.expires_at:
                del self._entries[key.value]
                return None
            payload = entry.payload
        return deserialize_value(key.value, payload)

    async def set(self, key: CacheKey, value: Any, ttl: TTL) -> None:
        payload = serialize_value(key.value, value)
        async with self._lock:
            self._entries[key.value] = _CacheEntry(
                payload=payload, expires_at=self._clock() + ttl.seconds
            )

    async def delete(self, key: CacheKey) -> None:
        async with self._lock:
            self._entries.pop(key.value, None)

    async def contains(self, key: CacheKey) -> bool:
        """True if an unexpired entry exists for ``key``."""
        async with self._lock:
            entry = self._entries.get(key.value)
            return entry is not None and self._clock() < entry.expires_at
