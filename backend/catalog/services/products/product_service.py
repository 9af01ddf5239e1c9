"""
Product Service

Use-case layer for the catalog. Validates input, delegates to the injected
``ProductRepository`` (the plain store or the cache-aside wrapper), turns
"absent" results into ``ProductNotFound`` and wraps store errors into
``RepositoryFailure`` so callers never see the store's error vocabulary.
"""

from typing import Awaitable, List, Optional, TypeVar, Union
from uuid import UUID

import structlog

from ...domain.products.entities import Product, validate_product_fields
from ...domain.products.exceptions import (
    StoreError,
    StoreTimeoutError,
    ProductValidationError,
    ProductNotFound,
    RepositoryFailure,
    RepositoryTimeout,
)
from ...domain.products.repository_interfaces import ProductRepository

logger = structlog.get_logger()

T = TypeVar("T")


def parse_product_id(product_id: Union[str, UUID]) -> UUID:
    """Normalize a product identifier, rejecting malformed values."""
    if isinstance(product_id, UUID):
        return product_id
    try:
        return UUID(str(product_id))
    except ValueError as e:
        raise ProductValidationError("Invalid product ID format", "id", product_id) from e


class ProductService:
    """
    Product use cases: add, list, find, modify, patch and remove.

    Every operation accepts ``timeout`` (seconds), forwarded to the repository
    as the deadline for each store call. When it expires the pending store
    call is cancelled and ``RepositoryTimeout`` is raised; the call is not
    retried. Cache work after a committed write is not bounded by it.
    """

    def __init__(self, repository: ProductRepository):
        self.repository = repository

    async def add(
        self,
        name: str,
        description: str,
        price: int,
        *,
        timeout: Optional[float] = None,
    ) -> Product:
        validate_product_fields(name, description, price)
        product = await self._call(
            "add",
            self.repository.create(name, description, price, timeout=timeout),
        )
        logger.info("Product created", product_id=str(product.id))
        return product

    async def list(self, *, timeout: Optional[float] = None) -> List[Product]:
        return await self._call("list", self.repository.read_all(timeout=timeout))

    async def find(
        self, product_id: Union[str, UUID], *, timeout: Optional[float] = None
    ) -> Product:
        """
        Get one product.

        Raises:
            ProductNotFound: If no product has this id.
            RepositoryFailure: If the store fails.
        """
        product_id = parse_product_id(product_id)
        product = await self._call(
            "find", self.repository.read_one(product_id, timeout=timeout)
        )
        if product is None:
            raise ProductNotFound(product_id)
        return product

    async def modify(
        self,
        product_id: Union[str, UUID],
        name: str,
        description: str,
        price: int,
        *,
        timeout: Optional[float] = None,
    ) -> Product:
        product_id = parse_product_id(product_id)
        validate_product_fields(name, description, price)
        product = await self._call(
            "modify",
            self.repository.update(
                product_id, name, description, price, timeout=timeout
            ),
        )
        if product is None:
            raise ProductNotFound(product_id)
        logger.info("Product updated", product_id=str(product_id))
        return product

    async def patch(
        self,
        product_id: Union[str, UUID],
        *,
        name: Optional[str] = None,
        description: Optional[str] = None,
        price: Optional[int] = None,
        timeout: Optional[float] = None,
    ) -> Product:
        """
        Change only the given fields of an existing product.

        Fields left as None keep their current value. The current record is
        read through the repository, so with caching enabled it may come from
        the cache.

        Raises:
            ProductNotFound: If no product has this id.
            ProductValidationError: If a merged field is invalid.
        """
        product_id = parse_product_id(product_id)
        current = await self._call(
            "patch", self.repository.read_one(product_id, timeout=timeout)
        )
        if current is None:
            raise ProductNotFound(product_id)

        name = current.name if name is None else name
        description = current.description if description is None else description
        price = current.price if price is None else price
        validate_product_fields(name, description, price)

        product = await self._call(
            "patch",
            self.repository.update(
                product_id, name, description, price, timeout=timeout
            ),
        )
        if product is None:
            raise ProductNotFound(product_id)
        logger.info("Product patched", product_id=str(product_id))
        return product

    async def remove(
        self, product_id: Union[str, UUID], *, timeout: Optional[float] = None
    ) -> None:
        product_id = parse_product_id(product_id)
        deleted = await self._call(
            "remove", self.repository.delete(product_id, timeout=timeout)
        )
        if not deleted:
            raise ProductNotFound(product_id)
        logger.info("Product deleted", product_id=str(product_id))

    async def _call(self, operation: str, awaitable: Awaitable[T]) -> T:
        """Await a repository call and map store errors."""
        try:
            return await awaitable

        except StoreTimeoutError as e:
            logger.error(
                "Store operation timed out",
                operation=operation,
                timeout_seconds=e.timeout_seconds,
            )
            raise RepositoryTimeout(operation, e.timeout_seconds, cause=e) from e

        except StoreError as e:
            logger.error(
                "Store operation failed",
                operation=operation,
                store_operation=e.operation,
                error=e.message,
                cause_type=type(e.cause).__name__ if e.cause else None,
            )
            raise RepositoryFailure(operation, cause=e) from e
