"""
Product Repository Interface

Abstract persistent store contract following the DDD Repository pattern.
Adapters are chosen at composition time; business logic only sees this port.

"Not found" is a normal return value (``None`` / ``False``), never an error.
Infrastructure problems are raised as ``StoreError`` subclasses.

Every operation takes an optional ``timeout`` (seconds): the caller's
deadline for the store call itself. Adapters combine it with their own
per-operation limit and raise ``StoreTimeoutError`` when it expires.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from .entities import Product


class ProductRepository(ABC):
    """Abstract repository for product persistence."""

    @abstractmethod
    async def create(
        self,
        name: str,
        description: str,
        price: int,
        *,
        timeout: Optional[float] = None,
    ) -> Product:
        """
        Persist a new product under a freshly assigned identifier.

        Returns:
            The stored product

        Raises:
            StoreError: On connectivity or constraint failure
            StoreTimeoutError: If the deadline expires
        """
        pass

    @abstractmethod
    async def read_all(self, *, timeout: Optional[float] = None) -> List[Product]:
        """
        Return every product, most recently updated first.

        Returns:
            Products (empty list when none exist)

        Raises:
            StoreError: On connectivity failure
        """
        pass

    @abstractmethod
    async def read_one(
        self, product_id: UUID, *, timeout: Optional[float] = None
    ) -> Optional[Product]:
        """
        Return the product with the given identifier.

        Returns:
            The product, or None if absent

        Raises:
            StoreError: On connectivity failure
        """
        pass

    @abstractmethod
    async def update(
        self,
        product_id: UUID,
        name: str,
        description: str,
        price: int,
        *,
        timeout: Optional[float] = None,
    ) -> Optional[Product]:
        """
        Replace the mutable fields of an existing product.

        Never creates a record.

        Returns:
            The updated product, or None if absent

        Raises:
            StoreError: On connectivity or constraint failure
        """
        pass

    @abstractmethod
    async def delete(
        self, product_id: UUID, *, timeout: Optional[float] = None
    ) -> bool:
        """
        Remove the product if present.

        Returns:
            True if a record was removed, False if none existed

        Raises:
            StoreError: On connectivity failure
        """
        pass

