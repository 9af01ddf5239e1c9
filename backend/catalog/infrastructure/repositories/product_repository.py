"""
SQL Product Repository

SQLAlchemy (async) implementation of the ``ProductRepository`` port.
Each operation runs in its own short transaction on a pooled connection and
is bounded by the configured store timeout, or by the caller's ``timeout``
when that is tighter.
"""

import asyncio
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, List, Optional, TypeVar
from uuid import UUID

from sqlalchemy import select, update, delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
import structlog

from ...constants import get_current_timestamp
from ...core.timeouts import effective_timeout, run_with_timeout
from ...domain.products.entities import Product
from ...domain.products.exceptions import (
    StoreError,
    StoreTimeoutError,
    ProductValidationError,
)
from ...domain.products.repository_interfaces import ProductRepository
from ...models import ProductRecord
from ...monitoring.metrics import STORE_FAILURES, STORE_LATENCY

logger = structlog.get_logger()

T = TypeVar("T")


class SqlAlchemyProductRepository(ProductRepository):
    """
    Relational product repository.

    The session factory is backed by a pooled async engine and is safe to
    share across concurrent requests.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        operation_timeout: Optional[float] = None,
    ):
        if session_factory is None:
            raise ValueError("session_factory must not be None")
        self._session_factory = session_factory
        self._operation_timeout = operation_timeout

    @asynccontextmanager
    async def _transaction(self) -> AsyncIterator[AsyncSession]:
        """Session with a transaction committed on exit, rolled back on error."""
        async with self._session_factory() as session:
            async with session.begin():
                yield session

    async def _run(
        self,
        operation: str,
        awaitable: Awaitable[T],
        caller_timeout: Optional[float] = None,
        **log_context,
    ) -> T:
        """Apply the timeout and translate driver errors into ``StoreError``."""
        timeout = effective_timeout(self._operation_timeout, caller_timeout)
        start_time = time.perf_counter()
        try:
            return await run_with_timeout(awaitable, timeout)

        except asyncio.TimeoutError:
            STORE_FAILURES.labels(operation=operation, error_type="timeout").inc()
            logger.error(
                "ProductRepository: Operation timed out",
                operation=operation,
                timeout_seconds=timeout,
                **log_context,
            )
            raise StoreTimeoutError(operation, timeout)

        except (SQLAlchemyError, OSError) as e:
            STORE_FAILURES.labels(operation=operation, error_type=type(e).__name__).inc()
            logger.error(
                "ProductRepository: Operation failed",
                operation=operation,
                error=str(e),
                exc_info=True,
                **log_context,
            )
            raise StoreError(
                f"Product store failed during '{operation}'",
                operation=operation,
                cause=e,
            ) from e

        finally:
            STORE_LATENCY.labels(operation=operation).observe(
                time.perf_counter() - start_time
            )

    @staticmethod
    def _to_product(
        product_id: UUID, name: str, description: str, price: int
    ) -> Product:
        """Build the domain entity; a row breaking invariants is a store error."""
        try:
            return Product(id=product_id, name=name, description=description, price=price)
        except ProductValidationError as e:
            raise StoreError(
                f"Stored product {product_id} violates entity invariants",
                operation="map_row",
                cause=e,
            ) from e

    @classmethod
    def _record_to_product(cls, record: ProductRecord) -> Product:
        return cls._to_product(record.id, record.name, record.description, record.price)

    async def create(
        self,
        name: str,
        description: str,
        price: int,
        *,
        timeout: Optional[float] = None,
    ) -> Product:
        product = await self._run(
            "create", self._create(name, description, price), timeout
        )
        logger.info("ProductRepository: Product created", product_id=str(product.id))
        return product

    async def _create(self, name: str, description: str, price: int) -> Product:
        async with self._transaction() as session:
            record = ProductRecord(name=name, description=description, price=price)
            session.add(record)
            await session.flush()
            return self._record_to_product(record)

    async def read_all(self, *, timeout: Optional[float] = None) -> List[Product]:
        products = await self._run("read_all", self._read_all(), timeout)
        logger.debug("ProductRepository: Products listed", count=len(products))
        return products

    async def _read_all(self) -> List[Product]:
        async with self._transaction() as session:
            stmt = select(ProductRecord).order_by(ProductRecord.updated_at.desc())
            result = await session.execute(stmt)
            return [self._record_to_product(record) for record in result.scalars().all()]

    async def read_one(
        self, product_id: UUID, *, timeout: Optional[float] = None
    ) -> Optional[Product]:
        return await self._run(
            "read_one",
            self._read_one(product_id),
            timeout,
            product_id=str(product_id),
        )

    async def _read_one(self, product_id: UUID) -> Optional[Product]:
        async with self._transaction() as session:
            record = await session.get(ProductRecord, product_id)
            if record is None:
                return None
            return self._record_to_product(record)

    async def update(
        self,
        product_id: UUID,
        name: str,
        description: str,
        price: int,
        *,
        timeout: Optional[float] = None,
    ) -> Optional[Product]:
        product = await self._run(
            "update",
            self._update(product_id, name, description, price),
            timeout,
            product_id=str(product_id),
        )
        if product is not None:
            logger.info("ProductRepository: Product updated", product_id=str(product_id))
        return product

    async def _update(
        self, product_id: UUID, name: str, description: str, price: int
    ) -> Optional[Product]:
        async with self._transaction() as session:
            stmt = (
                update(ProductRecord)
                .where(ProductRecord.id == product_id)
                .values(
                    name=name,
                    description=description,
                    price=price,
                    updated_at=get_current_timestamp(),
                )
                .returning(
                    ProductRecord.id,
                    ProductRecord.name,
                    ProductRecord.description,
                    ProductRecord.price,
                )
            )
            row = (await session.execute(stmt)).one_or_none()
            if row is None:
                return None
            return self._to_product(row.id, row.name, row.description, row.price)

    async def delete(
        self, product_id: UUID, *, timeout: Optional[float] = None
    ) -> bool:
        removed = await self._run(
            "delete", self._delete(product_id), timeout, product_id=str(product_id)
        )
        if removed:
            logger.info("ProductRepository: Product deleted", product_id=str(product_id))
        else:
            logger.debug(
                "ProductRepository: Product not found for deletion",
                product_id=str(product_id),
            )
        return removed

    async def _delete(self, product_id: UUID) -> bool:
        async with self._transaction() as session:
            stmt = delete(ProductRecord).where(ProductRecord.id == product_id)
            result = await session.execute(stmt)
            return result.rowcount > 0
