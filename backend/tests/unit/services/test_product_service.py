"""
Unit tests for the Product Service.

Behavioral cases run the full in-memory stack (store behind the cache-aside
layer); error-mapping cases use an AsyncMock repository.
"""

import asyncio
import pytest
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

from catalog.domain import ErrorKind
from catalog.domain.cache import CacheKey
from catalog.domain.products import (
    Product,
    ProductRepository,
    ProductNotFound,
    ProductValidationError,
    RepositoryFailure,
    RepositoryTimeout,
    StoreError,
    StoreTimeoutError,
)
from catalog.infrastructure.repositories import (
    InMemoryProductRepository,
    InMemoryCacheRepository,
)
from catalog.services.cache import CacheAsideProductRepository
from catalog.services.products import ProductService


class _SlowInvalidationCache(InMemoryCacheRepository):
    """In-memory cache whose deletes take longer than the test deadlines."""

    async def delete(self, key):
        await asyncio.sleep(0.2)
        await super().delete(key)


class TestProductService:
    """Use cases against the in-memory stack."""

    @pytest.fixture
    def store(self):
        return InMemoryProductRepository()

    @pytest.fixture
    def cache(self):
        return InMemoryCacheRepository()

    @pytest.fixture
    def service(self, store, cache):
        return ProductService(CacheAsideProductRepository(store, cache))

    @pytest.mark.asyncio
    async def test_add_then_find(self, service):
        added = await service.add("Book", "A nice book", 1000)

        assert isinstance(added.id, type(uuid4()))
        assert added == Product(
            id=added.id, name="Book", description="A nice book", price=1000
        )
        assert await service.find(added.id) == added

    @pytest.mark.asyncio
    async def test_find_accepts_string_id(self, service):
        added = await service.add("Book", "", 1)

        assert await service.find(str(added.id)) == added

    @pytest.mark.asyncio
    async def test_example_scenario(self, service):
        book = await service.add("Book", "A nice book", 1000)
        assert await service.list() == [book]

        with pytest.raises(ProductNotFound):
            await service.find(uuid4())

        await service.remove(book.id)
        with pytest.raises(ProductNotFound):
            await service.find(book.id)

    @pytest.mark.asyncio
    async def test_unknown_ids_not_found(self, service):
        unknown = uuid4()

        with pytest.raises(ProductNotFound) as exc_info:
            await service.find(unknown)
        assert exc_info.value.kind is ErrorKind.NOT_FOUND
        assert exc_info.value.product_id == unknown

        with pytest.raises(ProductNotFound):
            await service.modify(unknown, "Ghost", "", 1)
        with pytest.raises(ProductNotFound):
            await service.remove(unknown)

    @pytest.mark.asyncio
    async def test_remove_twice(self, service):
        book = await service.add("Book", "", 1)

        assert await service.remove(book.id) is None
        with pytest.raises(ProductNotFound):
            await service.remove(book.id)

    @pytest.mark.asyncio
    async def test_modify_visible_through_warm_cache(self, service, cache):
        book = await service.add("Book", "", 1000)
        assert await service.find(book.id) == book  # warms the record key
        assert await service.list() == [book]  # warms the collection key

        updated = await service.modify(book.id, "Novel", "Paperback", 1200)

        assert updated.id == book.id
        assert await service.find(book.id) == updated
        assert await service.list() == [updated]

    @pytest.mark.asyncio
    async def test_list_most_recent_first(self, service):
        a = await service.add("A", "", 1)
        b = await service.add("B", "", 2)
        a2 = await service.modify(a.id, "A2", "", 3)

        assert await service.list() == [a2, b]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "name,description,price,field",
        [
            ("", "", 1, "name"),
            ("   ", "", 1, "name"),
            ("Book", None, 1, "description"),
            ("Book", "", -1, "price"),
            ("Book", "", 9.99, "price"),
        ],
    )
    async def test_validation_never_reaches_store(
        self, name, description, price, field
    ):
        repository = MagicMock(spec=ProductRepository)
        repository.create = AsyncMock()
        repository.update = AsyncMock()
        service = ProductService(repository)

        with pytest.raises(ProductValidationError) as exc_info:
            await service.add(name, description, price)
        assert exc_info.value.field == field

        with pytest.raises(ProductValidationError):
            await service.modify(uuid4(), name, description, price)

        repository.create.assert_not_called()
        repository.update.assert_not_called()

    @pytest.mark.asyncio
    async def test_malformed_id_is_validation_error(self, service):
        with pytest.raises(ProductValidationError) as exc_info:
            await service.find("not-a-uuid")
        assert exc_info.value.field == "id"

    @pytest.mark.asyncio
    async def test_patch_changes_only_given_fields(self, service):
        book = await service.add("Book", "A nice book", 1000)

        patched = await service.patch(book.id, price=1200)

        assert patched == Product(
            id=book.id, name="Book", description="A nice book", price=1200
        )
        assert await service.find(book.id) == patched

    @pytest.mark.asyncio
    async def test_patch_can_empty_description(self, service):
        book = await service.add("Book", "A nice book", 1000)

        patched = await service.patch(str(book.id), name="Novel", description="")

        assert patched.name == "Novel"
        assert patched.description == ""
        assert patched.price == 1000

    @pytest.mark.asyncio
    async def test_patch_visible_through_warm_cache(self, service, cache):
        book = await service.add("Book", "", 1000)
        await service.find(book.id)
        await service.list()
        assert await cache.contains(CacheKey.product(book.id))
        assert await cache.contains(CacheKey.products())

        patched = await service.patch(book.id, name="Novel")

        assert not await cache.contains(CacheKey.product(book.id))
        assert not await cache.contains(CacheKey.products())
        assert await service.find(book.id) == patched
        assert await service.list() == [patched]

    @pytest.mark.asyncio
    async def test_patch_unknown_not_found(self, service, store):
        with pytest.raises(ProductNotFound):
            await service.patch(uuid4(), price=5)

        assert len(store) == 0

    @pytest.mark.asyncio
    async def test_patch_negative_price_rejected(self, service):
        book = await service.add("Book", "", 1000)

        with pytest.raises(ProductValidationError) as exc_info:
            await service.patch(book.id, price=-1)

        assert exc_info.value.field == "price"
        assert await service.find(book.id) == book

    @pytest.mark.asyncio
    async def test_caller_deadline_bounds_store_call(self, service, store):
        async with store._lock:
            with pytest.raises(RepositoryTimeout) as exc_info:
                await service.find(uuid4(), timeout=0.01)

        assert exc_info.value.timeout_seconds == 0.01
        assert isinstance(exc_info.value, RepositoryFailure)

    @pytest.mark.asyncio
    async def test_slow_invalidation_does_not_fail_committed_write(self, store):
        cache = _SlowInvalidationCache()
        service = ProductService(CacheAsideProductRepository(store, cache))

        book = await service.add("Book", "", 1, timeout=0.1)

        assert len(store) == 1
        assert await store.read_one(book.id) == book

    @pytest.mark.asyncio
    async def test_slow_invalidation_still_clears_keys(self, store):
        cache = _SlowInvalidationCache()
        service = ProductService(CacheAsideProductRepository(store, cache))
        book = await service.add("Book", "", 1)
        await service.find(book.id)
        await service.list()

        updated = await service.modify(book.id, "Novel", "", 2, timeout=0.1)

        assert await store.read_one(book.id) == updated
        assert not await cache.contains(CacheKey.product(book.id))
        assert not await cache.contains(CacheKey.products())


class TestProductServiceErrorMapping:
    """Store errors become domain errors."""

    @pytest.fixture
    def repository(self):
        return MagicMock(spec=ProductRepository)

    @pytest.fixture
    def service(self, repository):
        return ProductService(repository)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "method,store_method,args",
        [
            ("add", "create", ("Book", "", 1)),
            ("list", "read_all", ()),
            ("find", "read_one", (uuid4(),)),
            ("modify", "update", (uuid4(), "Book", "", 1)),
            ("patch", "read_one", (uuid4(),)),
            ("remove", "delete", (uuid4(),)),
        ],
    )
    async def test_store_error_wrapped(
        self, service, repository, method, store_method, args
    ):
        store_error = StoreError("connection refused", operation=store_method)
        setattr(repository, store_method, AsyncMock(side_effect=store_error))

        with pytest.raises(RepositoryFailure) as exc_info:
            await getattr(service, method)(*args)

        error = exc_info.value
        assert not isinstance(error, RepositoryTimeout)
        assert error.kind is ErrorKind.REPOSITORY_FAILURE
        assert error.cause is store_error
        assert error.operation == method
        assert "connection refused" not in error.message

    @pytest.mark.asyncio
    async def test_store_timeout_becomes_repository_timeout(self, service, repository):
        store_error = StoreTimeoutError("read_all", 5.0)
        repository.read_all = AsyncMock(side_effect=store_error)

        with pytest.raises(RepositoryTimeout) as exc_info:
            await service.list()

        assert exc_info.value.cause is store_error
        assert exc_info.value.timeout_seconds == 5.0

    @pytest.mark.asyncio
    async def test_deadline_forwarded_to_repository(
        self, service, repository, sample_product
    ):
        repository.read_one = AsyncMock(return_value=sample_product)

        assert await service.find(sample_product.id, timeout=5) == sample_product
        repository.read_one.assert_awaited_once_with(sample_product.id, timeout=5)

    @pytest.mark.asyncio
    async def test_patch_forwards_deadline_to_both_calls(
        self, service, repository, sample_product
    ):
        repository.read_one = AsyncMock(return_value=sample_product)
        repository.update = AsyncMock(return_value=sample_product)

        await service.patch(sample_product.id, price=7, timeout=2)

        repository.read_one.assert_awaited_once_with(sample_product.id, timeout=2)
        repository.update.assert_awaited_once_with(
            sample_product.id,
            sample_product.name,
            sample_product.description,
            7,
            timeout=2,
        )

    @pytest.mark.asyncio
    async def test_patch_lost_race_is_not_found(
        self, service, repository, sample_product
    ):
        repository.read_one = AsyncMock(return_value=sample_product)
        repository.update = AsyncMock(return_value=None)

        with pytest.raises(ProductNotFound):
            await service.patch(sample_product.id, name="Gone")

    @pytest.mark.asyncio
    async def test_not_found_is_not_repository_failure(self, service, repository):
        repository.read_one = AsyncMock(return_value=None)

        with pytest.raises(ProductNotFound) as exc_info:
            await service.find(uuid4())

        assert not isinstance(exc_info.value, RepositoryFailure)
        assert exc_info.value.cause is None
