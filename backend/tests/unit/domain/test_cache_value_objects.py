"""
Unit tests for cache value objects.
"""

import pytest
from uuid import uuid4

from catalog.domain.cache import CacheKey, TTL


class TestCacheKey:
    """Test CacheKey value object."""

    def test_collection_key(self):
        key = CacheKey.products()

        assert key.value == "products"
        assert str(key) == "products"

    def test_product_key(self):
        product_id = uuid4()
        key = CacheKey.product(product_id)

        assert key.value == f"products:{product_id}"

    def test_product_key_normalizes_string_ids(self):
        product_id = uuid4()

        assert CacheKey.product(str(product_id).upper()) == CacheKey.product(product_id)

    def test_product_key_invalid_id(self):
        with pytest.raises(ValueError, match="Invalid product ID format"):
            CacheKey.product("not-a-uuid")

    def test_invalid_key_empty(self):
        with pytest.raises(ValueError, match="Cache key cannot be empty"):
            CacheKey("")

    def test_invalid_key_whitespace(self):
        with pytest.raises(ValueError, match="Cache key cannot contain whitespace"):
            CacheKey("invalid key")

    def test_invalid_key_too_long(self):
        with pytest.raises(ValueError, match="Cache key too long"):
            CacheKey("a" * 251)


class TestTTL:
    """Test TTL value object."""

    def test_default_is_one_hour(self):
        assert TTL.default().seconds == 3600

    def test_constructors(self):
        assert TTL.of_seconds(30).seconds == 30
        assert str(TTL.of_seconds(60)) == "60s"

    @pytest.mark.parametrize("seconds", [0, -1])
    def test_non_positive_rejected(self, seconds):
        with pytest.raises(ValueError, match="TTL must be positive"):
            TTL(seconds)

    def test_too_large_rejected(self):
        with pytest.raises(ValueError, match="TTL too large"):
            TTL(86400 * 365 + 1)

    @pytest.mark.parametrize("seconds", [1.5, True])
    def test_non_integer_rejected(self, seconds):
        with pytest.raises(ValueError, match="integer number of seconds"):
            TTL(seconds)
