"""
Cache Value Objects

Immutable value objects for the cache domain.
Keys and TTLs are validated on construction so adapters never see malformed input.
"""

from dataclasses import dataclass
from typing import Union
from uuid import UUID

from ...constants import (
    PRODUCTS_CACHE_KEY,
    PRODUCT_CACHE_KEY_PREFIX,
    DEFAULT_CACHE_TTL_SECONDS,
)


@dataclass(frozen=True)
class CacheKey:
    """
    Immutable cache key value object.

    Enforces key naming conventions and provides validation.
    """

    value: str

    def __post_init__(self) -> None:
        """Validate cache key format."""
        if not self.value:
            raise ValueError("Cache key cannot be empty")

        if len(self.value) > 250:
            raise ValueError("Cache key too long (max 250 characters)")

        if any(char.isspace() for char in self.value):
            raise ValueError("Cache key cannot contain whitespace")

    @classmethod
    def products(cls) -> "CacheKey":
        """Collection key holding the full product list."""
        return cls(PRODUCTS_CACHE_KEY)

    @classmethod
    def product(cls, product_id: Union[str, UUID]) -> "CacheKey":
        """Per-record key: ``products:<uuid>``."""
        try:
            normalized = UUID(str(product_id))
        except ValueError as exc:
            raise ValueError("Invalid product ID format") from exc
        return cls(f"{PRODUCT_CACHE_KEY_PREFIX}{normalized}")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class TTL:
    """
    Time To Live value object for cache expiration.
    """

    seconds: int

    def __post_init__(self) -> None:
        """Validate TTL value."""
        if isinstance(self.seconds, bool) or not isinstance(self.seconds, int):
            raise ValueError("TTL must be an integer number of seconds")
        if self.seconds <= 0:
            raise ValueError("TTL must be positive")
        if self.seconds > 86400 * 365:  # Max 1 year
            raise ValueError("TTL too large (max 1 year)")

    @classmethod
    def of_seconds(cls, seconds: int) -> "TTL":
        return cls(seconds)

    @classmethod
    def default(cls) -> "TTL":
        """Uniform TTL applied to every entry unless overridden (1 hour)."""
        return cls(DEFAULT_CACHE_TTL_SECONDS)

    def __str__(self) -> str:
        return f"{self.seconds}s"
