"""
Cache Repository Interface

Abstract contract for a volatile key-value cache.
Values are JSON-compatible objects; adapters own the wire serialization.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from .value_objects import CacheKey, TTL


class CacheRepository(ABC):
    """
    Abstract repository for cache operations.

    Every failure is raised as a ``CacheFailure`` subclass.
    """

    @abstractmethod
    async def get(self, key: CacheKey) -> Optional[Any]:
        """Return the deserialized value, or None on a miss.

        Raises:
            CacheDeserializationError: If the stored payload is corrupt
            CacheFailure: On any other cache problem
        """
        pass

    @abstractmethod
    async def set(self, key: CacheKey, value: Any, ttl: TTL) -> None:
        """Serialize and store a value that expires after ``ttl``."""
        pass

    @abstractmethod
    async def delete(self, key: CacheKey) -> None:
        """Remove the entry. A missing key is not an error."""
        pass

    async def health_check(self) -> bool:
        """Return True if the cache backend is reachable."""
        return True
