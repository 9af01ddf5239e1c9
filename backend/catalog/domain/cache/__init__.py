"""
Cache Domain

Key scheme, TTL policy, cache port and cache error vocabulary.
"""

from .value_objects import CacheKey, TTL
from .exceptions import CacheFailure, CacheDeserializationError, CacheTimeoutError
from .repository_interfaces import CacheRepository

__all__ = [
    "CacheKey",
    "TTL",
    "CacheRepository",
    "CacheFailure",
    "CacheDeserializationError",
    "CacheTimeoutError",
]
