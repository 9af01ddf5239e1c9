"""Monitoring: Prometheus metrics shared by the catalog layers."""

from .metrics import (
    CACHE_HITS,
    CACHE_MISSES,
    CACHE_ERRORS,
    CACHE_INVALIDATIONS,
    STORE_FAILURES,
    STORE_LATENCY,
    DB_CONNECTION_DURATION,
)

__all__ = [
    "CACHE_HITS",
    "CACHE_MISSES",
    "CACHE_ERRORS",
    "CACHE_INVALIDATIONS",
    "STORE_FAILURES",
    "STORE_LATENCY",
    "DB_CONNECTION_DURATION",
]
