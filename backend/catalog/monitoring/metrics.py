"""
Prometheus metrics for the catalog.

Metrics are module-level so they register exactly once per process no matter
how many repositories or app instances are built.
"""

from prometheus_client import Counter, Histogram

CACHE_HITS = Counter(
    "catalog_cache_hits_total",
    "Total cache hits",
    ["operation"],
)
CACHE_MISSES = Counter(
    "catalog_cache_misses_total",
    "Total cache misses",
    ["operation"],
)
CACHE_ERRORS = Counter(
    "catalog_cache_errors_total",
    "Cache failures absorbed by the cache-aside layer",
    ["operation", "stage"],
)
CACHE_INVALIDATIONS = Counter(
    "catalog_cache_invalidations_total",
    "Cache keys invalidated after a successful write",
    ["operation"],
)

STORE_FAILURES = Counter(
    "catalog_store_failures_total",
    "Persistent store operations that raised",
    ["operation", "error_type"],
)
STORE_LATENCY = Histogram(
    "catalog_store_operation_duration_seconds",
    "Time spent in persistent store operations",
    ["operation"],
)

DB_CONNECTION_DURATION = Histogram(
    "catalog_db_connection_duration_seconds",
    "Time spent establishing the database engine at startup",
)
