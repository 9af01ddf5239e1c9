"""
Product Catalog Global Constants

Centralized location for system-wide constants used across the application.
"""

from datetime import datetime, timezone

# Cache key scheme shared with every process using the same cache instance.
PRODUCTS_CACHE_KEY = "products"
PRODUCT_CACHE_KEY_PREFIX = "products:"

# Default cache entry lifetime (1 hour)
DEFAULT_CACHE_TTL_SECONDS = 3600


def get_current_timestamp() -> datetime:
    """Get current timestamp with UTC timezone.

    Returns:
        datetime: Current UTC timestamp
    """
    return datetime.now(timezone.utc)


# Application Constants
APP_NAME = "Product Catalog"
APP_VERSION = "0.1.0"
API_PREFIX = "/api/products"
