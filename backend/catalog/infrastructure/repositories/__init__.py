"""
Repository adapters for the product store and cache ports.
"""

from .product_repository import SqlAlchemyProductRepository
from .cache_repository import RedisCacheRepository
from .memory import InMemoryProductRepository, InMemoryCacheRepository

__all__ = [
    "SqlAlchemyProductRepository",
    "RedisCacheRepository",
    "InMemoryProductRepository",
    "InMemoryCacheRepository",
]
