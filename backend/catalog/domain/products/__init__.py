"""
Product Domain

Entity, persistent store port and error vocabulary for catalog products.
"""

from .entities import Product, validate_product_fields
from .exceptions import (
    StoreError,
    StoreTimeoutError,
    ProductValidationError,
    ProductNotFound,
    RepositoryFailure,
    RepositoryTimeout,
)
from .repository_interfaces import ProductRepository

__all__ = [
    "Product",
    "validate_product_fields",
    "ProductRepository",
    "StoreError",
    "StoreTimeoutError",
    "ProductValidationError",
    "ProductNotFound",
    "RepositoryFailure",
    "RepositoryTimeout",
]
