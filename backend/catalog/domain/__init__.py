"""Catalog domain layer: entities, ports and error vocabulary."""

from .exceptions import CatalogException, ErrorKind

__all__ = ["CatalogException", "ErrorKind"]
