from .cache_aside import CacheAsideProductRepository

__all__ = ["CacheAsideProductRepository"]
