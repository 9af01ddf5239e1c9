"""Application services: product use cases and the cache-aside layer."""
