"""
Redis Infrastructure Module

Connection management for the shared Redis client.
"""

from .connection_factory import RedisConnectionFactory

__all__ = ["RedisConnectionFactory"]
