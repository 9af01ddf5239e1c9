"""
Configuration and fixtures for integration tests.

These tests need a real PostgreSQL and Redis, addressed by ``DATABASE_URL``
and ``REDIS_URL``. Each fixture skips its tests when the service cannot be
reached.
"""

import pytest
import pytest_asyncio
from redis.asyncio import Redis
from redis.exceptions import RedisError
from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError

from catalog.core.config import Settings
from catalog.core.database import DatabaseManager
from catalog.models import ProductRecord


@pytest.fixture
def integration_settings():
    return Settings(
        STORE_BACKEND="postgres",
        CACHE_BACKEND="redis",
        DATABASE_CREATE_TABLES=True,
    )


@pytest_asyncio.fixture
async def database(integration_settings):
    """Initialized database manager with an empty products table."""
    manager = DatabaseManager(integration_settings)
    try:
        await manager.initialize()
    except (SQLAlchemyError, OSError) as e:
        pytest.skip(f"PostgreSQL not reachable: {e}")

    async with manager.session_factory() as session:
        async with session.begin():
            await session.execute(delete(ProductRecord))

    yield manager
    await manager.close()


@pytest_asyncio.fixture
async def redis_client(integration_settings):
    """Redis client on a flushed test database."""
    client = Redis.from_url(integration_settings.REDIS_URL, decode_responses=True)
    try:
        await client.ping()
    except (RedisError, OSError) as e:
        await client.aclose()
        pytest.skip(f"Redis not reachable: {e}")

    await client.flushdb()
    yield client
    await client.flushdb()
    await client.aclose()
