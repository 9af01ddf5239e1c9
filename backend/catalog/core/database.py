"""
Product Catalog Database Configuration

Async database connection management:
- Pooled async engine (asyncpg driver)
- Connection retry with exponential backoff at startup only
- Session factory shared by the SQL product repository
- Health probe for readiness checks
"""

import time
from typing import Any, Dict, Optional

from sqlalchemy import text
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)
import structlog

from .config import Settings
from ..models import Base
from ..monitoring.metrics import DB_CONNECTION_DURATION

logger = structlog.get_logger()


class DatabaseManager:
    """
    Database connection manager.

    Owns the engine and session factory for the lifetime of the process.
    The pooled engine is safe to share across concurrent requests.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self.engine: Optional[AsyncEngine] = None
        self.session_factory: Optional[async_sessionmaker[AsyncSession]] = None

    def _create_engine(self) -> AsyncEngine:
        return create_async_engine(
            self.settings.async_database_url,
            pool_size=self.settings.DATABASE_POOL_SIZE,
            max_overflow=self.settings.DATABASE_MAX_OVERFLOW,
            pool_timeout=self.settings.DATABASE_POOL_TIMEOUT,
            pool_recycle=self.settings.DATABASE_POOL_RECYCLE,
            pool_pre_ping=True,  # Validate connections before use
            connect_args={
                "server_settings": {"application_name": self.settings.SERVICE_NAME},
            },
        )

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception_type((OperationalError, InterfaceError, OSError)),
        before_sleep=lambda retry_state: logger.warning(
            "Database connection retry",
            attempt=retry_state.attempt_number,
            wait_time=retry_state.next_action.sleep,
        ),
        reraise=True,
    )
    async def _probe(self) -> None:
        """Open a connection and run ``SELECT 1``."""
        async with self.engine.connect() as conn:
            result = await conn.execute(text("SELECT 1"))
            if result.scalar() != 1:
                raise RuntimeError("Database probe returned unexpected result")

    async def initialize(self) -> None:
        """Create the engine, verify connectivity and build the session factory."""
        if self.engine is not None:
            return

        start_time = time.time()
        self.engine = self._create_engine()

        try:
            await self._probe()

            if self.settings.DATABASE_CREATE_TABLES:
                async with self.engine.begin() as conn:
                    await conn.run_sync(Base.metadata.create_all)
                logger.info("Database tables ensured")

        except Exception as e:
            logger.error(
                "Database initialization failed",
                error=str(e),
                exc_info=True,
            )
            await self.engine.dispose()
            self.engine = None
            raise

        self.session_factory = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

        duration = time.time() - start_time
        DB_CONNECTION_DURATION.observe(duration)
        logger.info(
            "Database initialized",
            duration_seconds=duration,
            pool_size=self.settings.DATABASE_POOL_SIZE,
            max_overflow=self.settings.DATABASE_MAX_OVERFLOW,
        )

    async def health_check(self) -> Dict[str, Any]:
        """Run a connectivity probe and report pool status."""
        if self.engine is None:
            return {"status": "not_initialized"}

        start_time = time.time()
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except Exception as e:
            logger.error("Database health check failed", error=str(e))
            return {
                "status": "unhealthy",
                "error": type(e).__name__,
                "duration_seconds": time.time() - start_time,
            }

        pool = self.engine.pool
        return {
            "status": "healthy",
            "duration_seconds": time.time() - start_time,
            "pool": {"status": pool.status()},
        }

    async def close(self) -> None:
        """Close database connections and cleanup resources."""
        if self.engine:
            await self.engine.dispose()
            self.engine = None
            self.session_factory = None

            logger.info("Database connections closed")
