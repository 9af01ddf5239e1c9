"""
Unit tests for application settings.
"""

import pytest
from pydantic import ValidationError

from catalog.core.config import Settings


class TestSettings:
    """Test Settings validation and derived properties."""

    def test_defaults(self):
        settings = Settings(_env_file=None, STORE_BACKEND="postgres", CACHE_BACKEND="redis")

        assert settings.CACHE_TTL_SECONDS == 3600
        assert settings.API_PORT == 8080
        assert settings.cache_enabled is True

    def test_backends_are_case_insensitive(self):
        settings = Settings(STORE_BACKEND="MEMORY", CACHE_BACKEND="Disabled")

        assert settings.STORE_BACKEND == "memory"
        assert settings.CACHE_BACKEND == "disabled"
        assert settings.cache_enabled is False

    @pytest.mark.parametrize(
        "field,value",
        [
            ("STORE_BACKEND", "mongodb"),
            ("CACHE_BACKEND", "memcached"),
            ("ENVIRONMENT", "qa"),
            ("LOG_LEVEL", "LOUD"),
            ("DATABASE_URL", "mysql://catalog@localhost/catalog"),
            ("CACHE_TTL_SECONDS", 0),
        ],
    )
    def test_invalid_values_rejected(self, field, value):
        with pytest.raises(ValidationError):
            Settings(**{field: value})

    def test_async_database_url(self):
        settings = Settings(DATABASE_URL="postgresql://catalog@db:5432/catalog")

        assert settings.async_database_url == (
            "postgresql+asyncpg://catalog@db:5432/catalog"
        )

    def test_cors_origins_list(self):
        settings = Settings(CORS_ORIGINS="http://a.test, http://b.test,")

        assert settings.cors_origins_list == ["http://a.test", "http://b.test"]
