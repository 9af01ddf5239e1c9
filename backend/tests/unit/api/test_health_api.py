"""
Unit tests for health and metrics endpoints.
"""

import pytest
from unittest.mock import AsyncMock

from fastapi.testclient import TestClient

from catalog.main import create_app


@pytest.fixture
def client(test_settings):
    with TestClient(create_app(test_settings)) as client:
        yield client


class TestHealthEndpoints:
    """Test health endpoints."""

    def test_liveness(self, client, test_settings):
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["service"] == test_settings.SERVICE_NAME
        assert body["environment"] == "test"

    def test_ready_with_memory_backends(self, client):
        response = client.get("/health/ready")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ready"
        assert body["checks"]["store"]["backend"] == "memory"
        assert body["checks"]["cache"]["status"] == "healthy"

    def test_degraded_cache_keeps_app_ready(self, client):
        cache = client.app.state.resources.cache
        cache.health_check = AsyncMock(return_value=False)

        response = client.get("/health/ready")

        assert response.status_code == 200
        assert response.json()["checks"]["cache"]["status"] == "degraded"

    def test_unhealthy_store_is_not_ready(self, client):
        database = AsyncMock()
        database.health_check = AsyncMock(
            return_value={"status": "unhealthy", "error": "OperationalError"}
        )
        client.app.state.resources.database = database

        response = client.get("/health/ready")

        assert response.status_code == 503
        assert response.json()["status"] == "not_ready"
        client.app.state.resources.database = None

    def test_metrics_exposed(self, client):
        client.get("/api/products")
        client.get("/api/products")

        response = client.get("/metrics")

        assert response.status_code == 200
        assert "catalog_cache_hits_total" in response.text
        assert "catalog_cache_misses_total" in response.text
