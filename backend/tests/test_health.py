"""
Health endpoint tests.
"""
from unittest.mock import AsyncMock, patch

import pytest
from httpx import AsyncClient

from chatbot_studio.api import health


class TestHealth:
    """Tests for liveness and dependency checks."""

    @pytest.mark.asyncio
    async def test_liveness(self, client: AsyncClient):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"
        assert "timestamp" in response.json()

    @pytest.mark.asyncio
    async def test_database_only_when_rate_limit_off(self, client: AsyncClient):
        response = await client.get("/api/v1/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert [s["name"] for s in data["services"]] == ["database"]

    @pytest.mark.asyncio
    async def test_redis_outage_degrades(self, client: AsyncClient, monkeypatch):
        monkeypatch.setattr(health.settings, "rate_limit_enabled", True)

        with patch.object(
            health.RedisClient, "ping", new_callable=AsyncMock, side_effect=ConnectionError("down")
        ):
            response = await client.get("/api/v1/health")

        data = response.json()
        assert data["status"] == "degraded"
        assert data["services"][1]["name"] == "redis"
        assert data["services"][1]["status"] == "unhealthy"

    @pytest.mark.asyncio
    async def test_root(self, client: AsyncClient):
        response = await client.get("/")

        assert response.status_code == 200
