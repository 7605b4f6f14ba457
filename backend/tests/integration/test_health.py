"""Integration tests for health endpoints."""
import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


class TestHealth:
    async def test_health(self, async_client: AsyncClient):
        response = await async_client.get("/api/v1/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["ai_provider"] in ("openai", "mock")
        assert "X-Request-ID" in response.headers

    async def test_health_db(self, async_client: AsyncClient):
        response = await async_client.get("/api/v1/health/db")

        assert response.status_code == 200
        assert response.json()["database"] == "connected"

    async def test_request_id_echoed_when_valid(self, async_client: AsyncClient):
        request_id = "0b7f2c1e-6a0e-4d7b-9c1e-2f3a4b5c6d7e"
        response = await async_client.get(
            "/api/v1/health/live", headers={"X-Request-ID": request_id}
        )

        assert response.headers["X-Request-ID"] == request_id

    async def test_malformed_request_id_replaced(self, async_client: AsyncClient):
        response = await async_client.get(
            "/api/v1/health/live", headers={"X-Request-ID": "not-a-uuid"}
        )

        assert response.headers["X-Request-ID"] != "not-a-uuid"
        assert len(response.headers["X-Request-ID"]) == 36
