"""Integration tests for rate limiting middleware."""
import pytest
from httpx import AsyncClient
from starlette.requests import Request

from api.middleware.rate_limit import RATE_LIMITS, _get_real_ip, get_rate_limit
from infrastructure.database.models.user import User

pytestmark = pytest.mark.asyncio


def _request(headers: dict[str, str], client_host: str = "10.0.0.5") -> Request:
    return Request({
        "type": "http",
        "method": "GET",
        "path": "/",
        "headers": [(k.lower().encode(), v.encode()) for k, v in headers.items()],
        "client": (client_host, 1234),
    })


class TestRateLimitingBulkGenerate:
    """Tests for rate limiting on the bulk generation endpoint."""

    async def test_bulk_generate_rate_limit_exceeded(
        self,
        async_client: AsyncClient,
        auth_headers: dict,
        test_user: User,
    ):
        """Bulk generation is limited to 10 requests per hour."""
        for i in range(10):
            response = await async_client.post(
                "/api/v1/content/bulk-generate",
                headers=auth_headers,
                json={"topics": [f"rate limit topic {i}"]},
            )
            assert response.status_code == 201

        response = await async_client.post(
            "/api/v1/content/bulk-generate",
            headers=auth_headers,
            json={"topics": ["one request too many"]},
        )
        assert response.status_code == 429

    async def test_reads_are_not_generation_limited(
        self,
        async_client: AsyncClient,
        auth_headers: dict,
    ):
        """Listing uses only the global default limit."""
        for _ in range(15):
            response = await async_client.get("/api/v1/content", headers=auth_headers)
            assert response.status_code == 200


class TestRateLimitConfig:
    async def test_known_and_unknown_endpoints(self):
        assert get_rate_limit("generate") == RATE_LIMITS["generate"]
        assert get_rate_limit("bulk_generate") == "10/hour"
        assert get_rate_limit("unknown") == "100/minute"

    async def test_public_forwarded_ip_is_used(self):
        request = _request({"X-Forwarded-For": "203.0.113.7, 10.0.0.1"})
        assert _get_real_ip(request) == "203.0.113.7"

    async def test_private_forwarded_ip_is_ignored(self):
        request = _request({"X-Forwarded-For": "127.0.0.1"})
        assert _get_real_ip(request) == "10.0.0.5"

    async def test_garbage_header_is_ignored(self):
        request = _request({"X-Real-IP": "not-an-ip; drop table"})
        assert _get_real_ip(request) == "10.0.0.5"
