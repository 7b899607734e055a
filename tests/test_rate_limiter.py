"""Tests for the hybrid in-memory / Redis rate limiter"""

from unittest.mock import MagicMock, patch

import pytest
from fastapi import HTTPException
from starlette.requests import Request

from appointly import rate_limiter


@pytest.fixture(autouse=True)
def fresh_cache():
    with patch.object(rate_limiter, "memory_cache", {}):
        yield


def _request(ip="203.0.113.7", forwarded=None):
    headers = [(b"x-forwarded-for", forwarded.encode())] if forwarded else []
    return Request({"type": "http", "method": "POST", "path": "/api/auth/login", "headers": headers, "client": (ip, 50000)})


class TestCheckRateLimit:
    def test_allows_up_to_limit(self):
        results = [rate_limiter.check_rate_limit("login:1.2.3.4", 3, 60)[0] for _ in range(4)]

        assert results == [True, True, True, False]

    def test_keys_are_independent(self):
        for _ in range(2):
            rate_limiter.check_rate_limit("login:a", 2, 60)

        assert rate_limiter.check_rate_limit("login:a", 2, 60)[0] is False
        assert rate_limiter.check_rate_limit("login:b", 2, 60)[0] is True

    def test_window_resets(self):
        with patch("appointly.rate_limiter.time.time", return_value=1_000):
            rate_limiter.check_rate_limit("k", 1, 60)
            assert rate_limiter.check_rate_limit("k", 1, 60)[0] is False

        with patch("appointly.rate_limiter.time.time", return_value=1_061):
            assert rate_limiter.check_rate_limit("k", 1, 60)[0] is True

    def test_resumes_count_from_redis(self):
        client = MagicMock()
        client.get.return_value = "5"
        client.ttl.return_value = 30

        allowed, count, ttl = rate_limiter.check_rate_limit("k", 5, 60, client)

        assert allowed is False
        assert count == 5
        assert 0 < ttl <= 30

    def test_redis_errors_fall_back_to_memory(self):
        client = MagicMock()
        client.get.side_effect = ConnectionError("redis down")
        client.set.side_effect = ConnectionError("redis down")

        allowed, count, _ = rate_limiter.check_rate_limit("k", 5, 60, client)

        assert allowed is True
        assert count == 1


class TestClientIp:
    def test_uses_socket_address(self):
        assert rate_limiter.get_client_ip(_request()) == "203.0.113.7"

    def test_prefers_forwarded_for(self):
        request = _request(forwarded="198.51.100.1, 10.0.0.1")
        assert rate_limiter.get_client_ip(request) == "198.51.100.1"


class TestDependency:
    @pytest.mark.anyio
    async def test_disabled_limiter_never_blocks(self):
        limiter = rate_limiter.create_rate_limiter(limit=1, window_seconds=60, key_prefix="t")
        with patch.object(rate_limiter, "RATE_LIMIT_ENABLED", False):
            for _ in range(3):
                await limiter(_request())

    @pytest.mark.anyio
    async def test_raises_429_with_retry_after(self):
        limiter = rate_limiter.create_rate_limiter(limit=1, window_seconds=60, key_prefix="t")
        with patch.object(rate_limiter, "RATE_LIMIT_ENABLED", True), patch.object(
            rate_limiter, "REDIS_URL", None
        ):
            await limiter(_request())
            with pytest.raises(HTTPException) as exc_info:
                await limiter(_request())

        assert exc_info.value.status_code == 429
        assert "Retry-After" in exc_info.value.headers


@pytest.fixture
def anyio_backend():
    return "asyncio"
