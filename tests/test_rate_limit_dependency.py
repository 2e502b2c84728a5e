"""Tests for the per-route, per-IP rate limit dependency."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from app.core.errors import RateLimitStoreError
from app.core.exception_handlers import setup_exception_handlers
from app.core.rate_limit import client_ip, rate_limit


@pytest.fixture
def limited_app() -> FastAPI:
    app = FastAPI()
    setup_exception_handlers(app)

    @app.get("/ping", dependencies=[Depends(rate_limit("ping", limit=3, window_seconds=60))])
    async def ping():
        return {"pong": True}

    @app.get("/pong", dependencies=[Depends(rate_limit("pong", limit=3, window_seconds=60))])
    async def pong():
        return {"ping": True}

    return app


@pytest.fixture
def client(limited_app: FastAPI) -> TestClient:
    return TestClient(limited_app)


def _request(headers: dict[str, str], host: str | None = "10.0.0.9"):
    request = MagicMock()
    request.headers = headers
    request.client = MagicMock(host=host) if host else None
    return request


class TestClientIp:
    def test_prefers_first_forwarded_for_entry(self) -> None:
        request = _request({"x-forwarded-for": "203.0.113.7, 10.0.0.1", "x-real-ip": "198.51.100.2"})
        assert client_ip(request) == "203.0.113.7"

    def test_falls_back_to_real_ip(self) -> None:
        request = _request({"x-real-ip": "198.51.100.2"})
        assert client_ip(request) == "198.51.100.2"

    def test_falls_back_to_peer_address(self) -> None:
        assert client_ip(_request({})) == "10.0.0.9"

    def test_unknown_without_any_source(self) -> None:
        assert client_ip(_request({"x-forwarded-for": " , "}, host=None)) == "unknown"


class TestEnforcement:
    def test_denies_after_limit_with_retry_headers(self, client: TestClient) -> None:
        statuses = [client.get("/ping").status_code for _ in range(3)]
        blocked = client.get("/ping")

        assert statuses == [200, 200, 200]
        assert blocked.status_code == 429
        body = blocked.json()
        assert body["error"]["code"] == "rate_limit_exceeded"
        assert body["error"]["details"]["limit"] == 3
        assert 0 < int(blocked.headers["Retry-After"]) <= 60
        assert blocked.headers["X-RateLimit-Limit"] == "3"
        assert blocked.headers["X-RateLimit-Remaining"] == "0"
        assert int(blocked.headers["X-RateLimit-Reset"]) == body["error"]["details"]["reset_at"]

    def test_routes_have_separate_budgets(self, client: TestClient) -> None:
        for _ in range(3):
            client.get("/ping")

        assert client.get("/ping").status_code == 429
        assert client.get("/pong").status_code == 200

    def test_clients_have_separate_budgets(self, client: TestClient) -> None:
        for _ in range(3):
            client.get("/ping", headers={"X-Forwarded-For": "203.0.113.1"})

        assert client.get("/ping", headers={"X-Forwarded-For": "203.0.113.1"}).status_code == 429
        assert client.get("/ping", headers={"X-Forwarded-For": "203.0.113.2"}).status_code == 200

    @patch("app.core.rate_limit.settings")
    def test_disabled_limiter_allows_everything(self, mock_settings, client: TestClient) -> None:
        mock_settings.app.rate_limit_enabled = False

        statuses = {client.get("/ping").status_code for _ in range(10)}

        assert statuses == {200}

    @patch("app.core.exception_handlers.settings")
    def test_headers_omitted_when_disabled(self, mock_settings, client: TestClient) -> None:
        mock_settings.app.rate_limit_include_headers = False
        for _ in range(3):
            client.get("/ping")

        blocked = client.get("/ping")

        assert blocked.status_code == 429
        assert "Retry-After" not in blocked.headers


class TestStoreOutage:
    @pytest.fixture
    def broken_limiter(self):
        limiter = MagicMock()
        limiter.allow = AsyncMock(
            side_effect=RateLimitStoreError(
                code="rate_limit_store_unavailable",
                message="Rate limit store is unreachable",
            )
        )
        with patch("app.core.rate_limit.get_rate_limiter", return_value=limiter):
            yield limiter

    def test_fails_open_by_default(self, broken_limiter, client: TestClient) -> None:
        response = client.get("/ping")

        assert response.status_code == 200
        broken_limiter.allow.assert_awaited_once()

    @patch("app.core.rate_limit.settings")
    def test_fails_closed_when_configured(self, mock_settings, broken_limiter, client: TestClient) -> None:
        mock_settings.app.rate_limit_enabled = True
        mock_settings.app.rate_limit_fail_open = False

        response = client.get("/ping")

        assert response.status_code == 503
        assert response.json()["error"]["code"] == "rate_limit_store_unavailable"
