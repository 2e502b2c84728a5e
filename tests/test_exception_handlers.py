"""Tests for global exception handlers.

Validates that every error type maps to its HTTP status with a consistent
body, and that unexpected errors leak nothing.
"""

import asyncio
import json
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.core.errors import (
    AppError,
    ConfigurationAppError,
    LLMAppError,
    RateLimitAppError,
    RateLimitStoreError,
    RemoteServiceAppError,
    ValidationAppError,
)
from app.core.exception_handlers import general_exception_handler, setup_exception_handlers


@pytest.fixture
def app_with_handlers() -> FastAPI:
    app = FastAPI()
    setup_exception_handlers(app)
    return app


@pytest.fixture
def client(app_with_handlers: FastAPI) -> TestClient:
    return TestClient(app_with_handlers)


@pytest.mark.parametrize(
    "error_cls,expected_status",
    [
        (ValidationAppError, 400),
        (ConfigurationAppError, 501),
        (LLMAppError, 502),
        (RemoteServiceAppError, 502),
        (RateLimitAppError, 429),
        (RateLimitStoreError, 503),
        (AppError, 400),
    ],
)
def test_app_errors_map_to_status(client, app_with_handlers, error_cls, expected_status):
    @app_with_handlers.get("/boom")
    async def boom():
        raise error_cls(code="some_code", message="Some message")

    response = client.get("/boom")

    assert response.status_code == expected_status
    error = response.json()["error"]
    assert error["code"] == "some_code"
    assert error["message"] == "Some message"
    assert "request_id" in error
    assert "details" not in error


def test_details_included_when_present(client, app_with_handlers):
    @app_with_handlers.get("/details")
    async def details():
        raise ConfigurationAppError(
            code="llm_not_configured",
            message="AI not configured (set LLM_API_KEY)",
            details={"setting": "LLM_API_KEY"},
        )

    response = client.get("/details")

    assert response.json()["error"]["details"] == {"setting": "LLM_API_KEY"}


def test_rate_limit_error_sets_retry_headers(client, app_with_handlers):
    @app_with_handlers.get("/limited")
    async def limited():
        raise RateLimitAppError(
            code="rate_limit_exceeded",
            message="Rate limit exceeded. Try again later.",
            details={"limit": 20, "reset_at": 1_700_000_300, "retry_after": 42},
        )

    response = client.get("/limited")

    assert response.status_code == 429
    assert response.headers["Retry-After"] == "42"
    assert response.headers["X-RateLimit-Limit"] == "20"
    assert response.headers["X-RateLimit-Reset"] == "1700000300"


def test_request_validation_error_is_400(client, app_with_handlers):
    @app_with_handlers.get("/typed")
    async def typed(count: int):
        return {"count": count}

    response = client.get("/typed", params={"count": "many"})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "invalid_input"


def test_general_handler_hides_exception_details():
    request = AsyncMock()
    request.url.path = "/test"
    request.method = "POST"

    response = asyncio.run(
        general_exception_handler(request, ValueError("redis://user:pw@host failed"))
    )

    body = json.loads(bytes(response.body).decode())
    assert response.status_code == 500
    assert body["error"]["code"] == "internal_server_error"
    assert "redis://" not in bytes(response.body).decode()
    assert "ValueError" not in bytes(response.body).decode()


def test_handlers_registered(app_with_handlers):
    assert AppError in app_with_handlers.exception_handlers
    assert Exception in app_with_handlers.exception_handlers
