"""Rate limiting dependency for FastAPI routes.

This module wires the rate limiting adapter into the HTTP layer.

Strategy:
- Fixed-window limit per route and client IP (key ``"<route>:<ip>"``).
- Client IP is taken from proxy headers first (X-Forwarded-For, X-Real-IP).
- Counter store outages fail open unless APP_RATE_LIMIT_FAIL_OPEN=false.
"""

from __future__ import annotations

import hashlib
import logging
from typing import Awaitable, Callable

from fastapi import Request

from app.adapters.rate_limit.base import AbstractRateLimiter
from app.adapters.rate_limit.factory import create_rate_limiter
from app.core.config import settings
from app.core.errors import RateLimitAppError, RateLimitStoreError

logger = logging.getLogger(__name__)


_limiter: AbstractRateLimiter | None = None
_limiter_config: tuple[str, str | None] | None = None


def get_rate_limiter() -> AbstractRateLimiter:
    """Return a process-wide rate limiter instance.

    The instance is cached in-module to preserve state across requests.
    If the backend configuration changes (primarily in tests), the limiter is
    rebuilt.
    """

    global _limiter, _limiter_config

    config = (settings.app.rate_limit_backend, settings.app.redis_url)

    if _limiter is None or _limiter_config != config:
        _limiter = create_rate_limiter()
        _limiter_config = config

    return _limiter


def reset_rate_limiter() -> None:
    """Drop the cached limiter so the next request builds a fresh one."""

    global _limiter, _limiter_config
    _limiter = None
    _limiter_config = None


async def close_rate_limiter() -> None:
    """Release the cached limiter's backend connections, if any."""

    if _limiter is not None:
        await _limiter.close()
    reset_rate_limiter()


def client_ip(request: Request) -> str:
    """Resolve a best-effort client IP for the request.

    Takes the first entry of X-Forwarded-For, then X-Real-IP, then the socket
    peer address.
    """

    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        ip = forwarded_for.split(",")[0].strip()
        if ip:
            return ip

    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()

    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def _hash_limiter_key(key: str) -> str:
    """Hash the rate limit key for logging without exposing client IPs."""
    return hashlib.sha256(key.encode()).hexdigest()[:16]


def rate_limit(
    route_name: str,
    *,
    limit: int | None = None,
    window_seconds: int | None = None,
) -> Callable[[Request], Awaitable[None]]:
    """Build a FastAPI dependency enforcing a per-route, per-IP budget.

    Args:
        route_name: Namespace for the counter key.
        limit: Requests per window; defaults to APP_RATE_LIMIT_REQUESTS.
        window_seconds: Window length; defaults to APP_RATE_LIMIT_WINDOW_SECONDS.

    Returns:
        Async dependency raising RateLimitAppError (429) when over budget.
    """

    async def enforce_rate_limit(request: Request) -> None:
        if not settings.app.rate_limit_enabled:
            return

        max_requests = limit or settings.app.rate_limit_requests
        window = window_seconds or settings.app.rate_limit_window_seconds
        key = f"{route_name}:{client_ip(request)}"
        key_hash = _hash_limiter_key(key)

        try:
            result = await get_rate_limiter().allow(key, max_requests, window)
        except RateLimitStoreError:
            if settings.app.rate_limit_fail_open:
                logger.warning(
                    "rate_limit.store_unavailable",
                    extra={"route": route_name, "key_hash": key_hash, "policy": "fail_open"},
                )
                return
            logger.error(
                "rate_limit.store_unavailable",
                extra={"route": route_name, "key_hash": key_hash, "policy": "fail_closed"},
            )
            raise

        if result.allowed:
            logger.info(
                "rate_limit.allowed",
                extra={
                    "route": route_name,
                    "key_hash": key_hash,
                    "limit": result.limit,
                    "remaining": result.remaining,
                    "window_s": window,
                },
            )
            return

        retry_after = result.retry_after_seconds or 0
        logger.warning(
            "rate_limit.exceeded",
            extra={
                "route": route_name,
                "key_hash": key_hash,
                "limit": result.limit,
                "remaining": result.remaining,
                "window_s": window,
                "retry_after_s": retry_after,
            },
        )

        raise RateLimitAppError(
            code="rate_limit_exceeded",
            message="Rate limit exceeded. Try again later.",
            details={
                "limit": result.limit,
                "reset_at": result.reset_at,
                "retry_after": retry_after,
            },
        )

    return enforce_rate_limit
