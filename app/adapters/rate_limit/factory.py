"""Factory for the configured rate limiter backend."""

from app.adapters.rate_limit.base import AbstractRateLimiter
from app.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter
from app.adapters.rate_limit.redis_store import RedisFixedWindowRateLimiter
from app.core.config import settings
from app.core.errors import ConfigurationAppError


def create_rate_limiter() -> AbstractRateLimiter:
    """Instantiate the limiter selected by ``APP_RATE_LIMIT_BACKEND``.

    Returns:
        AbstractRateLimiter: Configured limiter instance.

    Raises:
        ConfigurationAppError: If the redis backend is selected without a URL.
    """
    backend = settings.app.rate_limit_backend

    if backend == "redis":
        if not settings.app.redis_url:
            raise ConfigurationAppError(
                code="rate_limit_redis_url_missing",
                message="Redis rate limit backend requires APP_REDIS_URL",
                details={"setting": "APP_REDIS_URL"},
            )
        return RedisFixedWindowRateLimiter.from_url(settings.app.redis_url)

    return InMemoryFixedWindowRateLimiter()
