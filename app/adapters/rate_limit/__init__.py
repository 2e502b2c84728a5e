"""Rate limiting adapters.

Fixed-window counters behind a small interface, backed either by an
in-process map or by Redis for deployments running several workers.
"""

from app.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult
from app.adapters.rate_limit.factory import create_rate_limiter
from app.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter
from app.adapters.rate_limit.redis_store import RedisFixedWindowRateLimiter

__all__ = [
    "AbstractRateLimiter",
    "InMemoryFixedWindowRateLimiter",
    "RateLimitResult",
    "RedisFixedWindowRateLimiter",
    "create_rate_limiter",
]
