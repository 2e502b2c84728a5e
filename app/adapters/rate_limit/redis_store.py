"""Redis-backed fixed-window rate limiter shared across processes.

Each key is a small hash (``count``, ``reset_at``). A Lua script performs the
window rollover and the increment in one round trip, so concurrent workers
sharing a key never observe a stale count. Redis expires the hash at
``reset_at``.
"""

from __future__ import annotations

import logging
import time
from typing import Callable

from redis.asyncio import Redis
from redis.exceptions import RedisError

from app.adapters.rate_limit.base import (
    AbstractRateLimiter,
    RateLimitResult,
    build_result,
    validate_allow_args,
)
from app.core.errors import RateLimitStoreError

logger = logging.getLogger(__name__)

KEY_PREFIX = "rl:"

# KEYS[1] = counter key; ARGV[1] = now (epoch seconds); ARGV[2] = window seconds
FIXED_WINDOW_SCRIPT = """
local now = tonumber(ARGV[1])
local window = tonumber(ARGV[2])
local reset_at = tonumber(redis.call('HGET', KEYS[1], 'reset_at'))
if (not reset_at) or now >= reset_at then
    reset_at = now + window
    redis.call('DEL', KEYS[1])
    redis.call('HSET', KEYS[1], 'reset_at', reset_at)
    redis.call('EXPIREAT', KEYS[1], reset_at)
end
local count = redis.call('HINCRBY', KEYS[1], 'count', 1)
return {count, reset_at}
"""


class RedisFixedWindowRateLimiter(AbstractRateLimiter):
    """Fixed-window limiter whose counters live in Redis."""

    def __init__(
        self,
        redis: Redis,
        *,
        clock: Callable[[], float] = time.time,
        key_prefix: str = KEY_PREFIX,
    ) -> None:
        self._redis = redis
        self._clock = clock
        self._key_prefix = key_prefix

    @classmethod
    def from_url(cls, url: str, **kwargs) -> "RedisFixedWindowRateLimiter":
        client = Redis.from_url(
            url,
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5,
        )
        return cls(client, **kwargs)

    async def allow(self, key: str, limit: int, window_seconds: int) -> RateLimitResult:
        validate_allow_args(key, limit, window_seconds)

        now = int(self._clock())
        full_key = f"{self._key_prefix}{key}"

        try:
            count, reset_at = await self._redis.eval(
                FIXED_WINDOW_SCRIPT, 1, full_key, now, window_seconds
            )
        except (RedisError, OSError) as exc:
            logger.warning(
                "rate_limit.redis_error",
                extra={"error_type": type(exc).__name__, "error_msg": str(exc)},
            )
            raise RateLimitStoreError(
                code="rate_limit_store_unavailable",
                message="Rate limit store is unreachable",
            ) from exc

        return build_result(
            count=int(count),
            limit=limit,
            reset_at=int(reset_at),
            now=now,
        )

    async def close(self) -> None:
        await self._redis.aclose()
