"""In-memory fixed-window rate limiter.

Notes:
- Per-process only: running multiple workers multiplies the effective limit.
- Thread-safe: uses a lock around shared state.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable

from app.adapters.rate_limit.base import (
    AbstractRateLimiter,
    RateLimitResult,
    build_result,
    validate_allow_args,
)


@dataclass
class _WindowState:
    reset_at: int
    count: int


class InMemoryFixedWindowRateLimiter(AbstractRateLimiter):
    """Rate limiter keeping one counter per key in a lock-guarded dict.

    A window opens on the first request seen for a key and lasts
    ``window_seconds``; the first request after ``reset_at`` opens the next one.

    Important:
        This limiter is per-process only. If the API runs with multiple workers
        (e.g., multiple Uvicorn/Gunicorn workers), each worker will enforce its
        own independent limits. Use the Redis backend for shared limits.
    """

    def __init__(self, *, clock: Callable[[], float] = time.time) -> None:
        """Initialize the in-memory rate limiter.

        Args:
            clock: Time source function returning UNIX time in seconds.
        """
        self._clock = clock
        self._lock = threading.RLock()
        self._state_by_key: dict[str, _WindowState] = {}

    def _prune_expired(self, now: float) -> None:
        expired = [k for k, s in self._state_by_key.items() if now >= s.reset_at]
        for key in expired:
            del self._state_by_key[key]

    def hit(self, key: str, limit: int, window_seconds: int) -> RateLimitResult:
        """Synchronous core of :meth:`allow`."""
        validate_allow_args(key, limit, window_seconds)

        with self._lock:
            now = self._clock()
            state = self._state_by_key.get(key)
            if state is None or now >= state.reset_at:
                # Opening a new window is a good moment to drop stale keys
                self._prune_expired(now)
                state = _WindowState(reset_at=int(now) + window_seconds, count=0)
                self._state_by_key[key] = state

            state.count += 1
            return build_result(
                count=state.count,
                limit=limit,
                reset_at=state.reset_at,
                now=now,
            )

    async def allow(self, key: str, limit: int, window_seconds: int) -> RateLimitResult:
        return self.hit(key, limit, window_seconds)
