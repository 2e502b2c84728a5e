"""Rate limiter interfaces.

The API depends on this abstraction (not the concrete implementation) so the
counter store can be an in-process map or a shared Redis instance.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class RateLimitResult:
    """Result of a rate limit check.

    Attributes:
        allowed: Whether the request is allowed to proceed.
        limit: Max requests per window.
        remaining: Remaining requests in the current window (0 when blocked).
        reset_at: UNIX epoch seconds when the current window resets.
        retry_after_seconds: Suggested wait time in seconds when blocked.
    """

    allowed: bool
    limit: int
    remaining: int
    reset_at: int
    retry_after_seconds: int | None


def validate_allow_args(key: str, limit: int, window_seconds: int) -> None:
    """Reject arguments no fixed-window limiter can honour.

    Raises:
        ValueError: If key is empty or limit/window are not positive.
    """
    if not key:
        raise ValueError("key must be a non-empty string")
    if limit < 1:
        raise ValueError("limit must be >= 1")
    if window_seconds < 1:
        raise ValueError("window_seconds must be >= 1")


def build_result(*, count: int, limit: int, reset_at: int, now: float) -> RateLimitResult:
    """Turn a post-increment window count into a RateLimitResult."""
    if count <= limit:
        return RateLimitResult(
            allowed=True,
            limit=limit,
            remaining=limit - count,
            reset_at=int(reset_at),
            retry_after_seconds=None,
        )

    retry_after = max(0, int(math.ceil(reset_at - now)))
    return RateLimitResult(
        allowed=False,
        limit=limit,
        remaining=0,
        reset_at=int(reset_at),
        retry_after_seconds=retry_after,
    )


class AbstractRateLimiter(ABC):
    """Interface for fixed-window rate limiters."""

    @abstractmethod
    async def allow(self, key: str, limit: int, window_seconds: int) -> RateLimitResult:
        """Count one request for ``key`` and decide whether it may proceed.

        The increment and the read of the new count happen as one atomic
        operation against the counter store.

        Args:
            key: Caller-built identifier (e.g., ``"ai-message:203.0.113.7"``).
            limit: Max requests per window (>= 1).
            window_seconds: Window length in seconds (>= 1).

        Returns:
            RateLimitResult describing whether it was allowed.

        Raises:
            ValueError: If arguments are invalid.
            RateLimitStoreError: If the counter store is unreachable.
        """
        raise NotImplementedError

    async def close(self) -> None:
        """Release backend resources (no-op by default)."""
        return None
