"""Application-level exception types.

This module defines domain errors used across services/adapters, enabling
consistent error handling, logging, and API responses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NotRequired, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients."""

    code: str
    message: str
    hint: str
    http_status: int
    body: str
    retry_after: int
    limit: int
    reset_at: int
    model: str
    setting: str
    request_id: str
    context: NotRequired[dict[str, Any]]


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when request input is empty or malformed."""


class ConfigurationAppError(AppError):
    """Raised when a required credential or setting is absent."""


class LLMAppError(AppError):
    """Raised when chat-completion provider calls fail."""


class RemoteServiceAppError(AppError):
    """Raised when the remote prediction service fails (transport or non-2xx)."""


class RateLimitAppError(AppError):
    """Raised when a client exceeded its request budget."""


class RateLimitStoreError(AppError):
    """Raised when the shared counter store cannot be reached."""
