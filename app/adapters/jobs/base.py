"""Remote prediction (job) service interfaces.

A prediction is created once, then read back by id until the remote service
moves it to a terminal status. Nothing is persisted locally.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any


class JobStatus(str, Enum):
    STARTING = "starting"
    PROCESSING = "processing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELED = "canceled"


TERMINAL_STATUSES = frozenset(
    {JobStatus.SUCCEEDED.value, JobStatus.FAILED.value, JobStatus.CANCELED.value}
)


def is_terminal(status: str | None) -> bool:
    """Whether no further status transitions are expected.

    A missing status is treated as terminal: there is nothing to wait for.
    """
    return not status or status in TERMINAL_STATUSES


@dataclass(frozen=True)
class Prediction:
    """Snapshot of a remote prediction.

    ``status`` is kept as the raw string reported by the service so unknown
    values survive into diagnostics.
    """

    id: str | None
    status: str | None
    output: Any = None

    @classmethod
    def from_payload(cls, payload: Any) -> "Prediction":
        if not isinstance(payload, dict):
            return cls(id=None, status=None)
        status = payload.get("status")
        return cls(
            id=payload.get("id"),
            status=str(status) if status is not None else None,
            output=payload.get("output"),
        )


class AbstractJobClient(ABC):
    """Interface for prediction services."""

    @abstractmethod
    async def create(self, job_input: dict[str, Any]) -> Prediction:
        """Submit a unit of work.

        Raises:
            RemoteServiceAppError: On transport failure or non-2xx response.
        """
        raise NotImplementedError

    @abstractmethod
    async def get(self, prediction_id: str) -> Prediction:
        """Fetch the current state of a prediction.

        Raises:
            RemoteServiceAppError: On transport failure or non-2xx response.
        """
        raise NotImplementedError

    async def aclose(self) -> None:
        return None
