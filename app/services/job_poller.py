"""Submit-and-poll loop for remote predictions.

The poller submits one unit of work, then re-reads it at a fixed interval
until the remote service reports a terminal status or the attempt budget is
spent. Worst-case latency is ``max_attempts * poll_interval_seconds`` plus the
HTTP round trips. Waiting is an ``await`` so other requests keep being served.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from app.adapters.jobs.base import AbstractJobClient, is_terminal
from app.core.errors import RemoteServiceAppError

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 30
DEFAULT_POLL_INTERVAL_SECONDS = 2.0


@dataclass(frozen=True)
class JobOutcome:
    """Last observed state of a prediction.

    ``status`` may still be non-terminal when the attempt budget ran out.
    """

    status: str | None
    output: Any = None
    attempts: int = 0


class JobPoller:
    """Runs one prediction to a terminal status (or to budget exhaustion)."""

    def __init__(
        self,
        client: AbstractJobClient,
        *,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        if max_attempts < 0:
            raise ValueError("max_attempts must be >= 0")
        if poll_interval_seconds < 0:
            raise ValueError("poll_interval_seconds must be >= 0")
        self.client = client
        self.max_attempts = max_attempts
        self.poll_interval_seconds = poll_interval_seconds
        self._sleep = sleep

    async def submit_and_await(self, job_input: dict[str, Any]) -> JobOutcome:
        """Create a prediction and poll it until done.

        Args:
            job_input: Model input payload.

        Returns:
            JobOutcome with the last observed status and output.

        Raises:
            RemoteServiceAppError: If the creation or any poll call fails.
        """
        prediction = await self.client.create(job_input)
        logger.info(
            "jobs.created",
            extra={"prediction_id": prediction.id, "status": prediction.status},
        )

        prediction_id = prediction.id
        if prediction_id is None and not is_terminal(prediction.status):
            raise RemoteServiceAppError(
                code="remote_invalid_response",
                message="Prediction service returned no prediction id",
            )

        attempts = 0
        while not is_terminal(prediction.status) and attempts < self.max_attempts:
            await self._sleep(self.poll_interval_seconds)
            prediction = await self.client.get(prediction_id)
            attempts += 1
            logger.debug(
                "jobs.poll",
                extra={
                    "prediction_id": prediction_id,
                    "status": prediction.status,
                    "attempt": attempts,
                },
            )

        if not is_terminal(prediction.status):
            logger.warning(
                "jobs.poll_exhausted",
                extra={
                    "prediction_id": prediction_id,
                    "status": prediction.status,
                    "attempts": attempts,
                },
            )
        else:
            logger.info(
                "jobs.finished",
                extra={
                    "prediction_id": prediction_id,
                    "status": prediction.status,
                    "attempts": attempts,
                },
            )

        return JobOutcome(status=prediction.status, output=prediction.output, attempts=attempts)
