"""Remote prediction service adapters."""

from app.adapters.jobs.base import (
    TERMINAL_STATUSES,
    AbstractJobClient,
    JobStatus,
    Prediction,
    is_terminal,
)
from app.adapters.jobs.replicate_client import ReplicateJobClient, create_job_client

__all__ = [
    "TERMINAL_STATUSES",
    "AbstractJobClient",
    "JobStatus",
    "Prediction",
    "ReplicateJobClient",
    "create_job_client",
    "is_terminal",
]
