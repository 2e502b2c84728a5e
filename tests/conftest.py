"""Pytest configuration and fixtures shared across all test modules.

Environment defaults are set before any app import so the global settings
object sees them.
"""

import os

# CRITICAL: Set this before any imports that might load settings
os.environ["APP_ENV"] = "testing"
os.environ.setdefault("LLM_PROVIDER", "groq")
os.environ.setdefault("LLM_MODEL", "llama-3.1-70b-versatile")
os.environ.setdefault("LLM_API_KEY", "test-llm-key-123")
os.environ.setdefault("REPLICATE_API_TOKEN", "test-replicate-token")
os.environ.setdefault("REPLICATE_POLL_INTERVAL_SECONDS", "0")
os.environ.setdefault("APP_RATE_LIMIT_BACKEND", "memory")

from typing import Any

import pytest

from app.adapters.jobs.base import AbstractJobClient, Prediction
from app.adapters.llm.base import AbstractLLMClient, ChatCompletion, ChatMessage
from app.core.rate_limit import reset_rate_limiter


class FakeLLMClient(AbstractLLMClient):
    """Records chat calls and answers with queued replies ("ok" when empty)."""

    def __init__(self, replies: list[str] | None = None, model: str = "fake-model") -> None:
        self.replies = list(replies or [])
        self.default_model = model
        self.calls: list[dict[str, Any]] = []

    async def chat(
        self,
        messages: list[ChatMessage],
        *,
        model: str | None = None,
        temperature: float = 0.2,
        max_tokens: int = 1024,
    ) -> ChatCompletion:
        self.calls.append(
            {
                "messages": messages,
                "model": model,
                "temperature": temperature,
                "max_tokens": max_tokens,
            }
        )
        content = self.replies.pop(0) if self.replies else "ok"
        return ChatCompletion(content=content, model=model or self.default_model)


class ScriptedJobClient(AbstractJobClient):
    """Plays back one script per submitted job.

    A script is either an exception (raised by ``create``) or a list of
    statuses / Predictions: the first answers ``create``, the following ones
    answer successive ``get`` calls, and the last one repeats forever.
    """

    def __init__(self, scripts: list[Any]) -> None:
        self.scripts = list(scripts)
        self.created: list[dict[str, Any]] = []
        self.polled: list[str] = []
        self._active: list[Prediction] = []
        self._job_no = 0

    @staticmethod
    def _as_prediction(step: Any, job_id: str) -> Prediction:
        if isinstance(step, Prediction):
            return step
        return Prediction(id=job_id, status=step)

    async def create(self, job_input: dict[str, Any]) -> Prediction:
        self.created.append(job_input)
        self._job_no += 1
        job_id = f"job-{self._job_no}"
        script = self.scripts.pop(0)
        if isinstance(script, Exception):
            raise script
        self._active = [self._as_prediction(step, job_id) for step in script]
        return self._active[0] if len(self._active) == 1 else self._active.pop(0)

    async def get(self, prediction_id: str) -> Prediction:
        self.polled.append(prediction_id)
        return self._active[0] if len(self._active) == 1 else self._active.pop(0)


@pytest.fixture(autouse=True)
def fresh_rate_limiter():
    """Every test starts with empty rate limit counters."""
    reset_rate_limiter()
    yield
    reset_rate_limiter()


@pytest.fixture
def fake_llm() -> FakeLLMClient:
    return FakeLLMClient()


@pytest.fixture
def no_sleep():
    """Async sleep replacement recording requested delays."""
    delays: list[float] = []

    async def _sleep(seconds: float) -> None:
        delays.append(seconds)

    _sleep.delays = delays
    return _sleep


@pytest.fixture
def make_job_client():
    """Factory building a ScriptedJobClient from per-job scripts."""
    return ScriptedJobClient


@pytest.fixture
def make_llm_client():
    """Factory building a FakeLLMClient with queued replies."""
    return FakeLLMClient
