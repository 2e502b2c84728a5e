"""FastAPI dependencies building the services used by the routes.

Building a service is where missing credentials surface: the dependency raises
ConfigurationAppError (501) before the request body is looked at.
"""

from __future__ import annotations

from typing import AsyncIterator

from app.adapters.jobs.replicate_client import create_job_client
from app.adapters.llm.base import AbstractLLMClient
from app.adapters.llm.factory import create_llm_client
from app.core.config import settings
from app.services.assistant_service import AssistantService
from app.services.image_analysis_service import ImageAnalysisService
from app.services.job_poller import JobPoller

_llm_client: AbstractLLMClient | None = None
_llm_config: tuple | None = None


def get_llm_client() -> AbstractLLMClient:
    """Return a process-wide chat client, rebuilt when LLM settings change."""

    global _llm_client, _llm_config

    config = (
        settings.llm.provider,
        settings.llm.model,
        settings.llm.api_key,
        settings.llm.base_url,
        settings.llm.timeout_seconds,
    )
    if _llm_client is None or _llm_config != config:
        _llm_client = create_llm_client()
        _llm_config = config
    return _llm_client


def get_assistant_service() -> AssistantService:
    return AssistantService(llm=get_llm_client())


async def get_image_analysis_service() -> AsyncIterator[ImageAnalysisService]:
    """Yield an image service whose HTTP client lives for one request."""

    client = create_job_client()
    poller = JobPoller(
        client,
        max_attempts=settings.replicate.max_poll_attempts,
        poll_interval_seconds=settings.replicate.poll_interval_seconds,
    )
    try:
        yield ImageAnalysisService(poller)
    finally:
        await client.aclose()
