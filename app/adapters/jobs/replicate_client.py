"""Replicate predictions API client."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from app.adapters.jobs.base import AbstractJobClient, Prediction
from app.core.config import settings
from app.core.errors import ConfigurationAppError, RemoteServiceAppError

logger = logging.getLogger(__name__)

# Error bodies are echoed into per-image diagnostics; keep them short
MAX_ERROR_BODY_CHARS = 500


class ReplicateJobClient(AbstractJobClient):
    """Creates and reads predictions over Replicate's HTTP API.

    Authenticates with ``Authorization: Token <api token>``. Every non-2xx
    response and every transport failure surfaces as RemoteServiceAppError.
    """

    def __init__(
        self,
        *,
        api_token: str,
        model_version: str,
        base_url: str = "https://api.replicate.com/v1/predictions",
        timeout_seconds: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.model_version = model_version
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            headers={
                "Authorization": f"Token {api_token}",
                "Content-Type": "application/json",
            },
            timeout=httpx.Timeout(timeout_seconds),
            transport=transport,
        )

    async def _request(self, method: str, url: str, **kwargs: Any) -> Prediction:
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning(
                "jobs.transport_error",
                extra={"method": method, "error_type": type(exc).__name__},
            )
            raise RemoteServiceAppError(
                code="remote_transport_error",
                message=f"{type(exc).__name__}: {exc}".rstrip(": "),
            ) from exc

        if response.is_error:
            body = response.text[:MAX_ERROR_BODY_CHARS]
            logger.warning(
                "jobs.http_error",
                extra={"method": method, "http_status": response.status_code},
            )
            raise RemoteServiceAppError(
                code="remote_http_error",
                message=f"{response.status_code} {body}".strip(),
                details={"http_status": response.status_code, "body": body},
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise RemoteServiceAppError(
                code="remote_invalid_response",
                message="Prediction service returned a non-JSON body",
                details={"http_status": response.status_code},
            ) from exc

        return Prediction.from_payload(payload)

    async def create(self, job_input: dict[str, Any]) -> Prediction:
        return await self._request(
            "POST",
            self.base_url,
            json={"version": self.model_version, "input": job_input},
        )

    async def get(self, prediction_id: str) -> Prediction:
        return await self._request("GET", f"{self.base_url}/{prediction_id}")

    async def aclose(self) -> None:
        await self._client.aclose()


def create_job_client() -> ReplicateJobClient:
    """Build the prediction client from ``REPLICATE_*`` settings.

    Raises:
        ConfigurationAppError: If REPLICATE_API_TOKEN is not set.
    """
    cfg = settings.replicate
    if not cfg.api_token:
        raise ConfigurationAppError(
            code="image_analysis_not_configured",
            message="Image analysis not configured (set REPLICATE_API_TOKEN)",
            details={"setting": "REPLICATE_API_TOKEN"},
        )
    return ReplicateJobClient(
        api_token=cfg.api_token,
        model_version=cfg.model_version,
        base_url=cfg.base_url,
        timeout_seconds=cfg.timeout_seconds,
    )
