"""Image description batches backed by the remote prediction service.

Each image URL becomes one prediction, run to completion before the next one
is submitted. A failing image yields a diagnostic description instead of
aborting the batch.
"""

from __future__ import annotations

import logging
from typing import Any

from app.core.errors import RemoteServiceAppError, ValidationAppError
from app.schemas.images import ImageAnalysisResponse, ImageDescription
from app.services.job_poller import JobOutcome, JobPoller

logger = logging.getLogger(__name__)


def describe_output(output: Any) -> str:
    """Coerce a prediction output to display text.

    Sequence outputs contribute their first element; ``None`` becomes "".
    """
    if isinstance(output, (list, tuple)):
        output = output[0] if output else None
    if output is None:
        return ""
    return str(output)


def describe_outcome(outcome: JobOutcome) -> str:
    """Text for one finished (or abandoned) prediction."""
    if outcome.status == "succeeded":
        return describe_output(outcome.output)
    return f"status: {outcome.status or 'unknown'}"


def describe_failure(exc: RemoteServiceAppError) -> str:
    """Inline diagnostic for a unit whose HTTP calls failed."""
    return f"error: {exc.message}"


def validate_image_urls(image_urls: Any) -> list[str]:
    """Require a non-empty list of non-blank URL strings.

    Raises:
        ValidationAppError: If the list is empty or an entry is not a usable string.
    """
    if (
        not isinstance(image_urls, list)
        or not image_urls
        or not all(isinstance(url, str) and url.strip() for url in image_urls)
    ):
        raise ValidationAppError(
            code="image_urls_required",
            message="imageUrls[] is required",
            details={"hint": "Send a non-empty list of image URL strings."},
        )
    return [url.strip() for url in image_urls]


class ImageAnalysisService:
    """Describes images one by one through a JobPoller."""

    def __init__(self, poller: JobPoller) -> None:
        self.poller = poller

    async def describe_image(self, url: str) -> ImageDescription:
        try:
            outcome = await self.poller.submit_and_await({"image": url})
        except RemoteServiceAppError as exc:
            logger.warning(
                "images.unit_failed",
                extra={"error_code": exc.code, "http_status": (exc.details or {}).get("http_status")},
            )
            return ImageDescription(url=url, description=describe_failure(exc))

        return ImageDescription(url=url, description=describe_outcome(outcome))

    async def describe_images(self, image_urls: Any, context: str = "") -> ImageAnalysisResponse:
        """Describe every image in order.

        Args:
            image_urls: Image URLs; validated before any submission.
            context: Caller context echoed in the response.

        Returns:
            ImageAnalysisResponse with one entry per URL, in input order.

        Raises:
            ValidationAppError: If ``image_urls`` is empty or malformed.
        """
        urls = validate_image_urls(image_urls)

        outputs = []
        for url in urls:
            outputs.append(await self.describe_image(url))

        logger.info("images.batch_completed", extra={"image_count": len(urls)})
        return ImageAnalysisResponse(context=context, outputs=outputs)
