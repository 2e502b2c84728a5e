"""Pydantic schemas for the image analysis endpoint."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ImageAnalysisRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    image_urls: list[Any] = Field(
        default_factory=list,
        alias="imageUrls",
        description="Publicly reachable image URLs, processed in order.",
    )
    context: str = Field("", description="Free-form context echoed back to the caller")


class ImageDescription(BaseModel):
    """Per-image result.

    ``description`` holds the model output on success, or a diagnostic string
    (``"status: ..."`` / ``"error: ..."``) when that image could not be described.
    """

    url: str
    description: str | None


class ImageAnalysisResponse(BaseModel):
    context: str
    outputs: list[ImageDescription]
