from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.deps import get_assistant_service, get_image_analysis_service
from app.core.rate_limit import rate_limit
from app.schemas.assistant import (
    ChatRequest,
    ChatResponse,
    ConditionDraftRequest,
    ConditionDraftResponse,
    ContentResponse,
    DifferentialDiagnosisRequest,
    TranslateRequest,
)
from app.schemas.images import ImageAnalysisRequest, ImageAnalysisResponse
from app.services.assistant_service import AssistantService
from app.services.image_analysis_service import ImageAnalysisService

router = APIRouter(prefix="/ai-assistant", tags=["AI Assistant"])

Assistant = Annotated[AssistantService, Depends(get_assistant_service)]
ImageAnalysis = Annotated[ImageAnalysisService, Depends(get_image_analysis_service)]


@router.post(
    "/message",
    response_model=ChatResponse,
    dependencies=[Depends(rate_limit("ai-message"))],
)
async def message(body: ChatRequest, service: Assistant) -> ChatResponse:
    """Continue a clinician chat conversation.

    Returns 400 for an empty conversation and 501 when no LLM key is configured.
    """
    return await service.message(
        body.messages,
        temperature=body.temperature,
        max_tokens=body.max_tokens,
        model=body.model,
    )


@router.post(
    "/translate",
    response_model=ContentResponse,
    dependencies=[Depends(rate_limit("ai-translate"))],
)
async def translate(body: TranslateRequest, service: Assistant) -> ContentResponse:
    """Translate markdown between Romanian and English, preserving structure."""
    return await service.translate(
        source=body.source,
        target=body.target,
        markdown=body.markdown,
        instruction=body.instruction,
    )


@router.post(
    "/condition-draft",
    response_model=ConditionDraftResponse,
    dependencies=[Depends(rate_limit("ai-condition-draft"))],
)
async def condition_draft(body: ConditionDraftRequest, service: Assistant) -> ConditionDraftResponse:
    return await service.condition_draft(body.name, body.context)


@router.post(
    "/differential-diagnosis",
    response_model=ContentResponse,
    dependencies=[Depends(rate_limit("ai-differential"))],
)
async def differential_diagnosis(
    body: DifferentialDiagnosisRequest, service: Assistant
) -> ContentResponse:
    return await service.differential_diagnosis(
        body.symptoms,
        age=body.age,
        gender=body.gender,
        context=body.context,
    )


@router.post(
    "/analyze-images",
    response_model=ImageAnalysisResponse,
    dependencies=[Depends(rate_limit("ai-analyze-images"))],
)
async def analyze_images(body: ImageAnalysisRequest, service: ImageAnalysis) -> ImageAnalysisResponse:
    """Describe each image URL via the remote prediction service.

    Images are processed one after another. Per-image failures come back as
    diagnostic descriptions with an overall 200; missing configuration (501)
    and an empty ``imageUrls`` list (400) fail the whole request up front.
    """
    return await service.describe_images(body.image_urls, body.context)
