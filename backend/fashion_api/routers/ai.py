"""
Public proxy to the AI engine.

Classification forwards the uploaded image(s); the remaining endpoints forward
their JSON body. Every call runs under a ``CallPolicy`` from
``services.resilience``, which decides between a degraded payload and an error
when the engine cannot be reached.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Request, UploadFile

from fashion_api.config import Settings
from fashion_api.core.context import get_ai_client, get_settings
from fashion_api.core.exceptions import ValidationError
from fashion_api.core.rate_limit import ai_limit, upload_limit
from fashion_api.schemas import (
    CompatibilityRequest,
    KnowledgeQueryRequest,
    SimilarityRequest,
    StyleRecommendationRequest,
)
from fashion_api.services import resilience
from fashion_api.services.ai_client import AIClient
from fashion_api.services.classification import normalize_classification
from fashion_api.utils.uploads import read_image

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["AI"])

MAX_BATCH_IMAGES = 10


@router.post("/classify")
@upload_limit
async def classify_image(
    request: Request,
    image: Optional[UploadFile] = File(None),
    ai_client: AIClient = Depends(get_ai_client),
    settings: Settings = Depends(get_settings),
):
    if image is None:
        raise ValidationError("No image file provided")
    upload = await read_image(image, settings.MAX_IMAGE_SIZE)

    payload = await resilience.call_ai(resilience.CLASSIFY, lambda: ai_client.classify_image(upload))
    return {
        "success": True,
        "data": normalize_classification(payload),
        "message": "Image classified successfully",
    }


@router.post("/classify/batch")
@upload_limit
async def classify_batch(
    request: Request,
    images: Optional[List[UploadFile]] = File(None),
    ai_client: AIClient = Depends(get_ai_client),
    settings: Settings = Depends(get_settings),
):
    """Forward up to ten images; the engine's answer is returned as is."""
    if not images:
        raise ValidationError("No image files provided")
    if len(images) > MAX_BATCH_IMAGES:
        raise ValidationError(f"Too many files. Maximum is {MAX_BATCH_IMAGES}")
    uploads = [await read_image(image, settings.MAX_IMAGE_SIZE) for image in images]

    return await resilience.call_ai(resilience.CLASSIFY_BATCH, lambda: ai_client.classify_batch(uploads))


@router.post("/similarity/find")
@ai_limit
async def find_similar(
    request: Request,
    payload: SimilarityRequest,
    ai_client: AIClient = Depends(get_ai_client),
):
    body = payload.model_dump()
    return await resilience.call_ai(resilience.SIMILARITY, lambda: ai_client.search_similar(body), body)


@router.post("/compatibility/check")
@ai_limit
async def check_compatibility(
    request: Request,
    payload: CompatibilityRequest,
    ai_client: AIClient = Depends(get_ai_client),
):
    body = payload.model_dump()
    return await resilience.call_ai(
        resilience.COMPATIBILITY, lambda: ai_client.check_compatibility(body), body
    )


@router.post("/attributes/analyze")
@ai_limit
async def analyze_attributes(
    request: Request,
    image: Optional[UploadFile] = File(None),
    ai_client: AIClient = Depends(get_ai_client),
    settings: Settings = Depends(get_settings),
):
    if image is None:
        raise ValidationError("No image file provided")
    upload = await read_image(image, settings.MAX_IMAGE_SIZE)
    return await resilience.call_ai(resilience.ATTRIBUTES, lambda: ai_client.analyze_attributes(upload))


@router.post("/recommendations/style")
@ai_limit
async def style_recommendations(
    request: Request,
    payload: StyleRecommendationRequest,
    ai_client: AIClient = Depends(get_ai_client),
):
    body = payload.model_dump()
    return await resilience.call_ai(
        resilience.STYLE_RECOMMENDATIONS, lambda: ai_client.style_recommendations(body), body
    )


@router.post("/knowledge/query")
@ai_limit
async def query_knowledge(
    request: Request,
    payload: KnowledgeQueryRequest,
    ai_client: AIClient = Depends(get_ai_client),
):
    body = payload.model_dump()
    return await resilience.call_ai(resilience.KNOWLEDGE, lambda: ai_client.query_knowledge(body), body)
