"""
Shapes for AI engine classification results.
"""
from typing import Any, Dict, Optional

from fashion_api.core.exceptions import ExternalServiceError
from fashion_api.models.base import isoformat, utcnow
from fashion_api.models.clothing import DEFAULT_MODEL_VERSION

DEFAULT_CONFIDENCE = 0.5
DEFAULT_QUALITY_SCORE = 0.8


def normalize_classification(payload: Any) -> Dict[str, Any]:
    """Validate an ``/api/classify`` response and fill in missing fields.

    Raises:
        ExternalServiceError: the engine did not report success or sent no classification
    """
    if not isinstance(payload, dict) or not payload.get("success"):
        error = payload.get("error") if isinstance(payload, dict) else None
        raise ExternalServiceError("AI service returned invalid response", error=error or "Invalid AI response")

    classification = payload.get("classification")
    if not classification:
        raise ExternalServiceError(
            "No classification data received from AI service", error="Missing classification data"
        )

    return {
        "success": True,
        "classification": {
            "predicted_class": classification.get("predicted_class") or "unknown",
            "confidence": classification.get("confidence") or 0,
            "all_predictions": classification.get("all_predictions") or [],
        },
        "attributes": payload.get("attributes") or {},
        "image_quality": payload.get("image_quality") or {"overall_score": 0.5},
        "processing_time_ms": payload.get("processing_time_ms") or 0,
        "model_version": payload.get("model_version") or "1.0",
        "timestamp": payload.get("timestamp") or isoformat(utcnow()),
    }


def quality_score(result: Dict[str, Any]) -> float:
    quality = result.get("image_quality") or {}
    return quality.get("overall_score") or DEFAULT_QUALITY_SCORE


def classification_record(
    result: Optional[Dict[str, Any]],
    category: str,
    processing_time_ms: float = 0,
) -> Dict[str, Any]:
    """``aiClassification`` document stored on a clothing item.

    Without a result the user's category is recorded with the default confidence.
    """
    if result is None:
        return {
            "confidence": DEFAULT_CONFIDENCE,
            "modelVersion": DEFAULT_MODEL_VERSION,
            "allPredictions": [{"category": category, "confidence": DEFAULT_CONFIDENCE}],
            "processingTime": 0,
            "qualityScore": DEFAULT_QUALITY_SCORE,
        }

    classification = result["classification"]
    predictions = [
        {"category": p.get("category") or p.get("class"), "confidence": p.get("confidence")}
        for p in classification["all_predictions"]
        if isinstance(p, dict)
    ]
    return {
        "confidence": classification["confidence"],
        "modelVersion": DEFAULT_MODEL_VERSION,
        "allPredictions": predictions or [{"category": category, "confidence": DEFAULT_CONFIDENCE}],
        "processingTime": processing_time_ms,
        "qualityScore": quality_score(result),
    }
