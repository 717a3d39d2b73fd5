"""
Failure policy for calls to the AI engine.

Each call site declares a ``CallPolicy``: the messages it reports and, when it
has one, the degraded payload served when the engine refuses connections.
``call_ai`` applies the policy the same way everywhere:

* connection refused + fallback declared -> degraded payload (200)
* connection refused, no fallback        -> 503
* engine answered non-2xx                -> engine status and error text
* anything else                          -> 500
"""
import logging
import random
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional

from fashion_api.core.exceptions import ExternalServiceError, ServiceUnavailableError
from fashion_api.services.ai_client import AIServiceError, AIServiceUnavailable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DegradedResponse:
    """Locally built stand-in for an engine response."""
    name: str
    build: Callable[[Dict[str, Any]], Dict[str, Any]]


@dataclass(frozen=True)
class CallPolicy:
    failure_message: str
    unavailable_message: str = "AI service is not available"
    fallback: Optional[DegradedResponse] = None


def similarity_score() -> float:
    """Placeholder similarity in [0.7, 1.0)."""
    return random.random() * 0.3 + 0.7


def _similar_items(body: Dict[str, Any]) -> Dict[str, Any]:
    count = min(body.get("top_k") or 5, 5)
    results = [
        {
            "id": f"item_{body.get('item_id')}_similar_{i + 1}",
            "similarity_score": similarity_score(),
            "name": f"Similar Item {i + 1}",
            "category": "clothing",
        }
        for i in range(count)
    ]
    return {"success": True, "results": results, "total": len(results)}


def _compatibility(body: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "success": True,
        "compatibility": {
            "compatible": random.random() > 0.3,
            "score": random.random(),
            "reasons": ["color harmony", "style matching"],
            "context": body.get("context") or "general",
        },
        "item1_id": body.get("item1_id"),
        "item2_id": body.get("item2_id"),
    }


def _attributes(body: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "success": True,
        "attributes": {
            "color": {"primary": "blue", "secondary": "white"},
            "material": "cotton",
            "pattern": "solid",
            "style": "casual",
            "fit": "regular",
            "season": ["spring", "summer"],
            "occasions": ["casual", "work"],
        },
    }


def _style_recommendations(body: Dict[str, Any]) -> Dict[str, Any]:
    count = min(body.get("limit") or 5, 5)
    recommendations = [
        {
            "id": f"rec_{i + 1}",
            "name": f"Recommended Item {i + 1}",
            "category": "clothing",
            "confidence": similarity_score(),
            "reason": "Style matching",
        }
        for i in range(count)
    ]
    return {
        "success": True,
        "recommendations": recommendations,
        "base_item_id": body.get("base_item_id"),
        "context": body.get("context"),
    }


def _knowledge(body: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "success": True,
        "type": body.get("type"),
        "results": [
            {"id": "result_1", "name": "Fashion Trend 1", "relevance": 0.9},
            {"id": "result_2", "name": "Fashion Trend 2", "relevance": 0.8},
        ],
        "params": body.get("params"),
    }


CLASSIFY = CallPolicy(
    failure_message="Failed to classify image",
    unavailable_message="AI classification service is not available. Please ensure the AI service is running.",
)
CLASSIFY_BATCH = CallPolicy(
    failure_message="Failed to classify images",
    unavailable_message="AI classification service is not available",
)
SIMILARITY = CallPolicy(
    failure_message="Failed to find similar items",
    fallback=DegradedResponse("similarity", _similar_items),
)
COMPATIBILITY = CallPolicy(
    failure_message="Failed to check compatibility",
    fallback=DegradedResponse("compatibility", _compatibility),
)
ATTRIBUTES = CallPolicy(
    failure_message="Failed to analyze attributes",
    fallback=DegradedResponse("attributes", _attributes),
)
STYLE_RECOMMENDATIONS = CallPolicy(
    failure_message="Failed to get style recommendations",
    fallback=DegradedResponse("style_recommendations", _style_recommendations),
)
KNOWLEDGE = CallPolicy(
    failure_message="Failed to query knowledge graph",
    fallback=DegradedResponse("knowledge", _knowledge),
)


def to_api_error(policy: CallPolicy, exc: AIServiceError) -> Exception:
    """Map an AI client failure to the exception reported to the caller."""
    if isinstance(exc, AIServiceUnavailable):
        return ServiceUnavailableError(policy.unavailable_message, error="Service unavailable")
    if exc.status_code is not None:
        return ExternalServiceError(
            "AI service error", status_code=exc.status_code, error=exc.upstream_error
        )
    return ExternalServiceError(policy.failure_message, error=exc.message)


async def call_ai(
    policy: CallPolicy,
    call: Callable[[], Awaitable[Any]],
    body: Optional[Dict[str, Any]] = None,
) -> Any:
    """Run ``call`` under ``policy``."""
    try:
        return await call()
    except AIServiceUnavailable as e:
        if policy.fallback is None:
            raise to_api_error(policy, e)
        logger.warning(f"AI engine unreachable, serving degraded {policy.fallback.name} response")
        return policy.fallback.build(body or {})
    except AIServiceError as e:
        raise to_api_error(policy, e)
