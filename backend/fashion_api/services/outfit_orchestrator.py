"""
Outfit recommendation orchestration.

Builds a generation request from the caller's own clothing items, sends it to
the AI engine once, and reshapes the engine's answer into the envelope the
frontend consumes. Nothing is persisted and no local fallback is produced.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from sqlalchemy.orm import Session

from fashion_api.core.exceptions import ExternalServiceError, ValidationError
from fashion_api.models import ClothingItem
from fashion_api.services.ai_client import AIClient, AIServiceError

logger = logging.getLogger(__name__)

DEFAULT_SEASON = "spring"
DEFAULT_COUNT = 5
DEFAULT_OVERALL_SCORE = 0.8
DEFAULT_GRADE = "B+"


# =============================================================================
# Engine response shapes
# =============================================================================

@dataclass
class GeneratedOutfits:
    """Engine returned an ``outfits`` array."""
    outfits: List[Dict[str, Any]]
    total_generated: int
    algorithm_info: Dict[str, Any] = field(default_factory=dict)
    processing_time_ms: float = 0


@dataclass
class AcknowledgedGeneration:
    """Engine returned only a success flag (older engine builds)."""
    total_generated: int
    algorithm_info: Dict[str, Any] = field(default_factory=dict)
    processing_time_ms: float = 0


EngineResponse = Union[GeneratedOutfits, AcknowledgedGeneration]


class UnexpectedResponseShape(Exception):
    """Engine response matched neither known envelope."""

    def __init__(self, payload: Any):
        self.payload = payload
        super().__init__("AI engine returned an unrecognized response shape")


def decode_engine_response(payload: Any) -> EngineResponse:
    if not isinstance(payload, dict):
        raise UnexpectedResponseShape(payload)

    algorithm_info = payload.get("algorithm_info") or {}
    processing_time_ms = payload.get("processing_time_ms") or 0

    outfits = payload.get("outfits")
    if isinstance(outfits, list):
        return GeneratedOutfits(
            outfits=outfits,
            total_generated=payload.get("total_generated") or len(outfits),
            algorithm_info=algorithm_info,
            processing_time_ms=processing_time_ms,
        )
    if outfits is None and payload.get("success") is True:
        return AcknowledgedGeneration(
            total_generated=payload.get("total_generated") or 0,
            algorithm_info=algorithm_info,
            processing_time_ms=processing_time_ms,
        )
    raise UnexpectedResponseShape(payload)


# =============================================================================
# Request / response reshaping
# =============================================================================

def normalize_item(item: ClothingItem) -> Dict[str, Any]:
    """Engine-facing view of a clothing item with defaults filled in."""
    attributes = item.attributes or {}
    return {
        "_id": item.id,
        "category": item.category,
        "name": item.name,
        "brand": item.brand,
        "color": item.color,
        "attributes": {
            "colors": [item.color] if item.color else ["unknown"],
            "style": item.tags or ["casual"],
            "materials": attributes.get("materials") or ["cotton"],
            "patterns": attributes.get("patterns") or ["solid"],
        },
    }


def transform_outfit(
    outfit: Dict[str, Any],
    index: int,
    occasion: str,
    season: str,
    weather_context: Optional[Dict[str, Any]],
) -> Dict[str, Any]:
    overall_score = outfit.get("overall_score") or DEFAULT_OVERALL_SCORE
    return {
        "id": outfit.get("id") or outfit.get("_id") or f"outfit_{index}",
        "name": outfit.get("name") or f"{occasion.capitalize()} Outfit {index + 1}",
        "items": outfit.get("item_ids") or outfit.get("items") or [],
        "score": round(overall_score * 100),
        "explanation": outfit.get("explanation") or [],
        "tags": outfit.get("tags") or [occasion, season],
        "occasion": outfit.get("occasion") or occasion,
        "weatherContext": weather_context,
        "grade": outfit.get("grade") or DEFAULT_GRADE,
        "scores": outfit.get("scores") or {},
        "overall_score": overall_score,
    }


class OutfitOrchestrator:
    def __init__(self, ai_client: AIClient):
        self.ai_client = ai_client

    def load_owned_items(self, db: Session, user_id: str, item_ids: List[str]) -> List[ClothingItem]:
        """Caller's items among ``item_ids``, in request order. Foreign ids are dropped."""
        found = (
            db.query(ClothingItem)
            .filter(ClothingItem.id.in_(item_ids), ClothingItem.user_id == user_id)
            .all()
        )
        by_id = {item.id: item for item in found}
        seen = set()
        ordered = []
        for item_id in item_ids:
            if item_id in by_id and item_id not in seen:
                seen.add(item_id)
                ordered.append(by_id[item_id])
        return ordered

    async def generate(
        self,
        db: Session,
        user_id: str,
        item_ids: List[str],
        occasion: str,
        season: Optional[str] = None,
        weather_context: Optional[Dict[str, Any]] = None,
        count: Optional[int] = None,
    ) -> Dict[str, Any]:
        if not item_ids:
            raise ValidationError("No wardrobe items provided")

        items = self.load_owned_items(db, user_id, item_ids)
        if not items:
            raise ValidationError("No valid wardrobe items found for user")

        season = season or DEFAULT_SEASON
        request = {
            "user_id": user_id,
            "occasion": occasion,
            "season": season,
            "weather_context": weather_context,
            "wardrobe_items": [normalize_item(item) for item in items],
            "style_preferences": [],
            "count": count or DEFAULT_COUNT,
        }
        logger.info(
            f"Requesting {request['count']} {occasion} outfits for user {user_id} "
            f"from {len(items)} items"
        )

        try:
            payload = await self.ai_client.generate_outfits(request)
            response = decode_engine_response(payload)
        except AIServiceError as e:
            logger.error(f"Outfit generation failed: {e.message}")
            raise ExternalServiceError(
                "Failed to generate outfit recommendations",
                details=e.payload if e.payload is not None else e.message,
            )
        except UnexpectedResponseShape as e:
            logger.error(f"Outfit generation failed: {e} {e.payload!r}")
            raise ExternalServiceError(
                "Failed to generate outfit recommendations",
                details=str(e),
            )

        if isinstance(response, GeneratedOutfits):
            outfits = [
                transform_outfit(outfit, index, occasion, season, weather_context)
                for index, outfit in enumerate(response.outfits)
            ]
        else:
            outfits = []

        return {
            "success": True,
            "recommendations": {
                "outfits": outfits,
                "total": len(outfits),
                "algorithm_info": response.algorithm_info,
                "processing_time_ms": response.processing_time_ms,
            },
        }
