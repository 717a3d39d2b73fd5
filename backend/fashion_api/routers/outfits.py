import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy import or_
from sqlalchemy.orm import Session

from fashion_api.config import Settings
from fashion_api.core.context import get_orchestrator, get_settings
from fashion_api.core.exceptions import NotFoundError
from fashion_api.core.params import EntityId
from fashion_api.core.rate_limit import ai_limit
from fashion_api.core.security import get_current_user
from fashion_api.database import get_db
from fashion_api.models import Outfit, OutfitRecommendation, User
from fashion_api.models.base import isoformat, utcnow
from fashion_api.schemas import (
    GenerateOutfitsRequest,
    OutfitCreate,
    OutfitUpdate,
    RateOutfitRequest,
    RecommendationCreate,
    RecommendationFeedback,
)
from fashion_api.services.outfit_orchestrator import OutfitOrchestrator
from fashion_api.utils.documents import merge_document
from fashion_api.utils.pagination import paginate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/outfits", tags=["Outfits"])


def _get_owned_outfit(db: Session, outfit_id: str, user_id: str) -> Outfit:
    outfit = db.query(Outfit).filter(Outfit.id == outfit_id, Outfit.user_id == user_id).first()
    if not outfit:
        raise NotFoundError("Outfit", access_denied=True)
    return outfit


@router.post("/generate")
@ai_limit
async def generate_outfits(
    request: Request,
    payload: GenerateOutfitsRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    orchestrator: OutfitOrchestrator = Depends(get_orchestrator),
):
    """Ask the AI engine for outfits built from the caller's own items."""
    return await orchestrator.generate(
        db,
        current_user.id,
        payload.items,
        payload.occasion,
        season=payload.season,
        weather_context=payload.weather_context,
        count=payload.count,
    )


@router.post("", status_code=status.HTTP_201_CREATED)
async def save_outfit(
    payload: OutfitCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    outfit = Outfit(
        user_id=current_user.id,
        name=payload.name,
        items=payload.items,
        occasion=payload.occasion,
        tags=payload.tags,
        is_public=payload.is_public,
    )
    db.add(outfit)
    db.commit()
    db.refresh(outfit)
    return {"success": True, "message": "Outfit saved successfully", "data": outfit.to_dict()}


@router.get("")
async def list_outfits(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
):
    query = db.query(Outfit).filter(Outfit.user_id == current_user.id).order_by(Outfit.created_at.desc())
    outfits, pagination = paginate(query, page, limit)
    return {
        "success": True,
        "data": {"outfits": [o.to_dict() for o in outfits], "pagination": pagination},
    }


# =============================================================================
# Recommendations (registered before /{outfit_id})
# =============================================================================

def _purge_expired(db: Session) -> int:
    removed = db.query(OutfitRecommendation).filter(
        OutfitRecommendation.expires_at <= utcnow()
    ).delete(synchronize_session=False)
    if removed:
        logger.info(f"Purged {removed} expired recommendations")
    return removed


@router.post("/recommendations", status_code=status.HTTP_201_CREATED)
async def save_recommendation(
    payload: RecommendationCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    settings: Settings = Depends(get_settings),
):
    now = utcnow()
    recommendation = OutfitRecommendation(
        user_id=current_user.id,
        occasion=payload.occasion,
        season=payload.season,
        weather_context=payload.weather_context,
        items=payload.items,
        compatibility_score=payload.compatibility_score,
        ai_reasoning=payload.ai_reasoning,
        recommendation_source=payload.recommendation_source,
        generation_metadata=payload.metadata,
        created_at=now,
        expires_at=OutfitRecommendation.expiry_from(now, settings.RECOMMENDATION_RETENTION_DAYS),
    )
    db.add(recommendation)
    db.commit()
    db.refresh(recommendation)
    return {
        "success": True,
        "message": "Recommendation saved successfully",
        "data": recommendation.to_dict(),
    }


@router.get("/recommendations")
async def list_recommendations(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    occasion: Optional[str] = Query(None),
):
    """The caller's unexpired recommendations, newest first."""
    _purge_expired(db)
    db.commit()

    query = db.query(OutfitRecommendation).filter(OutfitRecommendation.user_id == current_user.id)
    if occasion:
        query = query.filter(OutfitRecommendation.occasion == occasion)
    recommendations, pagination = paginate(
        query.order_by(OutfitRecommendation.created_at.desc()), page, limit
    )
    return {
        "success": True,
        "data": {
            "recommendations": [r.to_dict() for r in recommendations],
            "pagination": pagination,
        },
    }


@router.post("/recommendations/{recommendation_id}/feedback")
async def recommendation_feedback(
    recommendation_id: EntityId,
    payload: RecommendationFeedback,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    recommendation = db.query(OutfitRecommendation).filter(
        OutfitRecommendation.id == recommendation_id,
        OutfitRecommendation.user_id == current_user.id,
        OutfitRecommendation.expires_at > utcnow(),
    ).first()
    if not recommendation:
        raise NotFoundError("Recommendation", access_denied=True)

    feedback = payload.changes()
    feedback["providedAt"] = isoformat(utcnow())
    recommendation.user_feedback = merge_document(recommendation.user_feedback, feedback)
    db.commit()
    db.refresh(recommendation)
    return {
        "success": True,
        "message": "Feedback recorded successfully",
        "data": recommendation.to_dict(),
    }


# =============================================================================
# Single outfit
# =============================================================================

@router.get("/{outfit_id}")
async def get_outfit(
    outfit_id: EntityId,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    outfit = db.query(Outfit).filter(
        Outfit.id == outfit_id,
        or_(Outfit.user_id == current_user.id, Outfit.is_public.is_(True)),
    ).first()
    if not outfit:
        raise NotFoundError("Outfit", access_denied=True)
    return {"success": True, "data": outfit.to_dict()}


@router.put("/{outfit_id}")
async def update_outfit(
    outfit_id: EntityId,
    payload: OutfitUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    outfit = _get_owned_outfit(db, outfit_id, current_user.id)
    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(outfit, field, value)
    db.commit()
    db.refresh(outfit)
    return {"success": True, "message": "Outfit updated successfully", "data": outfit.to_dict()}


@router.delete("/{outfit_id}")
async def delete_outfit(
    outfit_id: EntityId,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    outfit = _get_owned_outfit(db, outfit_id, current_user.id)
    db.delete(outfit)
    db.commit()
    return {"success": True, "message": "Outfit deleted successfully"}


@router.post("/{outfit_id}/rate")
async def rate_outfit(
    outfit_id: EntityId,
    payload: RateOutfitRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    outfit = _get_owned_outfit(db, outfit_id, current_user.id)
    outfit.rating = payload.rating
    db.commit()
    return {"success": True, "message": "Outfit rated successfully", "data": {"rating": outfit.rating}}


@router.post("/{outfit_id}/share")
async def share_outfit(
    outfit_id: EntityId,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    settings: Settings = Depends(get_settings),
):
    outfit = _get_owned_outfit(db, outfit_id, current_user.id)
    outfit.is_public = True
    db.commit()
    return {
        "success": True,
        "message": "Outfit shared successfully",
        "data": {"shareUrl": f"{settings.FRONTEND_URL}/outfits/{outfit.id}"},
    }
