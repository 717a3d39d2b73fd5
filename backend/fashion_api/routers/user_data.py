"""
Per-user data overview, statistics and export.
"""
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy import extract, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from fashion_api.core.context import AppContext, get_context
from fashion_api.core.exceptions import DatabaseError
from fashion_api.core.security import get_current_user
from fashion_api.database import get_db, ping_database
from fashion_api.models import ChatSession, ClothingItem, Outfit, OutfitRecommendation, User, Wardrobe
from fashion_api.models.base import isoformat, utcnow

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/database", tags=["User data"])

EXPORT_FORMAT_VERSION = "1.0"
MONTHLY_ACTIVITY_MONTHS = 12


def _latest(db: Session, model, user_id: str, order_column, fields: List[str]) -> Optional[Dict[str, Any]]:
    row = db.query(model).filter(model.user_id == user_id).order_by(order_column.desc()).first()
    if row is None:
        return None
    data = row.to_dict()
    return {"id": data["id"], **{field: data.get(field) for field in fields}}


def _breakdown(db: Session, column, user_filter) -> List[Dict[str, Any]]:
    rows = (
        db.query(column, func.count().label("count"))
        .filter(user_filter)
        .group_by(column)
        .order_by(func.count().desc())
        .all()
    )
    return [{"_id": key, "count": count} for key, count in rows]


@router.get("/overview")
async def data_overview(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    user_id = current_user.id
    overview = {
        "user_data": {
            "wardrobes": db.query(Wardrobe).filter(Wardrobe.user_id == user_id).count(),
            "clothing_items": db.query(ClothingItem).filter(ClothingItem.user_id == user_id).count(),
            "outfits": db.query(Outfit).filter(Outfit.user_id == user_id).count(),
            "chat_sessions": db.query(ChatSession).filter(ChatSession.user_id == user_id).count(),
        },
        "recent_activity": {
            "latest_wardrobe": _latest(db, Wardrobe, user_id, Wardrobe.created_at, ["name", "createdAt"]),
            "latest_item": _latest(
                db, ClothingItem, user_id, ClothingItem.created_at, ["name", "category", "createdAt"]
            ),
            "latest_outfit": _latest(db, Outfit, user_id, Outfit.created_at, ["name", "occasion", "createdAt"]),
            "latest_chat": _latest(
                db, ChatSession, user_id, ChatSession.last_message_at, ["title", "sessionType", "lastMessageAt"]
            ),
        },
    }
    return {"success": True, "data": overview, "timestamp": isoformat(utcnow())}


@router.get("/stats/detailed")
async def detailed_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Category and occasion breakdowns plus items added per month (last 12 months with activity)."""
    year = extract("year", ClothingItem.created_at)
    month = extract("month", ClothingItem.created_at)
    monthly = (
        db.query(year.label("year"), month.label("month"), func.count().label("items_added"))
        .filter(ClothingItem.user_id == current_user.id)
        .group_by(year, month)
        .order_by(year.desc(), month.desc())
        .limit(MONTHLY_ACTIVITY_MONTHS)
        .all()
    )

    return {
        "success": True,
        "data": {
            "category_breakdown": _breakdown(
                db, ClothingItem.category, ClothingItem.user_id == current_user.id
            ),
            "occasion_breakdown": _breakdown(db, Outfit.occasion, Outfit.user_id == current_user.id),
            "monthly_activity": [
                {"_id": {"year": int(y), "month": int(m)}, "items_added": count}
                for y, m, count in monthly
            ],
        },
        "timestamp": isoformat(utcnow()),
    }


@router.get("/export")
async def export_user_data(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Everything stored for the caller, for backup or migration."""
    user_id = current_user.id

    def rows(model):
        return [row.to_dict() for row in db.query(model).filter(model.user_id == user_id).all()]

    return {
        "success": True,
        "data": {
            "user": current_user.to_dict(),
            "wardrobes": rows(Wardrobe),
            "clothing_items": rows(ClothingItem),
            "outfits": rows(Outfit),
            "recommendations": rows(OutfitRecommendation),
            "chat_sessions": rows(ChatSession),
        },
        "exported_at": isoformat(utcnow()),
        "format_version": EXPORT_FORMAT_VERSION,
    }


@router.get("/health")
async def database_health(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    context: AppContext = Depends(get_context),
):
    try:
        response_time = ping_database(context.engine)
        stats = {
            "users": db.query(User).count(),
            "wardrobes": db.query(Wardrobe).count(),
            "clothing_items": db.query(ClothingItem).count(),
            "outfits": db.query(Outfit).count(),
        }
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}")
        raise DatabaseError("Database health check failed")

    return {
        "success": True,
        "database": {
            "connected": True,
            "status": "healthy",
            "response_time_ms": response_time,
            "stats": stats,
        },
        "timestamp": isoformat(utcnow()),
    }
