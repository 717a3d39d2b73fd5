import logging
from typing import Dict, List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import or_
from sqlalchemy.orm import Session

from fashion_api.core.exceptions import NotFoundError, ValidationError
from fashion_api.core.params import EntityId
from fashion_api.core.security import get_current_user
from fashion_api.database import get_db
from fashion_api.models import ClothingItem, User, Wardrobe
from fashion_api.schemas import ShareWardrobeRequest, WardrobeCreate, WardrobeUpdate
from fashion_api.utils.pagination import paginate, pagination_meta

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/wardrobes", tags=["Wardrobes"])

PREVIEW_ITEMS = 5


def _items_by_id(db: Session, item_ids: List[str]) -> Dict[str, ClothingItem]:
    if not item_ids:
        return {}
    items = db.query(ClothingItem).filter(ClothingItem.id.in_(item_ids)).all()
    return {item.id: item for item in items}


def _preview(item: ClothingItem) -> dict:
    return {
        "id": item.id,
        "imageUrl": item.image_url,
        "category": item.category,
        "attributes": {"colors": (item.attributes or {}).get("colors", [])},
    }


def _get_owned_wardrobe(db: Session, wardrobe_id: str, user_id: str) -> Wardrobe:
    wardrobe = db.query(Wardrobe).filter(
        Wardrobe.id == wardrobe_id, Wardrobe.user_id == user_id
    ).first()
    if not wardrobe:
        raise NotFoundError("Wardrobe", access_denied=True)
    return wardrobe


def _clear_default(db: Session, user_id: str, keep_id: str) -> None:
    db.query(Wardrobe).filter(
        Wardrobe.user_id == user_id,
        Wardrobe.id != keep_id,
        Wardrobe.is_default.is_(True),
    ).update({Wardrobe.is_default: False}, synchronize_session="fetch")


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_wardrobe(
    payload: WardrobeCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Create a wardrobe. A user's first wardrobe is always their default."""
    has_wardrobe = db.query(Wardrobe.id).filter(Wardrobe.user_id == current_user.id).first() is not None

    wardrobe = Wardrobe(
        user_id=current_user.id,
        name=payload.name,
        description=payload.description,
        visibility=payload.visibility,
        tags=payload.tags,
        items=[],
        shared_with=[],
        is_default=payload.is_default or not has_wardrobe,
    )
    db.add(wardrobe)
    db.flush()
    if wardrobe.is_default:
        _clear_default(db, current_user.id, wardrobe.id)
    db.commit()
    db.refresh(wardrobe)
    logger.info(f"Created wardrobe {wardrobe.id} for user {current_user.id}")

    return {
        "success": True,
        "message": "Wardrobe created successfully",
        "data": wardrobe.to_dict(),
    }


@router.get("")
async def list_wardrobes(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    page: int = Query(1, ge=1, description="Page number (1-based)"),
    limit: int = Query(10, ge=1, le=100, description="Wardrobes per page"),
):
    """The caller's wardrobes, default first, each with a preview of its first items."""
    query = (
        db.query(Wardrobe)
        .filter(Wardrobe.user_id == current_user.id)
        .order_by(Wardrobe.is_default.desc(), Wardrobe.created_at.desc())
    )
    wardrobes, pagination = paginate(query, page, limit)

    preview_ids = [item_id for w in wardrobes for item_id in (w.items or [])[:PREVIEW_ITEMS]]
    items = _items_by_id(db, preview_ids)

    data = []
    for wardrobe in wardrobes:
        entry = wardrobe.to_dict()
        entry["preview"] = [
            _preview(items[item_id])
            for item_id in (wardrobe.items or [])[:PREVIEW_ITEMS]
            if item_id in items
        ]
        data.append(entry)

    return {"success": True, "data": {"wardrobes": data, "pagination": pagination}}


# Specific routes must come before /{wardrobe_id}
@router.get("/shared")
async def list_shared_wardrobes(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
):
    """Other users' wardrobes the caller can see (public or shared with them)."""
    candidates = (
        db.query(Wardrobe, User.username)
        .join(User, User.id == Wardrobe.user_id)
        .filter(
            Wardrobe.user_id != current_user.id,
            or_(Wardrobe.visibility == "public", Wardrobe.visibility == "shared"),
        )
        .order_by(Wardrobe.created_at.desc())
        .all()
    )
    visible = [(w, owner) for w, owner in candidates if w.can_view(current_user.id)]

    start = (page - 1) * limit
    wardrobes = []
    for wardrobe, owner in visible[start:start + limit]:
        entry = wardrobe.to_dict()
        entry["owner"] = {"id": wardrobe.user_id, "username": owner}
        wardrobes.append(entry)

    return {
        "success": True,
        "data": {"wardrobes": wardrobes, "pagination": pagination_meta(len(visible), page, limit)},
    }


@router.get("/{wardrobe_id}")
async def get_wardrobe(
    wardrobe_id: EntityId,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    wardrobe = db.query(Wardrobe).filter(Wardrobe.id == wardrobe_id).first()
    if not wardrobe or not wardrobe.can_view(current_user.id):
        raise NotFoundError("Wardrobe", access_denied=True)

    items = _items_by_id(db, wardrobe.items or [])
    data = wardrobe.to_dict()
    data["items"] = [items[item_id].to_dict() for item_id in wardrobe.items or [] if item_id in items]
    return {"success": True, "data": data}


@router.put("/{wardrobe_id}")
async def update_wardrobe(
    wardrobe_id: EntityId,
    payload: WardrobeUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    wardrobe = _get_owned_wardrobe(db, wardrobe_id, current_user.id)

    for field, value in payload.model_dump(exclude_unset=True).items():
        if field == "is_default" and not value and wardrobe.is_default:
            # A user always keeps one default wardrobe
            continue
        setattr(wardrobe, field, value)
    if payload.is_default:
        _clear_default(db, current_user.id, wardrobe.id)

    db.commit()
    db.refresh(wardrobe)
    return {
        "success": True,
        "message": "Wardrobe updated successfully",
        "data": wardrobe.to_dict(),
    }


@router.delete("/{wardrobe_id}")
async def delete_wardrobe(
    wardrobe_id: EntityId,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    wardrobe = _get_owned_wardrobe(db, wardrobe_id, current_user.id)
    if wardrobe.is_default:
        raise ValidationError("Cannot delete default wardrobe")

    db.query(ClothingItem).filter(ClothingItem.wardrobe_id == wardrobe.id).delete(
        synchronize_session=False
    )
    db.delete(wardrobe)
    db.commit()
    logger.info(f"Deleted wardrobe {wardrobe_id} for user {current_user.id}")
    return {"success": True, "message": "Wardrobe deleted successfully"}


@router.post("/{wardrobe_id}/share")
async def share_wardrobe(
    wardrobe_id: EntityId,
    payload: ShareWardrobeRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    target = db.query(User).filter(User.username == payload.username).first()
    if not target:
        raise NotFoundError("User")

    wardrobe = _get_owned_wardrobe(db, wardrobe_id, current_user.id)
    shared_with = list(wardrobe.shared_with or [])
    if target.id not in shared_with:
        shared_with.append(target.id)
    wardrobe.shared_with = shared_with
    wardrobe.visibility = "shared"
    db.commit()

    return {
        "success": True,
        "message": f"Wardrobe shared with {payload.username}",
        "data": {"wardrobeId": wardrobe.id, "sharedWith": shared_with},
    }
