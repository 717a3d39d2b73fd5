import logging

from fastapi import APIRouter, Depends, File, Request, UploadFile
from sqlalchemy import func
from sqlalchemy.orm import Session

from fashion_api.config import Settings
from fashion_api.core.context import get_settings, get_storage
from fashion_api.core.rate_limit import upload_limit
from fashion_api.core.security import get_current_user
from fashion_api.database import get_db
from fashion_api.models import ClothingItem, User, Wardrobe
from fashion_api.models.base import utcnow
from fashion_api.schemas import UserProfileUpdate, UserSettingsUpdate
from fashion_api.services.accounts import apply_profile_update, apply_settings_update
from fashion_api.services.storage import ImageStorage
from fashion_api.utils.documents import merge_document
from fashion_api.utils.uploads import read_image

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.get("/profile")
async def get_profile(current_user: User = Depends(get_current_user)):
    return {"success": True, "data": current_user.to_dict()}


@router.put("/profile")
async def update_profile(
    payload: UserProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    apply_profile_update(current_user, payload)
    db.commit()
    db.refresh(current_user)
    return {
        "success": True,
        "message": "Profile updated successfully",
        "data": current_user.to_dict(),
    }


@router.delete("/profile")
async def deactivate_account(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    current_user.is_active = False
    db.commit()
    logger.info(f"Deactivated user {current_user.id}")
    return {"success": True, "message": "Account deactivated successfully"}


@router.post("/profile/picture")
@upload_limit
async def upload_profile_picture(
    request: Request,
    picture: UploadFile = File(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    storage: ImageStorage = Depends(get_storage),
    settings: Settings = Depends(get_settings),
):
    """Store a new profile picture and point the profile at it."""
    image = await read_image(picture, settings.MAX_PROFILE_PICTURE_SIZE)
    uploaded = await storage.upload_image(
        image.content,
        image.content_type,
        folder=settings.PROFILE_PICTURE_FOLDER,
        tags=["profile-picture", current_user.id],
    )

    current_user.profile = merge_document(current_user.profile, {"profilePicture": uploaded["url"]})
    current_user.last_login = utcnow()
    db.commit()
    db.refresh(current_user)
    return {
        "success": True,
        "message": "Profile picture uploaded successfully",
        "data": {"profilePicture": uploaded["url"], "user": current_user.to_dict()},
    }


def _settings_view(user: User) -> dict:
    return {
        "settings": user.settings,
        "preferences": user.preferences,
        "subscription": user.subscription,
    }


@router.get("/settings")
async def get_user_settings(current_user: User = Depends(get_current_user)):
    return {"success": True, "data": _settings_view(current_user)}


@router.put("/settings")
async def update_user_settings(
    payload: UserSettingsUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    apply_settings_update(current_user, payload)
    db.commit()
    db.refresh(current_user)
    return {
        "success": True,
        "message": "Settings updated successfully",
        "data": _settings_view(current_user),
    }


@router.get("/stats")
async def get_user_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Wardrobe and item counts; ``accountAge`` is in milliseconds."""
    total_wardrobes = db.query(Wardrobe).filter(Wardrobe.user_id == current_user.id).count()
    rows = (
        db.query(ClothingItem.category, func.count(ClothingItem.id))
        .filter(ClothingItem.user_id == current_user.id)
        .group_by(ClothingItem.category)
        .all()
    )
    category_stats = {category: count for category, count in rows}
    account_age = utcnow() - current_user.created_at

    return {
        "success": True,
        "data": {
            "totalWardrobes": total_wardrobes,
            "totalItems": sum(category_stats.values()),
            "categoryStats": category_stats,
            "accountAge": int(account_age.total_seconds() * 1000),
        },
    }
