import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, Request, status
from sqlalchemy import or_
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from fashion_api.core.context import get_identity_provider
from fashion_api.core.exceptions import ValidationError
from fashion_api.core.rate_limit import auth_limit
from fashion_api.core.security import get_current_user, get_token_claims
from fashion_api.database import get_db
from fashion_api.models import User
from fashion_api.models.base import utcnow
from fashion_api.schemas import RegisterRequest, SyncRequest, UserProfileUpdate
from fashion_api.services.accounts import apply_profile_update, default_username
from fashion_api.services.identity import IdentityProvider, IdentityProviderError, TokenClaims

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/auth",
    tags=["Authentication"],
    responses={
        401: {"description": "Not authenticated - invalid or missing credentials"},
        429: {"description": "Too many requests - rate limit exceeded"},
    }
)


@router.post("/register", status_code=status.HTTP_201_CREATED)
@auth_limit
async def register(
    request: Request,
    payload: RegisterRequest,
    db: Session = Depends(get_db),
    provider: IdentityProvider = Depends(get_identity_provider),
):
    try:
        provider_user = await run_in_threadpool(provider.get_user, payload.external_id)
    except IdentityProviderError as e:
        raise ValidationError("Invalid identity provider user", errors=[{"field": "externalId", "message": str(e)}])

    existing = db.query(User).filter(
        or_(
            User.external_id == payload.external_id,
            User.email == payload.email,
            User.username == payload.username,
        )
    ).first()
    if existing:
        raise ValidationError("User already exists")

    user = User(
        external_id=payload.external_id,
        email=payload.email,
        username=payload.username,
        display_name=payload.display_name or provider_user.display_name,
        photo_url=provider_user.photo_url,
        is_email_verified=provider_user.email_verified,
        auth_provider="firebase",
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"Registered user {user.id} ({user.username})")

    return {
        "success": True,
        "message": "User registered successfully",
        "data": {"user": user.to_dict()},
    }


@router.post("/sync")
@auth_limit
async def sync_user(
    request: Request,
    payload: Optional[SyncRequest] = Body(None),
    claims: TokenClaims = Depends(get_token_claims),
    db: Session = Depends(get_db),
):
    """Create the local account on first sign-in, otherwise refresh it from the token claims."""
    payload = payload or SyncRequest()
    user = db.query(User).filter(User.external_id == claims.uid).first()

    if user is None:
        if not claims.email:
            raise ValidationError("Token has no email claim")
        user = User(
            external_id=claims.uid,
            email=claims.email,
            username=payload.username or default_username(claims),
            display_name=claims.name or payload.display_name,
            photo_url=claims.picture,
            is_email_verified=claims.email_verified,
            auth_provider="firebase",
        )
        db.add(user)
        logger.info(f"Created user for external id {claims.uid}")
    else:
        user.email = claims.email or user.email
        user.display_name = claims.name or user.display_name
        user.photo_url = claims.picture or user.photo_url
        user.is_email_verified = claims.email_verified or user.is_email_verified
        user.last_login = utcnow()

    db.commit()
    db.refresh(user)
    return {
        "success": True,
        "message": "User synced successfully",
        "data": {"user": user.to_dict()},
    }


@router.get("/validate")
@auth_limit
async def validate_token(
    request: Request,
    claims: TokenClaims = Depends(get_token_claims),
    current_user: User = Depends(get_current_user),
):
    return {
        "success": True,
        "message": "Token is valid",
        "data": {"identity": claims.to_dict(), "userId": current_user.id},
    }


@router.get("/me")
@auth_limit
async def read_current_user(request: Request, current_user: User = Depends(get_current_user)):
    return {"success": True, "data": {"user": current_user.to_dict()}}


@router.put("/profile")
@auth_limit
async def update_profile(
    request: Request,
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
        "data": {"user": current_user.to_dict()},
    }


@router.delete("/account")
@auth_limit
async def delete_account(
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Deactivate the account; records are kept."""
    current_user.is_active = False
    db.commit()
    logger.info(f"Deactivated user {current_user.id}")
    return {"success": True, "message": "Account deleted successfully"}
