"""
Bearer token authentication dependencies.
"""
import logging

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from fashion_api.core.context import get_identity_provider
from fashion_api.core.exceptions import AuthenticationError
from fashion_api.database import get_db
from fashion_api.models import User
from fashion_api.models.base import utcnow
from fashion_api.services.identity import IdentityProvider, TokenClaims, TokenVerificationError

logger = logging.getLogger(__name__)


def bearer_token(request: Request) -> str:
    header = request.headers.get("Authorization", "")
    if not header.startswith("Bearer ") or not header[7:].strip():
        raise AuthenticationError("No valid authorization token provided")
    return header[7:].strip()


def get_token_claims(
    request: Request,
    provider: IdentityProvider = Depends(get_identity_provider),
) -> TokenClaims:
    """Verify the bearer token without requiring a local account."""
    token = bearer_token(request)
    try:
        return provider.verify_token(token)
    except TokenVerificationError as e:
        logger.info(f"Token verification failed ({e.reason}) on {request.url.path}")
        raise AuthenticationError(e.message)


def get_current_user(
    claims: TokenClaims = Depends(get_token_claims),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the bearer token to an active local account and record the login."""
    user = db.query(User).filter(User.external_id == claims.uid).first()
    if not user or not user.is_active:
        raise AuthenticationError("User not found or inactive. Please complete registration.")

    user.last_login = utcnow()
    db.commit()
    return user
