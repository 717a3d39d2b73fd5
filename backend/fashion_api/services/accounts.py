"""
Account helpers shared by the auth and users routers.
"""
from fashion_api.models import User
from fashion_api.schemas import UserProfileUpdate, UserSettingsUpdate
from fashion_api.services.identity import TokenClaims
from fashion_api.utils.documents import merge_document


def default_username(claims: TokenClaims) -> str:
    if claims.email:
        return claims.email.split("@")[0]
    return f"user_{claims.uid[:8]}"


def apply_profile_update(user: User, payload: UserProfileUpdate) -> None:
    """Apply a partial profile update to ``user``."""
    changes = payload.changes()
    if "username" in changes:
        user.username = changes["username"]
    if "displayName" in changes:
        user.display_name = changes["displayName"]
    if "photoURL" in changes:
        user.photo_url = changes["photoURL"]
    if changes.get("profile"):
        user.profile = merge_document(user.profile, changes["profile"])
    if changes.get("preferences"):
        user.preferences = merge_document(user.preferences, changes["preferences"])


def apply_settings_update(user: User, payload: UserSettingsUpdate) -> None:
    user.settings = merge_document(user.settings, payload.changes())
