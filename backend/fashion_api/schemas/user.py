"""
User-related schemas for registration, profile and settings.
"""
from typing import List, Literal, Optional

from pydantic import EmailStr, Field, field_validator

from .common import CamelModel, reject_null

USERNAME_PATTERN = r"^[a-zA-Z0-9_]+$"

Gender = Literal["male", "female", "non-binary", "prefer-not-to-say"]
StylePersonality = Literal[
    "classic", "trendy", "casual", "formal", "bohemian", "minimalist", "edgy", "romantic"
]


class RegisterRequest(CamelModel):
    """Schema for registering an identity-provider account"""
    email: EmailStr = Field(..., description="User email address")
    username: str = Field(..., min_length=3, max_length=30, pattern=USERNAME_PATTERN)
    external_id: str = Field(..., min_length=1, description="Identity provider subject id")
    display_name: Optional[str] = Field(None, min_length=2, max_length=50)


class SyncRequest(CamelModel):
    """Optional hints used when the first sync creates the account"""
    username: Optional[str] = Field(None, min_length=3, max_length=30, pattern=USERNAME_PATTERN)
    display_name: Optional[str] = Field(None, min_length=2, max_length=50)


class OccasionPreferences(CamelModel):
    work: Optional[bool] = None
    casual: Optional[bool] = None
    formal: Optional[bool] = None
    party: Optional[bool] = None
    sport: Optional[bool] = None


class ProfileFields(CamelModel):
    age: Optional[int] = Field(None, ge=13, le=120)
    gender: Optional[Gender] = None
    style_preferences: Optional[List[str]] = None
    body_type: Optional[str] = Field(None, max_length=50)
    location: Optional[str] = Field(None, max_length=100)
    bio: Optional[str] = Field(None, max_length=500)
    profile_picture: Optional[str] = None


class PreferenceFields(CamelModel):
    favorite_colors: Optional[List[str]] = None
    disliked_colors: Optional[List[str]] = None
    style_personality: Optional[StylePersonality] = None
    occasion_preferences: Optional[OccasionPreferences] = None


class UserProfileUpdate(CamelModel):
    """Partial profile update; identity fields (email, externalId) are not editable"""
    username: Optional[str] = Field(None, min_length=3, max_length=30, pattern=USERNAME_PATTERN)
    display_name: Optional[str] = Field(None, min_length=2, max_length=50)
    photo_url: Optional[str] = Field(None, alias="photoURL")
    profile: Optional[ProfileFields] = None
    preferences: Optional[PreferenceFields] = None

    @field_validator("username")
    @classmethod
    def username_not_null(cls, v):
        return reject_null(v)


class UserSettingsUpdate(CamelModel):
    email_notifications: Optional[bool] = None
    push_notifications: Optional[bool] = None
    theme: Optional[Literal["light", "dark", "auto"]] = None
    language: Optional[str] = Field(None, min_length=2, max_length=5)
