"""
User account model.

Accounts are keyed by the identity provider's subject id (``external_id``).
Profile, preferences, subscription and settings are stored as JSON documents.
"""
from sqlalchemy import Boolean, Column, DateTime, JSON, String, Text

from .base import Base, isoformat, new_id, utcnow


def default_profile() -> dict:
    return {
        "age": None,
        "gender": None,
        "stylePreferences": [],
        "bodyType": None,
        "location": None,
        "profilePicture": None,
        "bio": None,
    }


def default_preferences() -> dict:
    return {
        "favoriteColors": [],
        "dislikedColors": [],
        "stylePersonality": None,
        "occasionPreferences": {
            "work": False,
            "casual": True,
            "formal": False,
            "party": False,
            "sport": False,
        },
    }


def default_subscription() -> dict:
    return {"plan": "free", "startDate": None, "endDate": None}


def default_settings() -> dict:
    return {
        "emailNotifications": True,
        "pushNotifications": True,
        "theme": "auto",
        "language": "en",
    }


class User(Base):
    """User model"""
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    external_id = Column(String(128), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    username = Column(String(30), unique=True, nullable=False, index=True)
    display_name = Column(String(50), nullable=True)
    photo_url = Column(Text, nullable=True)
    is_email_verified = Column(Boolean, default=False, nullable=False)
    auth_provider = Column(String(20), default="firebase", nullable=False)
    profile = Column(JSON, default=default_profile, nullable=False)
    preferences = Column(JSON, default=default_preferences, nullable=False)
    subscription = Column(JSON, default=default_subscription, nullable=False)
    settings = Column(JSON, default=default_settings, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False, index=True)
    last_login = Column(DateTime, default=utcnow, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    def to_dict(self):
        """Convert to dictionary"""
        return {
            "id": self.id,
            "externalId": self.external_id,
            "email": self.email,
            "username": self.username,
            "displayName": self.display_name,
            "photoURL": self.photo_url,
            "isEmailVerified": self.is_email_verified,
            "authProvider": self.auth_provider,
            "profile": self.profile,
            "preferences": self.preferences,
            "subscription": self.subscription,
            "settings": self.settings,
            "isActive": self.is_active,
            "lastLogin": isoformat(self.last_login),
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }

    def to_summary(self):
        """Short form returned by the auth endpoints."""
        return {
            "id": self.id,
            "email": self.email,
            "username": self.username,
            "displayName": self.display_name,
            "photoURL": self.photo_url,
            "isEmailVerified": self.is_email_verified,
            "profile": self.profile,
            "preferences": self.preferences,
            "subscription": self.subscription,
        }
