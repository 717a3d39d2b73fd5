"""
Database models for the Fashion AI backend.

Import all models here for easy access and to ensure they are registered with SQLAlchemy.
"""
from .base import Base
from .user import User
from .wardrobe import Wardrobe
from .clothing import ClothingItem, CATEGORIES
from .outfit import Outfit, OCCASIONS
from .recommendation import OutfitRecommendation
from .chat import ChatSession, SESSION_TYPES

__all__ = [
    "Base",
    "User",
    "Wardrobe",
    "ClothingItem",
    "CATEGORIES",
    "Outfit",
    "OCCASIONS",
    "OutfitRecommendation",
    "ChatSession",
    "SESSION_TYPES",
]
