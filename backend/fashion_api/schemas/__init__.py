"""
Pydantic schemas for the Fashion AI API.

Import all schemas here for easy access.
"""
from .common import CamelModel, HealthResponse
from .user import RegisterRequest, SyncRequest, UserProfileUpdate, UserSettingsUpdate
from .wardrobe import WardrobeCreate, WardrobeUpdate, ShareWardrobeRequest
from .clothing import ClothingItemUpdate, BulkUpdateRequest, FavoriteUpdate, Category
from .outfit import (
    GenerateOutfitsRequest,
    OutfitCreate,
    OutfitUpdate,
    RateOutfitRequest,
    RecommendationCreate,
    RecommendationFeedback,
)
from .chat import ChatSessionCreate, ChatMessageCreate
from .ai import SimilarityRequest, CompatibilityRequest, StyleRecommendationRequest, KnowledgeQueryRequest
from .weather import WeatherRecommendationRequest

__all__ = [
    # Common
    "CamelModel",
    "HealthResponse",
    # User
    "RegisterRequest",
    "SyncRequest",
    "UserProfileUpdate",
    "UserSettingsUpdate",
    # Wardrobe
    "WardrobeCreate",
    "WardrobeUpdate",
    "ShareWardrobeRequest",
    # Clothing
    "ClothingItemUpdate",
    "BulkUpdateRequest",
    "FavoriteUpdate",
    "Category",
    # Outfit
    "GenerateOutfitsRequest",
    "OutfitCreate",
    "OutfitUpdate",
    "RateOutfitRequest",
    "RecommendationCreate",
    "RecommendationFeedback",
    # Chat
    "ChatSessionCreate",
    "ChatMessageCreate",
    # AI proxy
    "SimilarityRequest",
    "CompatibilityRequest",
    "StyleRecommendationRequest",
    "KnowledgeQueryRequest",
    # Weather
    "WeatherRecommendationRequest",
]
