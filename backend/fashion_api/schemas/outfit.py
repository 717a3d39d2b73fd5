"""
Outfit, outfit generation and recommendation schemas.
"""
from typing import Any, Dict, List, Literal, Optional

from pydantic import Field, field_validator

from .common import CamelModel, reject_null

Occasion = Literal["work", "casual", "formal", "party", "date", "sport", "travel"]
Season = Literal["spring", "summer", "fall", "winter"]


class GenerateOutfitsRequest(CamelModel):
    """Outfit generation request; keys follow the AI engine's snake_case naming"""
    occasion: Occasion
    season: Optional[Season] = None
    weather_context: Optional[Dict[str, Any]] = Field(None, alias="weather_context")
    items: List[str] = Field(default_factory=list)
    count: Optional[int] = Field(None, ge=1, le=10)


class OutfitCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    items: List[str] = Field(..., min_length=1)
    occasion: Optional[Occasion] = None
    tags: List[str] = Field(default_factory=list)
    is_public: bool = False


class OutfitUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    items: Optional[List[str]] = None
    occasion: Optional[Occasion] = None
    tags: Optional[List[str]] = None
    is_public: Optional[bool] = None
    times_worn: Optional[int] = Field(None, ge=0)

    @field_validator("name", "items", "tags", "is_public", "times_worn")
    @classmethod
    def required_fields_not_null(cls, v):
        return reject_null(v)


class RateOutfitRequest(CamelModel):
    rating: float

    @field_validator("rating")
    @classmethod
    def validate_rating_range(cls, v: float) -> float:
        if v < 1 or v > 5:
            raise ValueError("Rating must be between 1 and 5")
        return v


class RecommendationCreate(CamelModel):
    occasion: Occasion
    season: Optional[Season] = None
    weather_context: Optional[Dict[str, Any]] = None
    items: List[str] = Field(..., min_length=1)
    compatibility_score: float = Field(..., ge=0, le=1)
    ai_reasoning: Optional[str] = Field(None, max_length=2000)
    recommendation_source: Literal["ai", "user", "stylist"] = "ai"
    metadata: Dict[str, Any] = Field(default_factory=dict)


class RecommendationFeedback(CamelModel):
    liked: Optional[bool] = None
    rating: Optional[int] = Field(None, ge=1, le=5)
    worn: Optional[bool] = None
    comments: Optional[str] = Field(None, max_length=500)
