"""
AI proxy request bodies. Keys match the AI engine's snake_case API.
"""
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class SimilarityRequest(BaseModel):
    item_id: str
    top_k: int = Field(5, ge=1, le=50)


class CompatibilityRequest(BaseModel):
    item1_id: str
    item2_id: str
    context: str = "general"


class StyleRecommendationRequest(BaseModel):
    base_item_id: Optional[str] = None
    context: Optional[Any] = None
    limit: int = Field(5, ge=1, le=50)


class KnowledgeQueryRequest(BaseModel):
    type: str
    params: Optional[Dict[str, Any]] = None
