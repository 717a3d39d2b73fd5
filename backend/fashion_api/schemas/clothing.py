"""
Clothing item schemas.

Item creation is a multipart form (see the clothing router); these cover the
JSON endpoints.
"""
from datetime import date
from typing import Any, Dict, List, Literal, Optional

from pydantic import Field, field_validator

from .common import CamelModel, reject_null

Category = Literal[
    "shirts_blouses",
    "tshirts_tops",
    "dresses",
    "pants_jeans",
    "shorts",
    "skirts",
    "jackets_coats",
    "sweaters",
    "shoes_sneakers",
    "shoes_formal",
    "bags_accessories",
]


class UserMetadataUpdate(CamelModel):
    user_tags: Optional[List[str]] = None
    is_favorite: Optional[bool] = None
    times_worn: Optional[int] = Field(None, ge=0)
    last_worn: Optional[date] = None
    notes: Optional[str] = Field(None, max_length=500)
    price: Optional[float] = Field(None, ge=0)
    purchase_date: Optional[date] = None


class ClothingItemChanges(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    brand: Optional[str] = Field(None, max_length=100)
    color: Optional[str] = Field(None, min_length=1, max_length=50)
    category: Optional[Category] = None
    attributes: Optional[Dict[str, Any]] = None
    user_metadata: Optional[UserMetadataUpdate] = None

    @field_validator("name", "color", "category")
    @classmethod
    def required_fields_not_null(cls, v):
        return reject_null(v)


class ClothingItemUpdate(ClothingItemChanges):
    wardrobe_id: Optional[str] = None
    tags: Optional[List[str]] = None


class BulkUpdateRequest(CamelModel):
    item_ids: List[str] = Field(..., min_length=1)
    updates: ClothingItemChanges


class FavoriteUpdate(CamelModel):
    is_favorite: bool
