"""
Wardrobe schemas.
"""
from typing import List, Literal, Optional

from pydantic import Field, field_validator

from .common import CamelModel, reject_null

Visibility = Literal["private", "public", "shared"]


class WardrobeCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    is_default: bool = False
    visibility: Visibility = "private"
    tags: List[str] = Field(default_factory=list)


class WardrobeUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    is_default: Optional[bool] = None
    visibility: Optional[Visibility] = None
    tags: Optional[List[str]] = None

    @field_validator("name", "is_default", "visibility", "tags")
    @classmethod
    def required_fields_not_null(cls, v):
        return reject_null(v)


class ShareWardrobeRequest(CamelModel):
    username: str = Field(..., min_length=3, max_length=30)
