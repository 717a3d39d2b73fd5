"""
Weather request schemas.
"""
from typing import Optional

from pydantic import BaseModel, Field


class WeatherRecommendationRequest(BaseModel):
    # Presence is checked by the handler so the error names both fields
    lat: Optional[float] = Field(None, ge=-90, le=90)
    lon: Optional[float] = Field(None, ge=-180, le=180)
