"""
Public weather endpoints.
"""
import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query

from fashion_api.core.context import get_weather
from fashion_api.core.exceptions import ExternalServiceError, ValidationError
from fashion_api.models.base import isoformat, utcnow
from fashion_api.schemas import WeatherRecommendationRequest
from fashion_api.services.weather import WeatherService, WeatherServiceError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/weather", tags=["Weather"])

Latitude = Annotated[Optional[float], Query(ge=-90, le=90)]
Longitude = Annotated[Optional[float], Query(ge=-180, le=180)]


def _require_coordinates(lat: Optional[float], lon: Optional[float]) -> None:
    if lat is None or lon is None:
        raise ValidationError("Latitude and longitude are required")


def _envelope(data) -> dict:
    return {"success": True, "data": data, "timestamp": isoformat(utcnow())}


@router.get("/current")
async def current_weather(
    lat: Latitude = None,
    lon: Longitude = None,
    weather: WeatherService = Depends(get_weather),
):
    _require_coordinates(lat, lon)
    try:
        return _envelope(await weather.current(lat, lon))
    except WeatherServiceError:
        raise ExternalServiceError("Failed to get current weather")


@router.get("/forecast")
async def weather_forecast(
    lat: Latitude = None,
    lon: Longitude = None,
    weather: WeatherService = Depends(get_weather),
):
    _require_coordinates(lat, lon)
    try:
        return _envelope(await weather.forecast(lat, lon))
    except WeatherServiceError:
        raise ExternalServiceError("Failed to get weather forecast")


@router.get("/city")
async def weather_by_city(
    city: Optional[str] = Query(None, min_length=1, max_length=100),
    weather: WeatherService = Depends(get_weather),
):
    if not city:
        raise ValidationError("City name is required as query parameter")
    try:
        return _envelope(await weather.by_city(city))
    except WeatherServiceError:
        raise ExternalServiceError("Failed to get weather for city")


@router.post("/recommendations")
async def weather_recommendations(
    payload: WeatherRecommendationRequest,
    weather: WeatherService = Depends(get_weather),
):
    """Clothing suggestions for the current weather at a location."""
    _require_coordinates(payload.lat, payload.lon)
    try:
        return _envelope(await weather.suggestions(payload.lat, payload.lon))
    except WeatherServiceError:
        raise ExternalServiceError("Failed to get weather-based recommendations")
