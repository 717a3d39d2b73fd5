"""
Weather lookups (OpenWeatherMap compatible API, metric units) and
temperature/condition based clothing suggestions.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import requests
from starlette.concurrency import run_in_threadpool

logger = logging.getLogger(__name__)

FORECAST_DAYS = 5


class WeatherServiceError(Exception):
    """Weather API call failed."""


def clothing_suggestions(temperature: float, condition: str) -> List[str]:
    """Clothing suggestions for a temperature (Celsius) and condition."""
    if temperature < 10:
        suggestions = ["Heavy coat or jacket", "Warm sweater", "Long pants", "Closed shoes", "Scarf and gloves"]
    elif temperature < 20:
        suggestions = ["Light jacket or cardigan", "Long sleeves", "Jeans or long pants", "Comfortable shoes"]
    elif temperature < 30:
        suggestions = ["Light shirt or blouse", "Light pants or jeans", "Comfortable shoes"]
    else:
        suggestions = ["Lightweight clothing", "Shorts or light dress", "Sandals or breathable shoes", "Sun hat"]

    condition = (condition or "").lower()
    if "rain" in condition:
        suggestions += ["Umbrella", "Waterproof jacket", "Water-resistant shoes"]
    elif "snow" in condition:
        suggestions += ["Waterproof boots", "Insulated clothing", "Hat and gloves"]
    elif "sun" in condition:
        suggestions += ["Sunglasses", "Sun hat", "Light colors"]
    return suggestions


def _current(data: Dict[str, Any]) -> Dict[str, Any]:
    weather = data["weather"][0]
    return {
        "temperature": round(data["main"]["temp"]),
        "condition": weather["main"],
        "humidity": data["main"]["humidity"],
        "windSpeed": data.get("wind", {}).get("speed"),
        "description": weather["description"],
        "icon": weather["icon"],
    }


def _daily(entries: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    # First 3-hour entry of each calendar day
    daily = []
    seen = set()
    for entry in entries:
        day = datetime.fromtimestamp(entry["dt"], tz=timezone.utc).strftime("%a %b %d %Y")
        if day in seen:
            continue
        seen.add(day)
        daily.append({
            "date": day,
            "temperature": {
                "min": round(entry["main"]["temp_min"]),
                "max": round(entry["main"]["temp_max"]),
            },
            "condition": entry["weather"][0]["main"],
            "description": entry["weather"][0]["description"],
        })
    return daily[:FORECAST_DAYS]


class WeatherService:
    def __init__(self, api_key: str, base_url: str, timeout: float = 10, session: Optional[requests.Session] = None):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_settings(cls, settings, session: Optional[requests.Session] = None) -> "WeatherService":
        return cls(
            api_key=settings.WEATHER_API_KEY,
            base_url=settings.WEATHER_API_URL,
            timeout=settings.WEATHER_TIMEOUT_SECONDS,
            session=session,
        )

    def _get(self, path: str, **params) -> Dict[str, Any]:
        if not self.api_key:
            raise WeatherServiceError("Weather API key not configured")
        params.update({"appid": self.api_key, "units": "metric"})
        try:
            response = self.session.get(f"{self.base_url}{path}", params=params, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except (requests.RequestException, ValueError) as e:
            logger.error(f"Weather API error on {path}: {e}")
            raise WeatherServiceError(str(e))

    def _fetch(self, parse, path: str, **params):
        data = self._get(path, **params)
        try:
            return parse(data)
        except (KeyError, IndexError, TypeError) as e:
            logger.error(f"Unexpected weather API payload on {path}: {e}")
            raise WeatherServiceError(f"Unexpected weather API payload: {e}")

    async def current(self, lat: float, lon: float) -> Dict[str, Any]:
        return await run_in_threadpool(self._fetch, _current, "/weather", lat=lat, lon=lon)

    async def forecast(self, lat: float, lon: float) -> List[Dict[str, Any]]:
        return await run_in_threadpool(
            self._fetch, lambda data: _daily(data.get("list", [])), "/forecast", lat=lat, lon=lon
        )

    async def by_city(self, city: str) -> Dict[str, Any]:
        return await run_in_threadpool(self._fetch, _current, "/weather", q=city)

    async def suggestions(self, lat: float, lon: float) -> Dict[str, Any]:
        weather = await self.current(lat, lon)
        return {
            "temperature": weather["temperature"],
            "condition": weather["condition"],
            "suggestions": clothing_suggestions(weather["temperature"], weather["condition"]),
        }

    def close(self) -> None:
        self.session.close()
