"""
Application context: every long-lived resource the handlers use.

Built once by ``create_app``, stored on ``app.state.context`` and closed on
shutdown. Handlers reach its parts through the dependencies below.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Request
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from fashion_api.config import Settings
from fashion_api.database import create_db_engine, create_session_factory
from fashion_api.services.ai_client import AIClient
from fashion_api.services.identity import IdentityProvider
from fashion_api.services.outfit_orchestrator import OutfitOrchestrator
from fashion_api.services.storage import ImageStorage
from fashion_api.services.weather import WeatherService

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    settings: Settings
    engine: Engine
    session_factory: sessionmaker
    identity_provider: IdentityProvider
    ai_client: AIClient
    storage: ImageStorage
    weather: WeatherService
    orchestrator: OutfitOrchestrator

    @classmethod
    def build(
        cls,
        settings: Settings,
        identity_provider: Optional[IdentityProvider] = None,
        ai_client: Optional[AIClient] = None,
        storage: Optional[ImageStorage] = None,
        weather: Optional[WeatherService] = None,
    ) -> "AppContext":
        engine = create_db_engine(settings.DATABASE_URL)
        ai_client = ai_client or AIClient.from_settings(settings)
        return cls(
            settings=settings,
            engine=engine,
            session_factory=create_session_factory(engine),
            identity_provider=identity_provider or IdentityProvider.from_settings(settings),
            ai_client=ai_client,
            storage=storage or ImageStorage(settings),
            weather=weather or WeatherService.from_settings(settings),
            orchestrator=OutfitOrchestrator(ai_client),
        )

    def close(self) -> None:
        self.ai_client.close()
        self.identity_provider.close()
        self.weather.close()
        self.engine.dispose()
        logger.info("Application context closed")


def get_context(request: Request) -> AppContext:
    return request.app.state.context


def get_settings(request: Request) -> Settings:
    return get_context(request).settings


def get_ai_client(request: Request) -> AIClient:
    return get_context(request).ai_client


def get_identity_provider(request: Request) -> IdentityProvider:
    return get_context(request).identity_provider


def get_storage(request: Request) -> ImageStorage:
    return get_context(request).storage


def get_weather(request: Request) -> WeatherService:
    return get_context(request).weather


def get_orchestrator(request: Request) -> OutfitOrchestrator:
    return get_context(request).orchestrator
