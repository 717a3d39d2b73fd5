"""
Application factory for the Fashion AI backend.

Run with ``uvicorn fashion_api.main:create_app --factory``.
"""
import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from slowapi.middleware import SlowAPIMiddleware

from fashion_api import __version__
from fashion_api.config import Settings, settings as default_settings
from fashion_api.core.context import AppContext
from fashion_api.core.exceptions import register_exception_handlers
from fashion_api.core.rate_limit import limiter
from fashion_api.database import init_db
from fashion_api.routers import ROUTERS

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(
    settings: Optional[Settings] = None,
    identity_provider=None,
    ai_client=None,
    storage=None,
    weather=None,
) -> FastAPI:
    """Build the API. Collaborators default to the ones described by ``settings``."""
    settings = settings or default_settings
    configure_logging(settings.LOG_LEVEL)

    context = AppContext.build(
        settings,
        identity_provider=identity_provider,
        ai_client=ai_client,
        storage=storage,
        weather=weather,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        init_db(context.engine)
        logger.info(f"Fashion AI backend started ({settings.ENVIRONMENT})")
        yield
        context.close()

    app = FastAPI(
        title="Fashion AI API",
        description="Backend API for the Fashion AI wardrobe and outfit app",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.context = context

    # Rate limiting
    limiter.enabled = settings.RATE_LIMIT_ENABLED
    app.state.limiter = limiter
    app.add_middleware(SlowAPIMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS if not settings.is_development else ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed = (time.perf_counter() - started) * 1000
        client = request.client.host if request.client else "unknown"
        logger.info(f"{request.method} {request.url.path} {response.status_code} - {elapsed:.1f}ms - {client}")
        return response

    register_exception_handlers(app)

    for router in ROUTERS:
        app.include_router(router)

    @app.get("/", include_in_schema=False)
    async def root():
        return {"success": True, "message": "Welcome to Fashion AI API", "version": __version__, "docs": "/docs"}

    return app
