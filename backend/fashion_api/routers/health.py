"""
Health checks. Public and exempt from rate limiting.
"""
import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from fashion_api import __version__
from fashion_api.core.context import AppContext, get_context
from fashion_api.core.rate_limit import limiter
from fashion_api.database import ping_database
from fashion_api.models.base import isoformat, utcnow
from fashion_api.schemas import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["Health"])


@router.get("", response_model=HealthResponse)
@router.head("", include_in_schema=False)
@limiter.exempt
async def health_check(request: Request, context: AppContext = Depends(get_context)):
    """Liveness only; answers without touching the database."""
    return HealthResponse(
        success=True,
        message="Fashion AI Backend is running",
        timestamp=isoformat(utcnow()),
        version=__version__,
        environment=context.settings.ENVIRONMENT,
    )


@router.get("/database")
@limiter.exempt
async def database_health(request: Request, context: AppContext = Depends(get_context)):
    timestamp = isoformat(utcnow())
    try:
        response_time = ping_database(context.engine)
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "success": False,
                "database": {"connected": False, "status": "error", "error": str(e.__class__.__name__)},
                "timestamp": timestamp,
            },
        )

    return {
        "success": True,
        "database": {
            "connected": True,
            "status": "healthy",
            "dialect": context.engine.dialect.name,
            "response_time_ms": response_time,
        },
        "timestamp": timestamp,
    }


@router.get("/identity")
@limiter.exempt
async def identity_health(request: Request, context: AppContext = Depends(get_context)):
    provider = context.identity_provider.ping()
    return {
        "success": True,
        "identity": {"status": "healthy" if context.identity_provider.configured else "degraded", **provider},
        "timestamp": isoformat(utcnow()),
    }


@router.get("/ai")
@limiter.exempt
async def ai_health(request: Request, context: AppContext = Depends(get_context)):
    reachable = await context.ai_client.health_check()
    return {
        "success": True,
        "ai": {"reachable": reachable, "url": context.ai_client.base_url},
        "timestamp": isoformat(utcnow()),
    }


@router.get("/storage")
@limiter.exempt
async def storage_health(request: Request, context: AppContext = Depends(get_context)):
    return {"success": True, "storage": context.storage.status(), "timestamp": isoformat(utcnow())}
