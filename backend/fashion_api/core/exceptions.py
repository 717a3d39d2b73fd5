"""
Centralized exception handling for the Fashion AI backend.
Provides the ``{success: false, message, ...}`` error envelope across all endpoints.
"""
import logging
import re
import traceback
from typing import Any, Dict, List, Optional

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


# =============================================================================
# Custom Exception Classes
# =============================================================================

class FashionAPIException(Exception):
    """Base exception for application errors."""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_code: Optional[str] = None,
        details: Any = None,
        error: Optional[str] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code or "INTERNAL_ERROR"
        self.details = details
        self.error = error
        super().__init__(message)


class NotFoundError(FashionAPIException):
    """Resource not found, or owned by someone else."""

    def __init__(self, resource: str, access_denied: bool = False):
        suffix = " or access denied" if access_denied else ""
        super().__init__(
            message=f"{resource} not found{suffix}",
            status_code=status.HTTP_404_NOT_FOUND,
            error_code="NOT_FOUND",
        )


class ValidationError(FashionAPIException):
    """Input validation failed."""

    def __init__(self, message: str, errors: Optional[List[Dict[str, str]]] = None):
        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code="VALIDATION_ERROR",
        )
        self.errors = errors


class DuplicateError(FashionAPIException):
    """Unique constraint violated."""

    def __init__(self, field: Optional[str] = None):
        message = f"{field} already exists" if field else "Resource already exists"
        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code="DUPLICATE_ERROR",
        )


class AuthenticationError(FashionAPIException):
    """Authentication failed."""

    def __init__(self, message: str = "Authentication required", error: Optional[str] = None):
        super().__init__(
            message=message,
            status_code=status.HTTP_401_UNAUTHORIZED,
            error_code="AUTHENTICATION_ERROR",
            error=error,
        )


class RateLimitError(FashionAPIException):
    """Rate limit exceeded."""

    def __init__(self, message: str = "Too many requests from this IP, please try again later."):
        super().__init__(
            message=message,
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            error_code="RATE_LIMIT_ERROR",
        )


class ServiceUnavailableError(FashionAPIException):
    """Upstream service is unreachable."""

    def __init__(self, message: str, error: Optional[str] = None):
        super().__init__(
            message=message,
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            error_code="SERVICE_UNAVAILABLE",
            error=error,
        )


class ExternalServiceError(FashionAPIException):
    """External service (AI engine, object storage, weather) failed."""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        error: Optional[str] = None,
        details: Any = None,
    ):
        super().__init__(
            message=message,
            status_code=status_code,
            error_code="EXTERNAL_SERVICE_ERROR",
            details=details,
            error=error,
        )


class DatabaseError(FashionAPIException):
    """Database operation failed."""

    def __init__(self, message: str = "Database operation failed"):
        super().__init__(
            message=message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error_code="DATABASE_ERROR",
        )


# =============================================================================
# Error Response Model
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response format."""
    success: bool = False
    message: str
    error: Optional[str] = None
    errors: Optional[List[Dict[str, str]]] = None
    details: Any = None


def _error_response(status_code: int, **content) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(**content).model_dump(exclude_none=True),
    )


# =============================================================================
# Exception Handlers for FastAPI
# =============================================================================

async def fashion_api_exception_handler(request: Request, exc: FashionAPIException) -> JSONResponse:
    """Handle application exceptions."""
    log = logger.error if exc.status_code >= 500 else logger.info
    log(f"{exc.error_code} on {request.method} {request.url.path}: {exc.message}")

    return _error_response(
        exc.status_code,
        message=exc.message,
        error=exc.error,
        errors=getattr(exc, "errors", None),
        details=exc.details,
    )


def _field_name(loc) -> str:
    # Drop the "body"/"query"/"path"/"form" prefix FastAPI adds
    parts = [str(p) for p in loc]
    if len(parts) > 1 and parts[0] in ("body", "query", "path", "form", "header"):
        parts = parts[1:]
    return ".".join(parts)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Return every field-level failure with a 400."""
    errors = []
    for err in exc.errors():
        loc = err.get("loc", ())
        message = err.get("msg", "Invalid value")
        if loc and loc[0] == "path" and err.get("type") == "string_pattern_mismatch":
            message = "Invalid ID format"
        errors.append({"field": _field_name(loc), "message": message})
    return _error_response(
        status.HTTP_400_BAD_REQUEST,
        message="Validation failed",
        errors=errors,
    )


_UNIQUE_FIELD_PATTERNS = (
    re.compile(r"UNIQUE constraint failed: \w+\.(\w+)"),  # sqlite
    re.compile(r"duplicate key value violates unique constraint.*?Key \((\w+)\)=\(", re.DOTALL),  # postgresql
)

_FIELD_LABELS = {"external_id": "externalId"}


def _duplicate_field(text: str) -> Optional[str]:
    for pattern in _UNIQUE_FIELD_PATTERNS:
        match = pattern.search(text)
        if match:
            return _FIELD_LABELS.get(match.group(1), match.group(1))
    return None


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    """Unique constraint violations become a 400 naming the field; any other integrity error is a 500."""
    text = str(exc.orig) if exc.orig is not None else str(exc)
    field = _duplicate_field(text)
    if field is None:
        logger.error(f"Integrity error on {request.method} {request.url.path}: {text}")
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, message="Internal Server Error")

    logger.warning(f"Duplicate {field} on {request.method} {request.url.path}")
    return _error_response(status.HTTP_400_BAD_REQUEST, message=DuplicateError(field).message)


async def rate_limit_exception_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Use the limit group's message rather than the raw limit string."""
    limit = getattr(exc, "limit", None)
    message = getattr(limit, "error_message", None) or RateLimitError().message
    logger.warning(f"Rate limit exceeded for {request.client.host if request.client else 'unknown'} on {request.url.path}")
    return _error_response(status.HTTP_429_TOO_MANY_REQUESTS, message=message)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle framework HTTP errors with the same envelope."""
    if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
        message = f"Route {request.method} {request.url.path} not found"
    else:
        message = str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(message=message).model_dump(exclude_none=True),
        headers=getattr(exc, "headers", None),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions with logging."""
    # Log the full traceback for debugging
    logger.error(
        f"Unhandled exception: {type(exc).__name__}: {str(exc)}",
        exc_info=True,
        extra={"path": request.url.path, "method": request.method},
    )

    # In production, don't expose internal error details
    is_dev = request.app.state.context.settings.is_development

    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        message="Internal Server Error",
        error=str(exc) if is_dev else None,
        details={"traceback": traceback.format_exc()} if is_dev else None,
    )


def register_exception_handlers(app) -> None:
    app.add_exception_handler(FashionAPIException, fashion_api_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
