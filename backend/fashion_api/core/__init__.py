"""
Core utilities for the Fashion AI backend.
"""
from .exceptions import (
    FashionAPIException,
    NotFoundError,
    ValidationError,
    DuplicateError,
    AuthenticationError,
    RateLimitError,
    ServiceUnavailableError,
    ExternalServiceError,
    DatabaseError,
    ErrorResponse,
    register_exception_handlers,
)

__all__ = [
    "FashionAPIException",
    "NotFoundError",
    "ValidationError",
    "DuplicateError",
    "AuthenticationError",
    "RateLimitError",
    "ServiceUnavailableError",
    "ExternalServiceError",
    "DatabaseError",
    "ErrorResponse",
    "register_exception_handlers",
]
