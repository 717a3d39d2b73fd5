"""
Per-IP rate limiting.

One fixed-window counter per route group: a general limit on every request,
plus independent auth, upload and AI limits shared across the routes of each
group. Health checks are exempt.
"""
from slowapi import Limiter
from slowapi.util import get_remote_address

from fashion_api.config import settings

limiter = Limiter(
    key_func=get_remote_address,
    application_limits=[settings.RATE_LIMIT_GENERAL],
    strategy="fixed-window",
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    enabled=settings.RATE_LIMIT_ENABLED,
)

auth_limit = limiter.shared_limit(
    settings.RATE_LIMIT_AUTH,
    scope="auth",
    error_message="Too many authentication attempts, please try again later.",
)

upload_limit = limiter.shared_limit(
    settings.RATE_LIMIT_UPLOAD,
    scope="upload",
    error_message="Too many upload attempts, please try again later.",
)

ai_limit = limiter.shared_limit(
    settings.RATE_LIMIT_AI,
    scope="ai",
    error_message="Too many AI requests, please try again later.",
)
