"""
Shared declarative base and column helpers for the ORM models.
"""
import uuid
from datetime import datetime, timezone

from fashion_api.database import Base


def new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    """Naive UTC timestamp, the form stored in DateTime columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def isoformat(value):
    if value is None:
        return None
    return value.isoformat() + "Z"


__all__ = ["Base", "new_id", "utcnow", "isoformat"]
