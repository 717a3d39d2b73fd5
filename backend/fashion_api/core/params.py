"""
Shared request parameter types.
"""
from typing import Annotated

from fastapi import Path

UUID_PATTERN = r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"

# Entity identifier in a path; malformed ids are rejected with "Invalid ID format"
EntityId = Annotated[str, Path(pattern=UUID_PATTERN, description="Entity id (UUID)")]
