"""
Common/shared schemas used across the application.
"""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Request body with camelCase keys on the wire; snake_case names are accepted too."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def changes(self) -> dict:
        """Fields the client actually sent, keyed by their camelCase names."""
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


class HealthResponse(BaseModel):
    """Health check response"""
    success: bool
    message: str
    timestamp: str
    version: str
    environment: str


def reject_null(value):
    """Partial updates may omit a field but not clear a required one."""
    if value is None:
        raise ValueError("Field cannot be null")
    return value
