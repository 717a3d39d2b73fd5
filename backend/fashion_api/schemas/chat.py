"""
Chat session schemas.
"""
from typing import Literal, Optional

from pydantic import Field

from .common import CamelModel

SessionType = Literal["general", "style_advice", "outfit_help"]


class ChatSessionCreate(CamelModel):
    session_type: SessionType = "general"
    title: Optional[str] = Field(None, min_length=1, max_length=100)


class ChatMessageCreate(CamelModel):
    content: str = Field(..., min_length=1, max_length=1000)
    session_type: Optional[SessionType] = None
