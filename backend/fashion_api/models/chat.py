"""
Chat session model.
"""
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, JSON, String

from .base import Base, isoformat, new_id, utcnow

SESSION_TYPES = ("general", "style_advice", "outfit_help")


class ChatSession(Base):
    """Ordered list of role-tagged messages"""
    __tablename__ = "chat_sessions"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    session_type = Column(String(20), default="general", nullable=False)
    title = Column(String(100), nullable=False)
    messages = Column(JSON, default=list, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    last_message_at = Column(DateTime, default=utcnow, nullable=False, index=True)

    def to_summary(self):
        """Listing form without the message bodies"""
        return {
            "id": self.id,
            "sessionType": self.session_type,
            "title": self.title,
            "messageCount": len(self.messages or []),
            "isActive": self.is_active,
            "createdAt": isoformat(self.created_at),
            "lastMessageAt": isoformat(self.last_message_at),
        }

    def to_dict(self):
        """Convert to dictionary"""
        data = self.to_summary()
        data.pop("messageCount")
        data["userId"] = self.user_id
        data["messages"] = list(self.messages or [])
        return data
