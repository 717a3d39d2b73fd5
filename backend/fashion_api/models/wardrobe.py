"""
Wardrobe model.
"""
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, JSON, String

from .base import Base, isoformat, new_id, utcnow


class Wardrobe(Base):
    """Named, user-owned collection of clothing item references"""
    __tablename__ = "wardrobes"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    description = Column(String(500), nullable=True)
    items = Column(JSON, default=list, nullable=False)  # ordered clothing item ids
    is_default = Column(Boolean, default=False, nullable=False)
    visibility = Column(String(10), default="private", nullable=False)
    shared_with = Column(JSON, default=list, nullable=False)  # user ids
    tags = Column(JSON, default=list, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    def can_view(self, user_id: str) -> bool:
        return (
            self.user_id == user_id
            or self.visibility == "public"
            or user_id in (self.shared_with or [])
        )

    def to_dict(self):
        """Convert to dictionary"""
        return {
            "id": self.id,
            "userId": self.user_id,
            "name": self.name,
            "description": self.description,
            "items": list(self.items or []),
            "itemCount": len(self.items or []),
            "isDefault": self.is_default,
            "visibility": self.visibility,
            "sharedWith": list(self.shared_with or []),
            "tags": list(self.tags or []),
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }
