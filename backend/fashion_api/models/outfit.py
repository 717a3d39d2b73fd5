"""
Saved outfit model.
"""
from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Integer, JSON, String

from .base import Base, isoformat, new_id, utcnow

OCCASIONS = ("work", "casual", "formal", "party", "date", "sport", "travel")


class Outfit(Base):
    """Curated, ordered set of clothing items for an occasion"""
    __tablename__ = "outfits"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    items = Column(JSON, default=list, nullable=False)  # ordered clothing item ids
    occasion = Column(String(20), nullable=True)
    tags = Column(JSON, default=list, nullable=False)
    is_public = Column(Boolean, default=False, nullable=False)
    rating = Column(Float, default=0, nullable=False)
    times_worn = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    def to_dict(self):
        """Convert to dictionary"""
        return {
            "id": self.id,
            "userId": self.user_id,
            "name": self.name,
            "items": list(self.items or []),
            "occasion": self.occasion,
            "tags": list(self.tags or []),
            "isPublic": self.is_public,
            "rating": self.rating,
            "timesWorn": self.times_worn,
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }
