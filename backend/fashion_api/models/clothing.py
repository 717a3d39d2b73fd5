"""
Clothing item model.
"""
from sqlalchemy import Column, DateTime, ForeignKey, JSON, String, Text

from .base import Base, isoformat, new_id, utcnow

CATEGORIES = (
    "shirts_blouses",
    "tshirts_tops",
    "dresses",
    "pants_jeans",
    "shorts",
    "skirts",
    "jackets_coats",
    "sweaters",
    "shoes_sneakers",
    "shoes_formal",
    "bags_accessories",
)

DEFAULT_MODEL_VERSION = "1.0.0"


def default_user_metadata() -> dict:
    return {
        "userTags": [],
        "isFavorite": False,
        "timesWorn": 0,
        "lastWorn": None,
        "notes": None,
        "price": None,
        "purchaseDate": None,
    }


def default_ai_classification() -> dict:
    return {
        "confidence": 0.5,
        "modelVersion": DEFAULT_MODEL_VERSION,
        "allPredictions": [],
        "processingTime": None,
        "qualityScore": None,
    }


class ClothingItem(Base):
    """Single garment with AI-derived and user-provided attributes"""
    __tablename__ = "clothing_items"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    wardrobe_id = Column(String(36), ForeignKey("wardrobes.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    brand = Column(String(100), nullable=True)
    color = Column(String(50), nullable=False)
    category = Column(String(30), nullable=False, index=True)
    image_url = Column(Text, nullable=False)  # Stored image URL or placeholder
    image_public_id = Column(String(255), nullable=True)  # For deletion
    attributes = Column(JSON, default=dict, nullable=False)
    ai_classification = Column(JSON, default=default_ai_classification, nullable=False)
    user_metadata = Column(JSON, default=default_user_metadata, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    @property
    def tags(self):
        return list((self.user_metadata or {}).get("userTags") or [])

    def to_dict(self):
        """Convert to dictionary"""
        return {
            "id": self.id,
            "userId": self.user_id,
            "wardrobeId": self.wardrobe_id,
            "name": self.name,
            "brand": self.brand,
            "color": self.color,
            "category": self.category,
            "imageUrl": self.image_url,
            "imagePublicId": self.image_public_id,
            "attributes": self.attributes or {},
            "aiClassification": self.ai_classification or {},
            "userMetadata": self.user_metadata or {},
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }
