"""
Outfit recommendation model.

Recommendations are ephemeral: each row carries an ``expires_at`` timestamp and
expired rows are filtered out of reads and purged periodically.
"""
from datetime import timedelta

from sqlalchemy import Column, DateTime, Float, ForeignKey, JSON, String, Text

from .base import Base, isoformat, new_id, utcnow

SOURCES = ("ai", "user", "stylist")


class OutfitRecommendation(Base):
    """Generated outfit suggestion with optional user feedback"""
    __tablename__ = "outfit_recommendations"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    occasion = Column(String(20), nullable=False)
    season = Column(String(10), nullable=True)
    weather_context = Column(JSON, nullable=True)
    items = Column(JSON, default=list, nullable=False)
    compatibility_score = Column(Float, nullable=False)
    ai_reasoning = Column(Text, nullable=True)
    recommendation_source = Column(String(10), default="ai", nullable=False)
    user_feedback = Column(JSON, nullable=True)
    # "metadata" is reserved on declarative models
    generation_metadata = Column("metadata", JSON, default=dict, nullable=False)
    expires_at = Column(DateTime, nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)

    @classmethod
    def expiry_from(cls, created_at, retention_days: int):
        return created_at + timedelta(days=retention_days)

    def to_dict(self):
        """Convert to dictionary"""
        return {
            "id": self.id,
            "userId": self.user_id,
            "occasion": self.occasion,
            "season": self.season,
            "weatherContext": self.weather_context,
            "items": list(self.items or []),
            "compatibilityScore": self.compatibility_score,
            "aiReasoning": self.ai_reasoning,
            "recommendationSource": self.recommendation_source,
            "userFeedback": self.user_feedback,
            "metadata": self.generation_metadata or {},
            "expiresAt": isoformat(self.expires_at),
            "createdAt": isoformat(self.created_at),
        }
