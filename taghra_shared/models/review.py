# taghra_shared/models/review.py
import uuid

from sqlalchemy import JSON, Column, ForeignKey, Integer, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from .base import Base, TimestampMixin


class Review(Base, TimestampMixin):
    """Review of a place"""
    __tablename__ = "reviews"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    place_id = Column(Uuid, ForeignKey("places.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    rating = Column(Integer, nullable=False)  # 1-5
    comment = Column(Text)
    photos = Column(JSON, default=list)
    tags = Column(JSON, default=list)

    user = relationship("User", back_populates="reviews")
    place = relationship("Place", back_populates="reviews")

    __table_args__ = (
        UniqueConstraint("place_id", "user_id", name="uq_review_place_user"),
    )

    def __repr__(self):
        return f"<Review(id={self.id}, place_id={self.place_id}, rating={self.rating})>"
