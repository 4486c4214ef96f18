# taghra_shared/models/place.py
import uuid

from sqlalchemy import (
    JSON, Boolean, CheckConstraint, Column, DateTime, Float, ForeignKey,
    Index, Integer, String, Text, Uuid
)
from sqlalchemy.orm import relationship

from .base import Base, TimestampMixin
from .enums import PlaceCategory, SubmissionStatus


class Place(Base, TimestampMixin):
    """Place shown on the map (restaurant, clinic, vet, administration)"""
    __tablename__ = "places"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(100), nullable=False)
    category = Column(String(20), default=PlaceCategory.FOOD.value, nullable=False)
    description = Column(Text)
    address = Column(String(500), nullable=False, default="")
    phone = Column(String(20))
    website = Column(String(255))

    # WGS84 degrees
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)

    rating = Column(Float, default=0.0, nullable=False)  # 0-5, one decimal
    review_count = Column(Integer, default=0, nullable=False)
    price_level = Column(Integer, default=2, nullable=False)  # 1-4
    is_open = Column(Boolean, default=True, nullable=False)
    opening_hours = Column(JSON)
    photos = Column(JSON, default=list)
    features = Column(JSON, default=list)
    tags = Column(JSON, default=list)

    # Moderation: only approved, active places show up in search
    status = Column(String(20), default=SubmissionStatus.PENDING.value, nullable=False)
    rejection_reason = Column(Text)
    reviewed_at = Column(DateTime(timezone=True))
    is_active = Column(Boolean, default=True, nullable=False)
    submitted_by = Column(Uuid, ForeignKey("users.id"), nullable=True)

    reviews = relationship("Review", back_populates="place", cascade="all, delete-orphan")
    submitter = relationship("User", back_populates="submitted_places")

    __table_args__ = (
        CheckConstraint("latitude >= -90 AND latitude <= 90", name="ck_place_latitude"),
        CheckConstraint("longitude >= -180 AND longitude <= 180", name="ck_place_longitude"),
        CheckConstraint("price_level BETWEEN 1 AND 4", name="ck_place_price_level"),
        Index("idx_place_location", "latitude", "longitude"),
        Index("idx_place_search", "category", "status", "is_active"),
        Index("idx_place_submitter", "submitted_by", "status"),
    )

    @property
    def is_verified(self) -> bool:
        return self.status == SubmissionStatus.APPROVED.value

    def __repr__(self):
        return f"<Place(id={self.id}, name={self.name[:30]}, category={self.category})>"
