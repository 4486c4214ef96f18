# taghra_shared/models/user.py
import uuid

from sqlalchemy import Boolean, CheckConstraint, Column, Integer, String, Uuid
from sqlalchemy.orm import relationship

from .base import Base, TimestampMixin
from .enums import UserRole


class User(Base, TimestampMixin):
    """Platform user"""
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(String(255), unique=True, nullable=False, index=True)
    full_name = Column(String(100), nullable=False)
    role = Column(String(20), default=UserRole.USER.value, nullable=False)
    points = Column(Integer, default=0, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    reviews = relationship("Review", back_populates="user")
    submitted_places = relationship("Place", back_populates="submitter")
    points_history = relationship("PointsHistory", back_populates="user", cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint("points >= 0", name="ck_user_points"),
    )

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"
