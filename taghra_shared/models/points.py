# taghra_shared/models/points.py
import uuid

from sqlalchemy import Column, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import relationship

from .base import Base, TimestampMixin


class PointsHistory(Base, TimestampMixin):
    """One ledger entry per points award"""
    __tablename__ = "points_history"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    points = Column(Integer, nullable=False)
    action = Column(String(50), nullable=False)
    description = Column(Text)

    user = relationship("User", back_populates="points_history")

    def __repr__(self):
        return f"<PointsHistory(user_id={self.user_id}, points={self.points}, action={self.action})>"
