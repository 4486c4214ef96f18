from datetime import datetime
from typing import Optional
from uuid import UUID

from .base import BaseSchema


class RadiusTierResponse(BaseSchema):
    points: int
    radius: int
    label: str
    unlimited: bool


class PointsSummary(BaseSchema):
    """Points total and the search radius it unlocks"""
    points: int
    radius: int
    label: str
    unlimited: bool
    next_level: Optional[RadiusTierResponse] = None
    progress: float
    points_needed: int


class PointsHistoryEntry(BaseSchema):
    id: UUID
    points: int
    action: str
    description: Optional[str] = None
    created_at: datetime


class LeaderboardEntry(BaseSchema):
    id: UUID
    name: str
    points: int
    role: str
    rank: int
