"""
Pydantic schemas for the API
"""

from .base import Envelope, ErrorResponse, PagedEnvelope, PageMeta
from .place import (
    NearbyPlaceResponse, PlaceCreate, PlaceDetailResponse, PlaceReject, PlaceSearchResponse,
    SubmissionEarnings, SubmissionResponse
)
from .points import LeaderboardEntry, PointsHistoryEntry, PointsSummary
from .review import ReviewCreate, ReviewCreatedResponse, ReviewResponse

__all__ = [
    'Envelope', 'ErrorResponse', 'PagedEnvelope', 'PageMeta',
    'NearbyPlaceResponse', 'PlaceCreate', 'PlaceDetailResponse', 'PlaceReject', 'PlaceSearchResponse',
    'SubmissionEarnings', 'SubmissionResponse',
    'LeaderboardEntry', 'PointsHistoryEntry', 'PointsSummary',
    'ReviewCreate', 'ReviewCreatedResponse', 'ReviewResponse',
]
