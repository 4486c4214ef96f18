from datetime import datetime
from typing import Any, List, Optional
from uuid import UUID

from pydantic import Field, field_validator

from taghra_shared.models import PlaceCategory, SubmissionStatus

from .base import BaseSchema


class NearbyPlaceResponse(BaseSchema):
    """Place in a nearby search, with its distance from the query origin"""
    id: UUID
    name: str
    category: PlaceCategory
    description: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    latitude: float
    longitude: float
    distance: int  # meters, rounded
    rating: float = 0.0
    review_count: int = 0
    price_level: Optional[int] = None
    is_open: bool
    photos: List[str] = Field(default_factory=list)


class PlaceSearchResponse(BaseSchema):
    id: UUID
    name: str
    category: PlaceCategory
    address: Optional[str] = None
    rating: float = 0.0
    review_count: int = 0
    latitude: float
    longitude: float
    distance: Optional[int] = None


class PlaceDetailResponse(BaseSchema):
    id: UUID
    name: str
    category: PlaceCategory
    description: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    latitude: float
    longitude: float
    rating: float = 0.0
    review_count: int = 0
    price_level: Optional[int] = None
    is_open: bool
    is_verified: bool
    status: SubmissionStatus
    rejection_reason: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    opening_hours: Optional[Any] = None
    photos: List[str] = Field(default_factory=list)
    features: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None

    @field_validator("photos", "features", "tags", mode="before")
    @classmethod
    def none_as_empty(cls, v):
        return v or []


class PlaceCreate(BaseSchema):
    """Place submitted by an owner or ambassador"""
    name: str = Field(..., min_length=1, max_length=100)
    category: PlaceCategory
    description: Optional[str] = None
    address: str = Field(..., min_length=1, max_length=500)
    phone: Optional[str] = Field(None, max_length=20)
    website: Optional[str] = Field(None, max_length=255)
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    price_level: int = Field(default=2, ge=1, le=4)
    is_open: bool = True
    opening_hours: Optional[dict] = None
    photos: List[str] = Field(default_factory=list)
    features: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)

    @field_validator("name", "address")
    @classmethod
    def strip_text(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class PlaceReject(BaseSchema):
    reason: str = Field(..., min_length=1, max_length=500)

    @field_validator("reason")
    @classmethod
    def strip_reason(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class SubmissionResponse(BaseSchema):
    """A place as its submitter sees it while in moderation"""
    id: UUID
    name: str
    category: PlaceCategory
    address: Optional[str] = None
    status: SubmissionStatus
    created_at: datetime
    reviewed_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None


class SubmissionEarnings(BaseSchema):
    approved_count: int
    pending_count: int
    rejected_count: int
    total_points_earned: int
