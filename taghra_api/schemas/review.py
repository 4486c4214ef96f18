from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import Field, field_validator

from .base import BaseSchema


class ReviewCreate(BaseSchema):
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=1000)
    tags: List[str] = Field(default_factory=list)
    photos: List[str] = Field(default_factory=list)

    @field_validator("comment")
    @classmethod
    def strip_comment(cls, v):
        return v.strip() if v is not None else v


class ReviewAuthor(BaseSchema):
    id: UUID
    name: str


class ReviewResponse(BaseSchema):
    id: UUID
    rating: int
    comment: Optional[str] = None
    photos: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    created_at: datetime
    user: Optional[ReviewAuthor] = None


class ReviewCreatedResponse(BaseSchema):
    success: bool = True
    message: str
    data: ReviewResponse
    points_earned: int
