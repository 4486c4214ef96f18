# taghra_api/routers/reviews.py
import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from taghra_shared.models import PointsAction, Review, User

from ..database import get_db
from ..dependencies import get_current_user, get_place_repository, get_points_ledger
from ..errors import ConflictError, NotFoundError
from ..schemas.base import Envelope, ErrorResponse
from ..schemas.review import ReviewAuthor, ReviewCreate, ReviewCreatedResponse, ReviewResponse
from ..services.places_repository import PlaceRepository
from ..services.points_ledger import PointsLedger, points_for
from ..utils.rating_updater import update_place_rating

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/places/{place_id}/reviews",
    tags=["Reviews"],
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)


def _review_response(review: Review, author: User) -> ReviewResponse:
    return ReviewResponse(
        id=review.id,
        rating=review.rating,
        comment=review.comment,
        photos=review.photos or [],
        tags=review.tags or [],
        created_at=review.created_at,
        user=ReviewAuthor(id=author.id, name=author.full_name),
    )


@router.get("", response_model=Envelope[List[ReviewResponse]])
async def get_place_reviews(
    place_id: UUID,
    limit: int = Query(20, ge=1, le=50),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
):
    """Reviews of a place, newest first"""
    result = await db.execute(
        select(Review, User)
        .join(User, Review.user_id == User.id)
        .where(Review.place_id == place_id)
        .order_by(Review.created_at.desc(), Review.id)
        .offset(offset)
        .limit(limit)
    )
    return Envelope[List[ReviewResponse]](
        data=[_review_response(review, author) for review, author in result.all()]
    )


@router.post("", response_model=ReviewCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_review(
    place_id: UUID,
    review_data: ReviewCreate,
    current_user: User = Depends(get_current_user),
    repository: PlaceRepository = Depends(get_place_repository),
    ledger: PointsLedger = Depends(get_points_ledger),
    db: AsyncSession = Depends(get_db),
):
    """Review a place; updates its rating and rewards the author"""
    place = await repository.get(place_id)
    if not place:
        raise NotFoundError("Place not found")

    existing = await db.execute(
        select(Review.id).where(Review.place_id == place_id, Review.user_id == current_user.id)
    )
    if existing.scalar_one_or_none() is not None:
        raise ConflictError("You have already reviewed this place")

    review = Review(
        place_id=place_id,
        user_id=current_user.id,
        rating=review_data.rating,
        comment=review_data.comment,
        tags=review_data.tags,
        photos=review_data.photos,
    )
    db.add(review)
    try:
        await db.flush()
    except IntegrityError as e:
        # Lost a race with a concurrent review by the same user
        raise ConflictError("You have already reviewed this place") from e

    await update_place_rating(db, place_id)

    action = PointsAction.REVIEW_WITH_PHOTO if review_data.photos else PointsAction.REVIEW
    earned = points_for(action)
    await ledger.award(current_user.id, earned, action, description=f"Review: {place.name}")

    logger.info(f"Review created: user={current_user.id}, place={place_id}, rating={review.rating}")
    return ReviewCreatedResponse(
        message="Review added successfully",
        data=_review_response(review, current_user),
        points_earned=earned,
    )
