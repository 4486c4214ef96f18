# taghra_api/routers/places.py
"""
Places: nearby search, text search, details, submission and moderation
"""

import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from taghra_shared.models import Place, PlaceCategory, PointsAction, SubmissionStatus, User
from taghra_shared.models.base import utcnow

from ..dependencies import (
    get_current_user, get_nearby_service, get_optional_user,
    get_place_repository, get_points_ledger, require_admin
)
from ..errors import ConflictError, NotFoundError
from ..schemas.base import Envelope, ErrorResponse, PagedEnvelope, PageMeta
from ..schemas.place import (
    NearbyPlaceResponse, PlaceCreate, PlaceDetailResponse, PlaceReject, PlaceSearchResponse
)
from ..services.geo import Coordinate
from ..services.nearby import (
    DEFAULT_LIMIT, DEFAULT_RADIUS_M, NearbyPlacesService, RankedResult, SearchQuery
)
from ..services.places_repository import PlaceRepository
from ..services.points_ledger import PointsLedger, points_for
from ..services.search import rank_search_results

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/places",
    tags=["Places"],
    responses={400: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)


def _nearby_item(result: RankedResult) -> NearbyPlaceResponse:
    place = result.place
    return NearbyPlaceResponse(
        id=place.id,
        name=place.name,
        category=place.category,
        description=place.description,
        address=place.address,
        phone=place.phone,
        latitude=place.latitude,
        longitude=place.longitude,
        # Half-up rounding, distances are never negative
        distance=int(result.distance + 0.5),
        rating=place.rating or 0.0,
        review_count=place.review_count or 0,
        price_level=place.price_level,
        is_open=place.is_open,
        photos=place.photos or [],
    )


@router.get("/nearby", response_model=PagedEnvelope[NearbyPlaceResponse])
async def get_nearby_places(
    lat: float = Query(...),
    lng: float = Query(...),
    radius: int = Query(DEFAULT_RADIUS_M),
    category: Optional[str] = Query(None),
    is_open: Optional[bool] = Query(None, alias="open"),
    limit: int = Query(DEFAULT_LIMIT),
    offset: int = Query(0),
    user: Optional[User] = Depends(get_optional_user),
    ledger: PointsLedger = Depends(get_points_ledger),
    service: NearbyPlacesService = Depends(get_nearby_service),
):
    """Places around a point, within the radius the caller has unlocked"""
    search = SearchQuery(
        latitude=lat,
        longitude=lng,
        radius=radius,
        category=category,
        is_open=is_open,
        limit=limit,
        offset=offset,
    )
    points = await ledger.current_points(user.id) if user else 0
    page = await service.query_nearby(search, points)

    return PagedEnvelope[NearbyPlaceResponse](
        data=[_nearby_item(r) for r in page.items],
        meta=PageMeta(total=page.total, limit=page.limit, offset=page.offset),
    )


@router.get("/search", response_model=Envelope[List[PlaceSearchResponse]])
async def search_places(
    query: str = Query(..., min_length=1, max_length=100),
    category: Optional[PlaceCategory] = Query(None),
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lng: Optional[float] = Query(None, ge=-180, le=180),
    limit: int = Query(20, ge=1, le=50),
    repository: PlaceRepository = Depends(get_place_repository),
):
    """Search places by name or keyword"""
    text = query.strip()
    places = await repository.search(text, category)

    origin = Coordinate(lat, lng) if lat is not None and lng is not None else None
    ranked = rank_search_results(text, places, origin)[:limit]

    return Envelope[List[PlaceSearchResponse]](data=[
        PlaceSearchResponse(
            id=p.id,
            name=p.name,
            category=p.category,
            address=p.address,
            rating=p.rating or 0.0,
            review_count=p.review_count or 0,
            latitude=p.latitude,
            longitude=p.longitude,
            distance=int(distance + 0.5) if distance is not None else None,
        )
        for p, distance in ranked
    ])


@router.get("/{place_id}", response_model=Envelope[PlaceDetailResponse])
async def get_place(
    place_id: UUID,
    repository: PlaceRepository = Depends(get_place_repository),
):
    """Place details"""
    place = await repository.get(place_id)
    if not place:
        raise NotFoundError("Place not found")
    return Envelope[PlaceDetailResponse](data=PlaceDetailResponse.model_validate(place))


@router.post("", response_model=Envelope[PlaceDetailResponse], status_code=status.HTTP_201_CREATED)
async def submit_place(
    place_data: PlaceCreate,
    current_user: User = Depends(get_current_user),
    repository: PlaceRepository = Depends(get_place_repository),
):
    """Submit a new place; it stays out of search until an admin verifies it"""
    place = Place(
        name=place_data.name,
        category=place_data.category.value,
        description=place_data.description,
        address=place_data.address,
        phone=place_data.phone,
        website=place_data.website,
        latitude=place_data.latitude,
        longitude=place_data.longitude,
        price_level=place_data.price_level,
        is_open=place_data.is_open,
        opening_hours=place_data.opening_hours,
        photos=place_data.photos,
        features=place_data.features,
        tags=place_data.tags,
        status=SubmissionStatus.PENDING.value,
        submitted_by=current_user.id,
    )
    place = await repository.add(place)

    logger.info(f"Place submitted: {place.id} by user={current_user.id}")
    return Envelope[PlaceDetailResponse](
        data=PlaceDetailResponse.model_validate(place),
        message=f"Place submitted for review. You will earn {points_for(PointsAction.ADD_PLACE)} points once approved!",
    )


async def _pending_submission(repository: PlaceRepository, place_id: UUID) -> Place:
    place = await repository.get(place_id, include_unverified=True)
    if not place:
        raise NotFoundError("Place not found")
    if place.status != SubmissionStatus.PENDING.value:
        raise ConflictError(f"Place is already {place.status}")
    return place


@router.post("/{place_id}/verify", response_model=Envelope[PlaceDetailResponse])
async def verify_place(
    place_id: UUID,
    admin: User = Depends(require_admin),
    repository: PlaceRepository = Depends(get_place_repository),
    ledger: PointsLedger = Depends(get_points_ledger),
):
    """Approve a submitted place and reward its submitter"""
    place = await _pending_submission(repository, place_id)

    place.status = SubmissionStatus.APPROVED.value
    place.reviewed_at = utcnow()
    await repository.save(place)

    if place.submitted_by is not None:
        await ledger.award(
            place.submitted_by,
            points_for(PointsAction.ADD_PLACE),
            PointsAction.ADD_PLACE,
            description=f"Place approved: {place.name}",
        )

    logger.info(f"Place verified: {place.id} by admin={admin.id}")
    return Envelope[PlaceDetailResponse](
        data=PlaceDetailResponse.model_validate(place),
        message="Place verified",
    )


@router.post("/{place_id}/reject", response_model=Envelope[PlaceDetailResponse])
async def reject_place(
    place_id: UUID,
    rejection: PlaceReject,
    admin: User = Depends(require_admin),
    repository: PlaceRepository = Depends(get_place_repository),
):
    """Refuse a submitted place; no points are awarded"""
    place = await _pending_submission(repository, place_id)

    place.status = SubmissionStatus.REJECTED.value
    place.rejection_reason = rejection.reason
    place.reviewed_at = utcnow()
    await repository.save(place)

    logger.info(f"Place rejected: {place.id} by admin={admin.id}")
    return Envelope[PlaceDetailResponse](
        data=PlaceDetailResponse.model_validate(place),
        message="Place rejected",
    )
