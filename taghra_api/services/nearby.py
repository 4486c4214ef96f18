"""
Nearby-places query: validation, radius gating, ranking and pagination.
"""

import asyncio
import math
from dataclasses import dataclass
from typing import List, Optional

from taghra_shared.models import Place, PlaceCategory

from ..errors import DependencyTimeoutError, FieldValidationError, InvalidArgumentError
from .geo import Coordinate, haversine_meters
from .places_repository import PlaceFilters, PlaceRepository, place_coordinate
from .radius_policy import allowed_radius

MIN_RADIUS_M = 100
MAX_RADIUS_M = 50_000
DEFAULT_RADIUS_M = 1000
DEFAULT_LIMIT = 20
MAX_LIMIT = 100


@dataclass(frozen=True)
class SearchQuery:
    latitude: float
    longitude: float
    radius: int = DEFAULT_RADIUS_M
    category: Optional[str] = None
    is_open: Optional[bool] = None  # None means any open state
    limit: int = DEFAULT_LIMIT
    offset: int = 0

    @property
    def origin(self) -> Coordinate:
        return Coordinate(self.latitude, self.longitude)

    def validate(self) -> None:
        """Raise FieldValidationError for the first field that is out of shape"""
        if not _is_finite(self.latitude) or not -90 <= self.latitude <= 90:
            raise FieldValidationError("lat", "lat must be a number between -90 and 90")
        if not _is_finite(self.longitude) or not -180 <= self.longitude <= 180:
            raise FieldValidationError("lng", "lng must be a number between -180 and 180")
        if not _is_int(self.radius) or not MIN_RADIUS_M <= self.radius <= MAX_RADIUS_M:
            raise FieldValidationError(
                "radius", f"radius must be an integer between {MIN_RADIUS_M} and {MAX_RADIUS_M}"
            )
        if self.category is not None:
            try:
                PlaceCategory(self.category)
            except ValueError:
                allowed = ", ".join(c.value for c in PlaceCategory)
                raise FieldValidationError("category", f"category must be one of: {allowed}") from None
        if not _is_int(self.limit) or not 1 <= self.limit <= MAX_LIMIT:
            raise FieldValidationError("limit", f"limit must be an integer between 1 and {MAX_LIMIT}")
        if not _is_int(self.offset) or self.offset < 0:
            raise FieldValidationError("offset", "offset must be a non-negative integer")


@dataclass(frozen=True)
class RankedResult:
    place: Place
    distance: float  # meters from the query origin


@dataclass(frozen=True)
class NearbyPage:
    items: List[RankedResult]
    total: int
    limit: int
    offset: int
    effective_radius: int


def _is_finite(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def effective_radius(requested: int, user_points: int) -> int:
    """Requested radius capped by what the user's points unlock.

    Requests above the unlocked tier are capped, never rejected.
    """
    try:
        unlocked = allowed_radius(user_points)
    except InvalidArgumentError as e:
        raise FieldValidationError("points", e.message) from e
    return min(requested, unlocked)


def ranking_key(result: RankedResult):
    """Distance ascending, then rating descending, then creation order.

    The id is the last resort so two rows never compare equal.
    """
    place = result.place
    created = place.created_at
    return (
        result.distance,
        -(place.rating or 0.0),
        created is None,
        created if created is not None else 0,
        str(place.id),
    )


def rank(origin: Coordinate, places: List[Place]) -> List[RankedResult]:
    results = [RankedResult(p, haversine_meters(origin, place_coordinate(p))) for p in places]
    results.sort(key=ranking_key)
    return results


class NearbyPlacesService:
    """Stateless query service; safe to share across concurrent requests"""

    def __init__(self, repository: PlaceRepository, timeout: Optional[float] = None):
        self.repository = repository
        self.timeout = timeout

    async def query_nearby(self, search: SearchQuery, user_points: int) -> NearbyPage:
        search.validate()
        radius = effective_radius(search.radius, user_points)

        filters = PlaceFilters(
            category=PlaceCategory(search.category) if search.category is not None else None,
            is_open=search.is_open,
        )
        try:
            candidates = await asyncio.wait_for(
                self.repository.find_near(search.origin, radius, filters),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            raise DependencyTimeoutError() from e

        ranked = rank(search.origin, candidates)
        # Nothing beyond the effective radius, whatever the repository returned
        ranked = [r for r in ranked if r.distance <= radius]

        return NearbyPage(
            items=ranked[search.offset:search.offset + search.limit],
            total=len(ranked),
            limit=search.limit,
            offset=search.offset,
            effective_radius=radius,
        )
