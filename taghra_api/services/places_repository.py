"""
Place storage.

`PlaceRepository` is the only way the rest of the API reads or writes places.
`SqlPlaceRepository` is the SQLAlchemy implementation used by the app.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Optional
from uuid import UUID

from sqlalchemy import String, cast, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from taghra_shared.models import Place, PlaceCategory, SubmissionStatus

from ..errors import DependencyError
from .geo import Coordinate, bounding_box, haversine_meters

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlaceFilters:
    category: Optional[PlaceCategory] = None
    is_open: Optional[bool] = None


def place_coordinate(place: Place) -> Coordinate:
    return Coordinate(place.latitude, place.longitude)


class PlaceRepository(ABC):
    """Storage interface for places"""

    @abstractmethod
    async def find_near(
        self,
        origin: Coordinate,
        radius_meters: float,
        filters: PlaceFilters,
    ) -> List[Place]:
        """Approved, active places within radius_meters of origin.

        The result is an unordered candidate set; ranking and pagination
        belong to the caller.
        """

    @abstractmethod
    async def get(self, place_id: UUID, include_unverified: bool = False) -> Optional[Place]:
        """A single active place, or None"""

    @abstractmethod
    async def search(
        self,
        text: str,
        category: Optional[PlaceCategory] = None,
    ) -> List[Place]:
        """Approved, active places whose name, description, address or tags contain text"""

    @abstractmethod
    async def add(self, place: Place) -> Place:
        """Persist a new place"""

    @abstractmethod
    async def save(self, place: Place) -> Place:
        """Write pending changes of an already stored place"""

    @abstractmethod
    async def submissions(
        self,
        user_id: UUID,
        status: Optional[SubmissionStatus] = None,
    ) -> List[Place]:
        """Places submitted by a user, any moderation state, newest first"""

    @abstractmethod
    async def submission_counts(self, user_id: UUID) -> Dict[SubmissionStatus, int]:
        """Number of a user's submissions per moderation state"""


class SqlPlaceRepository(PlaceRepository):
    """SQLAlchemy-backed repository.

    Proximity is answered in two steps: a bounding-box query the database can
    serve from the (latitude, longitude) index, then an exact great-circle
    filter on the rows it returns.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    def _searchable(self):
        return select(Place).where(
            Place.status == SubmissionStatus.APPROVED.value,
            Place.is_active == True,  # noqa: E712
        )

    async def _fetch(self, query) -> List[Place]:
        try:
            result = await self.db.execute(query)
        except (SQLAlchemyError, OSError) as e:
            raise DependencyError() from e
        return list(result.scalars().all())

    async def find_near(
        self,
        origin: Coordinate,
        radius_meters: float,
        filters: PlaceFilters,
    ) -> List[Place]:
        box = bounding_box(origin, radius_meters)
        query = self._searchable().where(Place.latitude.between(box.lat_min, box.lat_max))
        query = query.where(or_(*[
            Place.longitude.between(lng_min, lng_max) for lng_min, lng_max in box.lng_ranges
        ]))

        if filters.category is not None:
            query = query.where(Place.category == PlaceCategory(filters.category).value)
        if filters.is_open is not None:
            query = query.where(Place.is_open == filters.is_open)

        candidates = await self._fetch(query)
        return [
            p for p in candidates
            if haversine_meters(origin, place_coordinate(p)) <= radius_meters
        ]

    async def get(self, place_id: UUID, include_unverified: bool = False) -> Optional[Place]:
        query = select(Place).where(Place.id == place_id, Place.is_active == True)  # noqa: E712
        if not include_unverified:
            query = query.where(Place.status == SubmissionStatus.APPROVED.value)
        places = await self._fetch(query)
        return places[0] if places else None

    async def search(
        self,
        text: str,
        category: Optional[PlaceCategory] = None,
    ) -> List[Place]:
        pattern = f"%{text.lower()}%"
        query = self._searchable().where(or_(
            func.lower(Place.name).like(pattern),
            func.lower(Place.description).like(pattern),
            func.lower(Place.address).like(pattern),
            # tags is a JSON list; matching its text form is enough for keywords
            func.lower(cast(Place.tags, String)).like(pattern),
        ))
        if category is not None:
            query = query.where(Place.category == PlaceCategory(category).value)
        return await self._fetch(query)

    async def add(self, place: Place) -> Place:
        try:
            self.db.add(place)
            await self.db.flush()
            await self.db.refresh(place)
        except (SQLAlchemyError, OSError) as e:
            raise DependencyError() from e
        logger.info(f"Place stored: id={place.id}, name={place.name}, status={place.status}")
        return place

    async def save(self, place: Place) -> Place:
        try:
            await self.db.flush()
        except (SQLAlchemyError, OSError) as e:
            raise DependencyError() from e
        return place

    async def submissions(
        self,
        user_id: UUID,
        status: Optional[SubmissionStatus] = None,
    ) -> List[Place]:
        query = select(Place).where(Place.submitted_by == user_id)
        if status is not None:
            query = query.where(Place.status == SubmissionStatus(status).value)
        return await self._fetch(query.order_by(Place.created_at.desc(), Place.id))

    async def submission_counts(self, user_id: UUID) -> Dict[SubmissionStatus, int]:
        try:
            result = await self.db.execute(
                select(Place.status, func.count(Place.id))
                .where(Place.submitted_by == user_id)
                .group_by(Place.status)
            )
        except (SQLAlchemyError, OSError) as e:
            raise DependencyError() from e
        counts = {s: 0 for s in SubmissionStatus}
        for status, count in result.all():
            counts[SubmissionStatus(status)] = count
        return counts
