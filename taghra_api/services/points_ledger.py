"""
Points ledger: the single place where points are awarded.

Everything that earns points (reviews, verified place submissions, orders,
bookings) goes through `PointsLedger.award`; the nearby query only ever reads
`current_points`.
"""

import logging
from typing import Dict, List, Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from taghra_shared.models import PointsAction, PointsHistory, User

from ..errors import DependencyError, InvalidArgumentError, NotFoundError
from .cache import CacheService

logger = logging.getLogger(__name__)

POINTS_FOR_ACTION: Dict[PointsAction, int] = {
    PointsAction.ADD_PLACE: 10,
    PointsAction.REVIEW_WITH_PHOTO: 5,
    PointsAction.REVIEW: 3,
    PointsAction.ORDER_COMPLETED: 2,
    PointsAction.BOOKING_COMPLETED: 3,
    PointsAction.DAILY_LOGIN: 1,
    PointsAction.SHARE_APP: 5,
    PointsAction.REFERRAL: 20,
}

LEADERBOARD_CACHE_PREFIX = "leaderboard:"
MAX_HISTORY = 50


def points_for(action: PointsAction) -> int:
    return POINTS_FOR_ACTION.get(PointsAction(action), 0)


class PointsLedger:
    def __init__(self, db: AsyncSession, cache: Optional[CacheService] = None, cache_ttl: int = 60):
        self.db = db
        self.cache = cache
        self.cache_ttl = cache_ttl

    async def _execute(self, statement):
        try:
            return await self.db.execute(statement)
        except (SQLAlchemyError, OSError) as e:
            raise DependencyError() from e

    async def current_points(self, user_id: UUID) -> int:
        """Current total; users without a record have no points"""
        result = await self._execute(select(User.points).where(User.id == user_id))
        points = result.scalar_one_or_none()
        return int(points or 0)

    async def award(
        self,
        user_id: UUID,
        amount: int,
        reason: PointsAction,
        description: Optional[str] = None,
    ) -> int:
        """Add points to a user and record the entry; returns the new total"""
        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            raise InvalidArgumentError(f"amount must be a positive integer, got {amount!r}")
        reason = PointsAction(reason)

        # Atomic increment
        result = await self._execute(
            update(User)
            .where(User.id == user_id)
            .values(points=User.points + amount)
        )
        if result.rowcount == 0:
            raise NotFoundError("User not found")
        total = await self.current_points(user_id)

        self.db.add(PointsHistory(
            user_id=user_id,
            points=amount,
            action=reason.value,
            description=description,
        ))
        try:
            await self.db.flush()
        except (SQLAlchemyError, OSError) as e:
            raise DependencyError() from e

        if self.cache is not None:
            await self.cache.clear_pattern(f"{LEADERBOARD_CACHE_PREFIX}*")

        logger.info(f"Points awarded: user={user_id}, +{amount} ({reason.value}), total={total}")
        return total

    async def history(self, user_id: UUID, limit: int = MAX_HISTORY) -> List[PointsHistory]:
        result = await self._execute(
            select(PointsHistory)
            .where(PointsHistory.user_id == user_id)
            .order_by(PointsHistory.created_at.desc(), PointsHistory.id)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def leaderboard(self, limit: int = 10) -> List[dict]:
        """Top users by points with competition ranking (1, 2, 2, 4)"""
        cache_key = f"{LEADERBOARD_CACHE_PREFIX}{limit}"
        if self.cache is not None:
            cached = await self.cache.get(cache_key)
            if cached is not None:
                return cached

        result = await self._execute(
            select(User)
            .where(User.points > 0, User.is_active == True)  # noqa: E712
            .order_by(User.points.desc(), User.created_at, User.id)
            .limit(limit)
        )
        users = result.scalars().all()

        entries = []
        rank = 0
        previous_points = None
        for position, user in enumerate(users, start=1):
            if user.points != previous_points:
                rank = position
                previous_points = user.points
            entries.append({
                "id": str(user.id),
                "name": user.full_name,
                "points": user.points,
                "role": user.role,
                "rank": rank,
            })

        if self.cache is not None:
            await self.cache.set(cache_key, entries, ttl=self.cache_ttl)
        return entries
