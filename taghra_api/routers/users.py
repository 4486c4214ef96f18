# taghra_api/routers/users.py
"""
Points, radius unlock status and leaderboard
"""

from typing import List

from fastapi import APIRouter, Depends, Query

from taghra_shared.models import User

from ..dependencies import get_current_user, get_points_ledger
from ..schemas.base import Envelope
from ..schemas.points import LeaderboardEntry, PointsHistoryEntry, PointsSummary, RadiusTierResponse
from ..services.points_ledger import MAX_HISTORY, PointsLedger
from ..services.radius_policy import RadiusTier, radius_status

router = APIRouter(prefix="/users", tags=["Users"])


def _tier_response(tier: RadiusTier) -> RadiusTierResponse:
    return RadiusTierResponse(
        points=tier.points,
        radius=tier.radius,
        label=tier.label,
        unlimited=tier.unlimited,
    )


@router.get("/me/points", response_model=Envelope[PointsSummary])
async def get_my_points(
    current_user: User = Depends(get_current_user),
    ledger: PointsLedger = Depends(get_points_ledger),
):
    """Points total and the search radius it unlocks"""
    points = await ledger.current_points(current_user.id)
    unlocked = radius_status(points)
    return Envelope[PointsSummary](data=PointsSummary(
        points=points,
        radius=unlocked.radius,
        label=unlocked.tier.label,
        unlimited=unlocked.tier.unlimited,
        next_level=_tier_response(unlocked.next_tier) if unlocked.next_tier else None,
        progress=unlocked.progress,
        points_needed=unlocked.points_needed,
    ))


@router.get("/me/points-history", response_model=Envelope[List[PointsHistoryEntry]])
async def get_my_points_history(
    current_user: User = Depends(get_current_user),
    ledger: PointsLedger = Depends(get_points_ledger),
):
    entries = await ledger.history(current_user.id, limit=MAX_HISTORY)
    return Envelope[List[PointsHistoryEntry]](
        data=[PointsHistoryEntry.model_validate(e) for e in entries]
    )


@router.get("/leaderboard", response_model=Envelope[List[LeaderboardEntry]])
async def get_leaderboard(
    limit: int = Query(10, ge=1, le=100),
    ledger: PointsLedger = Depends(get_points_ledger),
):
    """Top users by points"""
    entries = await ledger.leaderboard(limit)
    return Envelope[List[LeaderboardEntry]](
        data=[LeaderboardEntry.model_validate(e) for e in entries]
    )
