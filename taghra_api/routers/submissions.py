# taghra_api/routers/submissions.py
"""
A submitter's own places and what they earned
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from taghra_shared.models import PointsAction, SubmissionStatus, User

from ..dependencies import get_current_user, get_place_repository
from ..schemas.base import Envelope
from ..schemas.place import SubmissionEarnings, SubmissionResponse
from ..services.places_repository import PlaceRepository
from ..services.points_ledger import points_for

router = APIRouter(prefix="/subs", tags=["Submissions"])


@router.get("/my-submissions", response_model=Envelope[List[SubmissionResponse]])
async def get_my_submissions(
    status: Optional[SubmissionStatus] = Query(None),
    current_user: User = Depends(get_current_user),
    repository: PlaceRepository = Depends(get_place_repository),
):
    """Places submitted by the caller, newest first"""
    places = await repository.submissions(current_user.id, status)
    return Envelope[List[SubmissionResponse]](
        data=[SubmissionResponse.model_validate(p) for p in places]
    )


@router.get("/earnings", response_model=Envelope[SubmissionEarnings])
async def get_my_earnings(
    current_user: User = Depends(get_current_user),
    repository: PlaceRepository = Depends(get_place_repository),
):
    counts = await repository.submission_counts(current_user.id)
    approved = counts[SubmissionStatus.APPROVED]
    return Envelope[SubmissionEarnings](data=SubmissionEarnings(
        approved_count=approved,
        pending_count=counts[SubmissionStatus.PENDING],
        rejected_count=counts[SubmissionStatus.REJECTED],
        total_points_earned=approved * points_for(PointsAction.ADD_PLACE),
    ))
