"""
Place rating aggregation
"""

import logging
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from taghra_shared.models import Place, Review

logger = logging.getLogger(__name__)


async def update_place_rating(db: AsyncSession, place_id: UUID) -> dict:
    """Recompute a place's average rating and review count from its reviews"""
    result = await db.execute(
        select(
            func.avg(Review.rating).label("avg_rating"),
            func.count(Review.id).label("count"),
        ).where(Review.place_id == place_id)
    )
    stats = result.one()

    review_count = stats.count or 0
    # No reviews means a rating of 0.0
    avg_rating = round(float(stats.avg_rating), 1) if stats.avg_rating is not None else 0.0

    await db.execute(
        update(Place)
        .where(Place.id == place_id)
        .values(rating=avg_rating, review_count=review_count)
    )

    logger.info(f"Place rating updated {place_id}: {avg_rating} ({review_count} reviews)")
    return {
        "place_id": place_id,
        "rating": avg_rating,
        "review_count": review_count,
    }


async def update_all_place_ratings(db: AsyncSession) -> int:
    """Recompute ratings for every place"""
    result = await db.execute(select(Place.id))
    place_ids = result.scalars().all()

    for place_id in place_ids:
        await update_place_rating(db, place_id)

    logger.info(f"Ratings updated for {len(place_ids)} places")
    return len(place_ids)
