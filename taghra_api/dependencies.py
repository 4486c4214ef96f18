# taghra_api/dependencies.py
"""
FastAPI dependencies: caller identity, roles and service wiring

Authentication itself happens upstream; the gateway forwards the
authenticated user's id in the X-User-Id header.
"""

from functools import lru_cache
from typing import List, Optional
from uuid import UUID

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from taghra_shared.config import config
from taghra_shared.models import User, UserRole

from .database import get_db
from .services.cache import CacheService
from .services.nearby import NearbyPlacesService
from .services.places_repository import PlaceRepository, SqlPlaceRepository
from .services.points_ledger import PointsLedger


async def get_optional_user(
    x_user_id: Optional[UUID] = Header(None),
    db: AsyncSession = Depends(get_db),
) -> Optional[User]:
    """Caller if identified and active, otherwise None (anonymous)"""
    if x_user_id is None:
        return None
    result = await db.execute(select(User).where(User.id == x_user_id))
    user = result.scalar_one_or_none()
    if user is None or not user.is_active:
        return None
    return user


async def get_current_user(
    x_user_id: Optional[UUID] = Header(None),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Authenticated caller"""
    if x_user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required"
        )

    result = await db.execute(select(User).where(User.id == x_user_id))
    user = result.scalar_one_or_none()

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unknown user"
        )

    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="User is blocked")

    return user


def require_role(allowed_roles: List[UserRole]):
    """Dependency factory checking the caller's role"""
    allowed = {UserRole(r).value for r in allowed_roles}

    def role_checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. Required roles: {', '.join(sorted(allowed))}"
            )
        return current_user
    return role_checker


require_admin = require_role([UserRole.ADMIN])


@lru_cache()
def get_cache() -> CacheService:
    return CacheService(config.REDIS_URL)


def get_place_repository(db: AsyncSession = Depends(get_db)) -> PlaceRepository:
    return SqlPlaceRepository(db)


def get_nearby_service(
    repository: PlaceRepository = Depends(get_place_repository),
) -> NearbyPlacesService:
    return NearbyPlacesService(repository, timeout=config.REPOSITORY_TIMEOUT_SECONDS)


def get_points_ledger(
    db: AsyncSession = Depends(get_db),
    cache: CacheService = Depends(get_cache),
) -> PointsLedger:
    return PointsLedger(db, cache=cache, cache_ttl=config.LEADERBOARD_CACHE_TTL)
