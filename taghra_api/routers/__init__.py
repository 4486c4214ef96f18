"""
FastAPI routers
"""

from .health import router as health_router
from .places import router as places_router
from .reviews import router as reviews_router
from .submissions import router as submissions_router
from .users import router as users_router

__all__ = [
    'health_router',
    'places_router',
    'reviews_router',
    'submissions_router',
    'users_router',
]
