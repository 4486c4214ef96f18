"""
Services with the business logic
"""

from .cache import CacheService
from .geo import Coordinate, haversine_meters
from .nearby import NearbyPage, NearbyPlacesService, RankedResult, SearchQuery
from .places_repository import PlaceFilters, PlaceRepository, SqlPlaceRepository
from .points_ledger import PointsLedger
from .radius_policy import allowed_radius, radius_status

__all__ = [
    'CacheService',
    'Coordinate',
    'haversine_meters',
    'NearbyPage',
    'NearbyPlacesService',
    'RankedResult',
    'SearchQuery',
    'PlaceFilters',
    'PlaceRepository',
    'SqlPlaceRepository',
    'PointsLedger',
    'allowed_radius',
    'radius_status',
]
