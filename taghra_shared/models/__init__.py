# taghra_shared/models/__init__.py
from .base import Base
from .user import User
from .place import Place
from .review import Review
from .points import PointsHistory
from .enums import UserRole, PlaceCategory, PointsAction, SubmissionStatus

__all__ = [
    'Base',
    'User',
    'Place',
    'Review',
    'PointsHistory',
    'UserRole',
    'PlaceCategory',
    'PointsAction',
    'SubmissionStatus',
]
