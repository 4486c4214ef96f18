# taghra_shared/models/enums.py
from enum import Enum


class UserRole(str, Enum):
    """User roles"""
    USER = "user"
    RESTAURANT = "restaurant"
    DOCTOR = "doctor"
    VET = "vet"
    SUB = "sub"  # ambassador submitting places
    ADMIN = "admin"


class PlaceCategory(str, Enum):
    """Place categories"""
    FOOD = "food"
    HEALTH = "health"
    VET = "vet"
    ADMIN = "admin"


class PointsAction(str, Enum):
    """Actions that earn points"""
    ADD_PLACE = "add_place"
    REVIEW_WITH_PHOTO = "review_with_photo"
    REVIEW = "review"
    ORDER_COMPLETED = "order_completed"
    BOOKING_COMPLETED = "booking_completed"
    DAILY_LOGIN = "daily_login"
    SHARE_APP = "share_app"
    REFERRAL = "referral"


class SubmissionStatus(str, Enum):
    """Moderation state of a place"""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
