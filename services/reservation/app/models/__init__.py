"""SQLAlchemy models for the reservation service."""
from app.models.booking import Booking, BookingStatus
from app.models.field import Field, SportType
from app.models.review import Review

__all__ = ["Booking", "BookingStatus", "Field", "Review", "SportType"]
