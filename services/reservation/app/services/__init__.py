"""Domain services for the reservation service."""

from app.services.booking_service import BookingService
from app.services.field_service import FieldService
from app.services.review_service import ReviewService

__all__ = ["BookingService", "FieldService", "ReviewService"]
