"""Pydantic schemas for the reservation service."""

from app.schemas.booking import (
    AvailableSlotResponse,
    BookingCancelResponse,
    BookingCreate,
    BookingResponse,
)
from app.schemas.field import (
    DaySchedule,
    FieldCreate,
    FieldDeleteResponse,
    FieldResponse,
    FieldSummary,
    FieldUpdate,
    WorkingHours,
)
from app.schemas.review import ReviewCreate, ReviewResponse

__all__ = [
    "AvailableSlotResponse",
    "BookingCancelResponse",
    "BookingCreate",
    "BookingResponse",
    "DaySchedule",
    "FieldCreate",
    "FieldDeleteResponse",
    "FieldResponse",
    "FieldSummary",
    "FieldUpdate",
    "ReviewCreate",
    "ReviewResponse",
    "WorkingHours",
]
