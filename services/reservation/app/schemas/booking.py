"""Pydantic schemas for booking resources."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field as PydanticField, model_validator

from app.schemas.field import TIME_PATTERN, FieldSummary


class BookingCreate(BaseModel):
    """Schema used when a player requests a booking."""

    id_field: int = PydanticField(..., gt=0)
    booking_date: date
    start_time: str = PydanticField(..., pattern=TIME_PATTERN, examples=["18:00"])
    end_time: str = PydanticField(..., pattern=TIME_PATTERN, examples=["20:00"])

    @model_validator(mode="after")
    def _validate_time_range(self) -> "BookingCreate":
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class BookingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id_booking: int
    id_field: int
    id_user: int
    booking_date: date
    start_time: str
    end_time: str
    status: str
    total_price: Decimal
    created_at: Optional[datetime] = None
    field: Optional[FieldSummary] = None


class BookingCancelResponse(BaseModel):
    success: bool = True
    message: str
    booking: BookingResponse


class AvailableSlotResponse(BaseModel):
    start_time: str
    end_time: str
    status: str = "available"
    price: Decimal


__all__ = [
    "AvailableSlotResponse",
    "BookingCancelResponse",
    "BookingCreate",
    "BookingResponse",
]
