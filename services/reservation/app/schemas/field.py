"""Pydantic schemas for field resources."""

from __future__ import annotations

import json
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field as PydanticField,
    field_validator,
    model_validator,
)

from app.models.field import SportType

TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class DaySchedule(BaseModel):
    open: str = PydanticField("00:00", pattern=TIME_PATTERN)
    close: str = PydanticField("23:59", pattern=TIME_PATTERN)
    enabled: bool = True

    @model_validator(mode="after")
    def _validate_window(self) -> "DaySchedule":
        if self.enabled and self.open >= self.close:
            raise ValueError("open must be earlier than close")
        return self


class WorkingHours(BaseModel):
    """Weekly schedule; a missing day means the field is closed that day."""

    model_config = ConfigDict(extra="forbid")

    monday: Optional[DaySchedule] = None
    tuesday: Optional[DaySchedule] = None
    wednesday: Optional[DaySchedule] = None
    thursday: Optional[DaySchedule] = None
    friday: Optional[DaySchedule] = None
    saturday: Optional[DaySchedule] = None
    sunday: Optional[DaySchedule] = None

    def to_storage(self) -> Optional[str]:
        days = self.model_dump(exclude_none=True)
        return json.dumps(days) if days else None


class FieldBase(BaseModel):
    field_name: str = PydanticField(..., min_length=1, max_length=200)
    sport_type: SportType
    city: str = PydanticField(..., min_length=1, max_length=100)
    address: str = PydanticField(..., min_length=1)
    price_per_hour: Decimal = PydanticField(..., gt=0, max_digits=10, decimal_places=2)


class FieldCreate(FieldBase):
    working_hours: Optional[WorkingHours] = None


class FieldUpdate(BaseModel):
    field_name: Optional[str] = PydanticField(None, min_length=1, max_length=200)
    sport_type: Optional[SportType] = None
    city: Optional[str] = PydanticField(None, min_length=1, max_length=100)
    address: Optional[str] = PydanticField(None, min_length=1)
    price_per_hour: Optional[Decimal] = PydanticField(
        None, gt=0, max_digits=10, decimal_places=2
    )
    working_hours: Optional[WorkingHours] = None


class FieldResponse(FieldBase):
    model_config = ConfigDict(from_attributes=True)

    id_field: int
    id_owner: int
    working_hours: Optional[Dict[str, Any]] = None
    rating_avg: Decimal = Decimal("0")
    rating_count: int = 0
    created_at: Optional[datetime] = None

    @field_validator("working_hours", mode="before")
    @classmethod
    def _decode_working_hours(cls, value: Any) -> Any:
        if isinstance(value, str):
            try:
                decoded = json.loads(value)
            except ValueError:
                return None
            return decoded if isinstance(decoded, dict) else None
        return value


class FieldSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id_field: int
    field_name: str
    sport_type: str
    city: str


class FieldDeleteResponse(BaseModel):
    success: bool = True
    message: str


__all__ = [
    "DaySchedule",
    "FieldCreate",
    "FieldDeleteResponse",
    "FieldResponse",
    "FieldSummary",
    "FieldUpdate",
    "TIME_PATTERN",
    "WorkingHours",
]
