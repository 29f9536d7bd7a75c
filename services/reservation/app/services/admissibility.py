"""Decide whether a requested booking may become a confirmed reservation.

The functions in this module never touch the database or the system clock.
Callers fetch the field and that day's confirmed bookings, pass the current
instant explicitly and translate the returned decision into a response.
"""

from __future__ import annotations

import enum
import json
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Optional, Protocol, Union

from fastapi import status

from app.core.config import settings
from app.models.booking import BookingStatus
from app.services.time_utils import combine_reference, hour_of, to_reference_time, weekday_name

logger = logging.getLogger(__name__)

_DEFAULT_OPEN = "00:00"
_DEFAULT_CLOSE = "23:59"


class RejectionReason(str, enum.Enum):
    FIELD_NOT_FOUND = "FIELD_NOT_FOUND"
    PAST_TIME = "PAST_TIME"
    OUTSIDE_WORKING_HOURS = "OUTSIDE_WORKING_HOURS"
    CONFLICT = "CONFLICT"

    @property
    def status_code(self) -> int:
        if self is RejectionReason.FIELD_NOT_FOUND:
            return status.HTTP_404_NOT_FOUND
        return status.HTTP_400_BAD_REQUEST

    @property
    def message(self) -> str:
        return _REJECTION_MESSAGES[self]


_REJECTION_MESSAGES = {
    RejectionReason.FIELD_NOT_FOUND: "Field not found",
    RejectionReason.PAST_TIME: (
        "Cannot book a time slot in the past. Please select a future date and time."
    ),
    RejectionReason.OUTSIDE_WORKING_HOURS: (
        "Booking time is outside field working hours. Please select a time "
        "within the field's operating hours."
    ),
    RejectionReason.CONFLICT: "Time slot is already booked",
}


class FieldLike(Protocol):
    price_per_hour: Any
    working_hours: Optional[Union[str, Mapping[str, Any]]]


class TimeRange(Protocol):
    start_time: str
    end_time: str


@dataclass(frozen=True)
class CandidateReservation:
    id_field: int
    booking_date: date
    start_time: str
    end_time: str


@dataclass(frozen=True)
class AdmissionDecision:
    admitted: bool
    price: Optional[Decimal] = None
    reason: Optional[RejectionReason] = None

    @classmethod
    def admit(cls, price: Decimal) -> "AdmissionDecision":
        return cls(admitted=True, price=price)

    @classmethod
    def reject(cls, reason: RejectionReason) -> "AdmissionDecision":
        return cls(admitted=False, reason=reason)


def is_booking_time_in_past(booking_date: date, start_time: str, now: datetime) -> bool:
    """True when the slot starts at or before ``now`` on the reference clock."""

    local_now = to_reference_time(now)
    today = local_now.date()

    if booking_date < today:
        return True
    if booking_date == today:
        return combine_reference(booking_date, start_time) <= local_now
    return False


def load_working_hours(
    working_hours: Optional[Union[str, Mapping[str, Any]]],
) -> Optional[Mapping[str, Any]]:
    """Return the weekly schedule, or ``None`` when the field is unrestricted.

    Unset, blank and empty-object schedules all mean "no restriction", the
    same as a field saved without working hours. Text that is not a JSON
    object is logged and ignored.
    """

    if isinstance(working_hours, str):
        if not working_hours.strip():
            return None
        try:
            schedule = json.loads(working_hours)
        except ValueError:
            logger.warning("Ignoring unparseable working hours: %r", working_hours)
            return None
    else:
        schedule = working_hours

    if schedule is None:
        return None
    if not isinstance(schedule, Mapping):
        logger.warning("Ignoring working hours that are not an object: %r", working_hours)
        return None
    return schedule or None


def is_within_working_hours(
    booking_date: date,
    start_time: str,
    end_time: str,
    working_hours: Optional[Union[str, Mapping[str, Any]]],
) -> bool:
    schedule = load_working_hours(working_hours)
    if schedule is None:
        return True

    day_schedule = schedule.get(weekday_name(booking_date))
    if not isinstance(day_schedule, Mapping) or not day_schedule.get("enabled"):
        return False

    open_time = day_schedule.get("open") or _DEFAULT_OPEN
    close_time = day_schedule.get("close") or _DEFAULT_CLOSE
    if not isinstance(open_time, str) or not isinstance(close_time, str):
        logger.warning("Ignoring malformed working hours entry: %r", day_schedule)
        return True

    # zero-padded HH:MM strings order the same way as the times they encode
    return open_time <= start_time and end_time <= close_time


def overlaps(start_time: str, end_time: str, existing: TimeRange) -> bool:
    existing_start, existing_end = existing.start_time, existing.end_time
    return (
        (existing_start <= start_time < existing_end)
        or (existing_start < end_time <= existing_end)
        or (start_time <= existing_start and end_time >= existing_end)
    )


def find_conflict(
    start_time: str,
    end_time: str,
    existing_bookings: Iterable[TimeRange],
) -> Optional[TimeRange]:
    for booking in existing_bookings:
        booking_status = getattr(booking, "status", BookingStatus.CONFIRMED.value)
        if booking_status != BookingStatus.CONFIRMED.value:
            continue
        if overlaps(start_time, end_time, booking):
            return booking
    return None


def calculate_total_price(price_per_hour: Any, start_time: str, end_time: str) -> Decimal:
    """Whole-hour billing: minutes inside the hour are not prorated."""

    hours = hour_of(end_time) - hour_of(start_time)
    total = Decimal(str(price_per_hour)) * hours
    return total.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def evaluate(
    candidate: CandidateReservation,
    field: Optional[FieldLike],
    existing_bookings: Iterable[TimeRange],
    now: datetime,
) -> AdmissionDecision:
    """Run the admission checks in order and stop at the first failure."""

    if field is None:
        return AdmissionDecision.reject(RejectionReason.FIELD_NOT_FOUND)

    if is_booking_time_in_past(candidate.booking_date, candidate.start_time, now):
        return AdmissionDecision.reject(RejectionReason.PAST_TIME)

    if not is_within_working_hours(
        candidate.booking_date,
        candidate.start_time,
        candidate.end_time,
        field.working_hours,
    ):
        return AdmissionDecision.reject(RejectionReason.OUTSIDE_WORKING_HOURS)

    conflict = find_conflict(candidate.start_time, candidate.end_time, existing_bookings)
    if conflict is not None:
        logger.debug(
            "Candidate %s-%s on field %s overlaps %s-%s",
            candidate.start_time,
            candidate.end_time,
            candidate.id_field,
            conflict.start_time,
            conflict.end_time,
        )
        return AdmissionDecision.reject(RejectionReason.CONFLICT)

    return AdmissionDecision.admit(
        calculate_total_price(field.price_per_hour, candidate.start_time, candidate.end_time)
    )


def can_cancel(booking: Any, now: datetime, *, window_hours: Optional[int] = None) -> bool:
    """A confirmed booking may be cancelled until ``window_hours`` before it starts."""

    if getattr(booking, "status", BookingStatus.CONFIRMED.value) != BookingStatus.CONFIRMED.value:
        return False

    window = settings.CANCELLATION_WINDOW_HOURS if window_hours is None else window_hours
    starts_at = combine_reference(booking.booking_date, booking.start_time)
    return starts_at - to_reference_time(now) >= timedelta(hours=window)


__all__ = [
    "AdmissionDecision",
    "CandidateReservation",
    "RejectionReason",
    "calculate_total_price",
    "can_cancel",
    "evaluate",
    "find_conflict",
    "is_booking_time_in_past",
    "is_within_working_hours",
    "load_working_hours",
    "overlaps",
]
