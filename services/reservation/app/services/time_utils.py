"""Date and time helpers anchored to the business reference clock (UTC+4)."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import List, Optional

from app.core.config import settings

REFERENCE_TZ = timezone(
    timedelta(hours=settings.REFERENCE_UTC_OFFSET_HOURS),
    name="Asia/Baku",
)

_WEEKDAY_NAMES = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)


def to_reference_time(moment: datetime) -> datetime:
    """Express ``moment`` on the reference clock. Naive values are taken as UTC."""

    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(REFERENCE_TZ)


def reference_now(now: Optional[datetime] = None) -> datetime:
    return to_reference_time(now or datetime.now(timezone.utc))


def parse_hhmm(value: str) -> time:
    """Parse a zero-padded ``HH:MM`` string."""

    hours, minutes = value.split(":")
    return time(int(hours), int(minutes))


def format_hhmm(value: time) -> str:
    return f"{value.hour:02d}:{value.minute:02d}"


def hour_of(value: str) -> int:
    return int(value.split(":")[0])


def weekday_name(value: date) -> str:
    return _WEEKDAY_NAMES[value.weekday()]


def combine_reference(value: date, hhmm: str) -> datetime:
    """Aware datetime for ``hhmm`` on ``value`` on the reference clock."""

    return datetime.combine(value, parse_hhmm(hhmm), tzinfo=REFERENCE_TZ)


def hour_slots() -> List[str]:
    return [f"{hour:02d}:00" for hour in range(24)]


__all__ = [
    "REFERENCE_TZ",
    "combine_reference",
    "format_hhmm",
    "hour_of",
    "hour_slots",
    "parse_hhmm",
    "reference_now",
    "to_reference_time",
    "weekday_name",
]
