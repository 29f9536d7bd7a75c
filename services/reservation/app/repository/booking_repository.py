from __future__ import annotations

from datetime import date
from typing import Dict, List, Optional

from sqlalchemy.orm import Session, joinedload

from app.models.booking import Booking, BookingStatus


def get_booking(db: Session, booking_id: int) -> Optional[Booking]:
    return (
        db.query(Booking)
        .options(joinedload(Booking.field))
        .filter(Booking.id_booking == booking_id)
        .first()
    )


def list_confirmed_bookings(db: Session, field_id: int, target_date: date) -> List[Booking]:
    return (
        db.query(Booking)
        .filter(Booking.id_field == field_id)
        .filter(Booking.booking_date == target_date)
        .filter(Booking.status == BookingStatus.CONFIRMED.value)
        .order_by(Booking.start_time)
        .all()
    )


def find_overlapping_bookings(
    db: Session,
    field_id: int,
    target_date: date,
    start_time: str,
    end_time: str,
    *,
    exclude_id: Optional[int] = None,
) -> List[Booking]:
    """Confirmed bookings of the field whose ``[start, end)`` range overlaps the given one."""

    query = (
        db.query(Booking)
        .filter(Booking.id_field == field_id)
        .filter(Booking.booking_date == target_date)
        .filter(Booking.status == BookingStatus.CONFIRMED.value)
        .filter(Booking.start_time < end_time)
        .filter(Booking.end_time > start_time)
    )
    if exclude_id is not None:
        query = query.filter(Booking.id_booking != exclude_id)
    return query.all()


def list_bookings(
    db: Session,
    *,
    user_id: Optional[int] = None,
    field_id: Optional[int] = None,
    target_date: Optional[date] = None,
    status_filter: Optional[str] = None,
    sort_desc: bool = False,
) -> List[Booking]:
    query = db.query(Booking).options(joinedload(Booking.field))

    if user_id is not None:
        query = query.filter(Booking.id_user == user_id)
    if field_id is not None:
        query = query.filter(Booking.id_field == field_id)
    if target_date is not None:
        query = query.filter(Booking.booking_date == target_date)
    if status_filter is not None:
        query = query.filter(Booking.status == status_filter.upper())

    if sort_desc:
        order_clauses = (Booking.booking_date.desc(), Booking.start_time.desc())
    else:
        order_clauses = (Booking.booking_date, Booking.start_time)

    return query.order_by(*order_clauses).all()


def create_booking(db: Session, booking_data: Dict[str, object]) -> Booking:
    booking = Booking(**booking_data)
    db.add(booking)
    db.flush()
    return booking


def save_booking(db: Session, booking: Booking) -> Booking:
    db.flush()
    db.commit()
    db.refresh(booking)
    return booking


def has_confirmed_booking(db: Session, field_id: int, user_id: int) -> bool:
    return (
        db.query(Booking.id_booking)
        .filter(Booking.id_field == field_id)
        .filter(Booking.id_user == user_id)
        .filter(Booking.status == BookingStatus.CONFIRMED.value)
        .first()
        is not None
    )
