from __future__ import annotations

import logging
from datetime import date, datetime
from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.security import CurrentUser
from app.models.booking import Booking, BookingStatus
from app.models.field import Field
from app.repository import booking_repository, field_repository
from app.schemas.booking import BookingCreate
from app.services import admissibility
from app.services.admissibility import CandidateReservation, RejectionReason
from app.services.time_utils import hour_slots, reference_now

logger = logging.getLogger(__name__)


class BookingService:

    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def _raise_rejection(reason: RejectionReason) -> None:
        raise HTTPException(status_code=reason.status_code, detail=reason.message)

    def _get_field(self, field_id: int) -> Field:
        field = field_repository.get_field(self.db, field_id)
        if field is None:
            self._raise_rejection(RejectionReason.FIELD_NOT_FOUND)
        return field

    def get_booking(self, booking_id: int) -> Booking:
        booking = booking_repository.get_booking(self.db, booking_id)
        if booking is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Booking not found",
            )
        return booking

    def get_booking_for(self, booking_id: int, current_user: CurrentUser) -> Booking:
        booking = self.get_booking(booking_id)
        if booking.id_user != current_user.id_user and not current_user.is_admin:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You can only view your own bookings",
            )
        return booking

    def list_user_bookings(
        self,
        user_id: int,
        *,
        status_filter: Optional[str] = None,
    ) -> List[Booking]:

        return booking_repository.list_bookings(
            self.db,
            user_id=user_id,
            status_filter=status_filter,
            sort_desc=True,
        )

    def list_field_bookings(
        self,
        field_id: int,
        *,
        target_date: Optional[date] = None,
        status_filter: Optional[str] = None,
    ) -> List[Booking]:

        self._get_field(field_id)

        return booking_repository.list_bookings(
            self.db,
            field_id=field_id,
            target_date=target_date,
            status_filter=status_filter,
        )

    def create_booking(
        self,
        payload: BookingCreate,
        *,
        user_id: int,
        now: Optional[datetime] = None,
    ) -> Booking:
        """Admit and store a booking, or raise the rejection as an HTTP error.

        On PostgreSQL the field row lock serializes admissions for a field.
        SQLite ignores ``FOR UPDATE`` and only takes its write lock at the
        insert, so the overlap query is repeated after the flush, inside the
        same transaction, before committing.
        """

        candidate = CandidateReservation(
            id_field=payload.id_field,
            booking_date=payload.booking_date,
            start_time=payload.start_time,
            end_time=payload.end_time,
        )

        try:
            field = field_repository.lock_field(self.db, candidate.id_field)
            existing = (
                booking_repository.list_confirmed_bookings(
                    self.db, candidate.id_field, candidate.booking_date
                )
                if field is not None
                else []
            )

            decision = admissibility.evaluate(candidate, field, existing, reference_now(now))
            if not decision.admitted:
                self.db.rollback()
                logger.info(
                    "Rejected booking for field %s on %s %s-%s: %s",
                    candidate.id_field,
                    candidate.booking_date,
                    candidate.start_time,
                    candidate.end_time,
                    decision.reason.value,
                )
                self._raise_rejection(decision.reason)

            booking = booking_repository.create_booking(
                self.db,
                {
                    "id_field": candidate.id_field,
                    "id_user": user_id,
                    "booking_date": candidate.booking_date,
                    "start_time": candidate.start_time,
                    "end_time": candidate.end_time,
                    "total_price": decision.price,
                    "status": BookingStatus.CONFIRMED.value,
                },
            )

            # The insert holds the write lock now; anything committed between
            # the read above and this point is visible to this query.
            if booking_repository.find_overlapping_bookings(
                self.db,
                candidate.id_field,
                candidate.booking_date,
                candidate.start_time,
                candidate.end_time,
                exclude_id=booking.id_booking,
            ):
                self.db.rollback()
                logger.info(
                    "Overlap committed concurrently for field %s on %s %s-%s",
                    candidate.id_field,
                    candidate.booking_date,
                    candidate.start_time,
                    candidate.end_time,
                )
                self._raise_rejection(RejectionReason.CONFLICT)

            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.info(
                "Storage constraint rejected overlapping booking for field %s on %s",
                candidate.id_field,
                candidate.booking_date,
            )
            self._raise_rejection(RejectionReason.CONFLICT)
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Failed to store booking for field %s", candidate.id_field)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to create booking",
            ) from exc

        logger.info(
            "Booking %s confirmed for user %s on field %s (%s %s-%s, %s)",
            booking.id_booking,
            user_id,
            candidate.id_field,
            candidate.booking_date,
            candidate.start_time,
            candidate.end_time,
            decision.price,
        )
        return self.get_booking(booking.id_booking)

    def cancel_booking(
        self,
        booking_id: int,
        *,
        current_user: CurrentUser,
        now: Optional[datetime] = None,
    ) -> Booking:

        booking = self.get_booking(booking_id)

        if booking.id_user != current_user.id_user and not current_user.is_admin:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Unauthorized: You can only cancel your own bookings",
            )

        if booking.status == BookingStatus.CANCELLED.value:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Booking is already cancelled",
            )

        if not admissibility.can_cancel(booking, reference_now(now)):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=(
                    "Cannot cancel booking. Cancellation must be at least "
                    f"{settings.CANCELLATION_WINDOW_HOURS} hours before the booking time."
                ),
            )

        booking.status = BookingStatus.CANCELLED.value
        try:
            booking_repository.save_booking(self.db, booking)
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Failed to cancel booking %s", booking_id)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to cancel booking",
            ) from exc

        logger.info("Booking %s cancelled by user %s", booking_id, current_user.id_user)
        return booking

    def list_available_slots(
        self,
        field_id: int,
        *,
        target_date: Optional[date] = None,
        now: Optional[datetime] = None,
    ) -> List[dict]:
        """One-hour slots of the day that a booking request would currently pass."""

        field = self._get_field(field_id)
        local_now = reference_now(now)
        target_date = target_date or local_now.date()

        existing = booking_repository.list_confirmed_bookings(self.db, field_id, target_date)

        boundaries = hour_slots()
        slots: List[dict] = []
        for start_time, end_time in zip(boundaries, boundaries[1:]):

            candidate = CandidateReservation(
                id_field=field_id,
                booking_date=target_date,
                start_time=start_time,
                end_time=end_time,
            )
            decision = admissibility.evaluate(candidate, field, existing, local_now)
            if not decision.admitted:
                continue

            slots.append(
                {
                    "start_time": start_time,
                    "end_time": end_time,
                    "status": "available",
                    "price": decision.price,
                }
            )

        return slots
