from __future__ import annotations

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import List

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.review import Review
from app.repository import booking_repository, field_repository, review_repository
from app.schemas.review import ReviewCreate

logger = logging.getLogger(__name__)


class ReviewService:

    def __init__(self, db: Session):
        self.db = db

    def _ensure_field(self, field_id: int):
        field = field_repository.get_field(self.db, field_id)
        if field is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Field not found",
            )
        return field

    def list_field_reviews(self, field_id: int) -> List[Review]:
        self._ensure_field(field_id)
        return review_repository.list_field_reviews(self.db, field_id)

    def submit_review(self, payload: ReviewCreate, *, user_id: int) -> Review:
        """Create or replace the caller's review and refresh the field rating."""

        field = self._ensure_field(payload.id_field)

        if not booking_repository.has_confirmed_booking(self.db, field.id_field, user_id):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You must have a confirmed booking to leave a review",
            )

        try:
            review = review_repository.get_user_review(self.db, field.id_field, user_id)
            if review is None:
                review = review_repository.create_review(
                    self.db,
                    {
                        "id_field": field.id_field,
                        "id_user": user_id,
                        "rating": payload.rating,
                        "comment": payload.comment,
                    },
                )
            else:
                review.rating = payload.rating
                review.comment = payload.comment
                self.db.flush()

            average, count = review_repository.rating_summary(self.db, field.id_field)
            field.rating_avg = average.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
            field.rating_count = count
            self.db.commit()
            self.db.refresh(review)
        except IntegrityError as exc:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="You have already reviewed this field",
            ) from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Failed to store review for field %s", field.id_field)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to save review",
            ) from exc

        logger.info(
            "User %s rated field %s with %s (average %s over %s)",
            user_id,
            field.id_field,
            payload.rating,
            field.rating_avg,
            field.rating_count,
        )
        return review
