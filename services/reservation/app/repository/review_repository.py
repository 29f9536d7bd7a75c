from __future__ import annotations

from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.review import Review


def get_user_review(db: Session, field_id: int, user_id: int) -> Optional[Review]:
    return (
        db.query(Review)
        .filter(Review.id_field == field_id)
        .filter(Review.id_user == user_id)
        .first()
    )


def list_field_reviews(db: Session, field_id: int) -> List[Review]:
    return (
        db.query(Review)
        .filter(Review.id_field == field_id)
        .order_by(Review.created_at.desc(), Review.id_review.desc())
        .all()
    )


def create_review(db: Session, review_data: Dict[str, object]) -> Review:
    review = Review(**review_data)
    db.add(review)
    db.flush()
    return review


def rating_summary(db: Session, field_id: int) -> Tuple[Decimal, int]:
    """Average rating and number of reviews for the field."""

    average, count = (
        db.query(func.avg(Review.rating), func.count(Review.id_review))
        .filter(Review.id_field == field_id)
        .one()
    )
    if not count:
        return Decimal("0"), 0
    return Decimal(str(average)), int(count)
