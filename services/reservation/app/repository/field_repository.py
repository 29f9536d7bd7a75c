from __future__ import annotations

from typing import List, Optional

from sqlalchemy.orm import Session

from app.models.field import Field


def get_field(db: Session, field_id: int) -> Optional[Field]:
    return db.query(Field).filter(Field.id_field == field_id).first()


def lock_field(db: Session, field_id: int) -> Optional[Field]:
    """Fetch the field holding a row lock until the transaction ends.

    Booking admissions for the same field serialize on this lock. SQLite
    drops ``FOR UPDATE``; there the caller re-checks overlaps after its insert.
    """

    return (
        db.query(Field)
        .filter(Field.id_field == field_id)
        .populate_existing()
        .with_for_update()
        .first()
    )


def list_fields(
    db: Session,
    *,
    city: Optional[str] = None,
    sport_type: Optional[str] = None,
    owner_id: Optional[int] = None,
) -> List[Field]:
    query = db.query(Field)

    if city is not None:
        query = query.filter(Field.city.ilike(city))
    if sport_type is not None:
        query = query.filter(Field.sport_type == sport_type)
    if owner_id is not None:
        query = query.filter(Field.id_owner == owner_id)

    return query.order_by(Field.id_field).all()


def create_field(db: Session, field: Field) -> Field:
    db.add(field)
    db.flush()
    return field


def delete_field(db: Session, field: Field) -> None:
    db.delete(field)
    db.flush()
