from __future__ import annotations

import enum
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from sqlalchemy import BigInteger, DateTime, Integer, Numeric, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base, IdentifierType

if TYPE_CHECKING:  # pragma: no cover
    from app.models.booking import Booking
    from app.models.review import Review


class SportType(str, enum.Enum):
    FOOTBALL = "football"
    BASKETBALL = "basketball"
    PADEL = "padel"
    TENNIS = "tennis"


class Field(Base):
    """A bookable sports venue owned by an approved owner."""

    __tablename__ = "field"

    id_field: Mapped[int] = mapped_column(IdentifierType, primary_key=True, index=True)
    field_name: Mapped[str] = mapped_column(String(200), nullable=False)
    sport_type: Mapped[str] = mapped_column(String(30), nullable=False)
    city: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    address: Mapped[str] = mapped_column(Text, nullable=False)
    price_per_hour: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    # JSON weekly schedule; NULL means the field accepts any hour
    working_hours: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    id_owner: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    rating_avg: Mapped[Decimal] = mapped_column(
        Numeric(3, 2), nullable=False, default=Decimal("0"), server_default="0"
    )
    rating_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default="0"
    )

    bookings: Mapped[list["Booking"]] = relationship(
        "Booking", back_populates="field", cascade="all, delete-orphan"
    )
    reviews: Mapped[list["Review"]] = relationship(
        "Review", back_populates="field", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<Field(id_field={self.id_field}, name={self.field_name})>"
