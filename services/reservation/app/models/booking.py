from __future__ import annotations

import enum
from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from sqlalchemy import (
    BigInteger,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Numeric,
    String,
    func,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base, IdentifierType

if TYPE_CHECKING:  # pragma: no cover
    from app.models.field import Field


class BookingStatus(str, enum.Enum):
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"


_CONFIRMED_ONLY = text("status = 'CONFIRMED'")


class Booking(Base):
    """A reservation of a field for a time range on a single day."""

    __tablename__ = "booking"
    __table_args__ = (
        Index("ix_booking_field_date", "id_field", "booking_date"),
        # Storage-level guard against two confirmed rows starting in the same slot.
        Index(
            "uq_booking_confirmed_slot",
            "id_field",
            "booking_date",
            "start_time",
            unique=True,
            postgresql_where=_CONFIRMED_ONLY,
            sqlite_where=_CONFIRMED_ONLY,
        ),
    )

    id_booking: Mapped[int] = mapped_column(IdentifierType, primary_key=True, index=True)
    id_field: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("field.id_field", ondelete="CASCADE"), nullable=False
    )
    id_user: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    booking_date: Mapped[date] = mapped_column(Date, nullable=False)
    start_time: Mapped[str] = mapped_column(String(5), nullable=False)
    end_time: Mapped[str] = mapped_column(String(5), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=BookingStatus.CONFIRMED.value
    )
    total_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True, onupdate=func.now()
    )

    field: Mapped["Field"] = relationship("Field", back_populates="bookings", lazy="joined")

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return (
            f"<Booking(id_booking={self.id_booking}, id_field={self.id_field}, "
            f"date={self.booking_date}, {self.start_time}-{self.end_time}, "
            f"status={self.status})>"
        )
