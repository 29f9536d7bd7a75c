from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import (
    BigInteger,
    DateTime,
    ForeignKey,
    SmallInteger,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base, IdentifierType

if TYPE_CHECKING:  # pragma: no cover
    from app.models.field import Field


class Review(Base):
    """A player's 1-5 rating of a field; one per player and field."""

    __tablename__ = "review"
    __table_args__ = (
        UniqueConstraint("id_field", "id_user", name="uq_review_field_user"),
    )

    id_review: Mapped[int] = mapped_column(IdentifierType, primary_key=True, index=True)
    id_field: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("field.id_field", ondelete="CASCADE"), nullable=False, index=True
    )
    id_user: Mapped[int] = mapped_column(BigInteger, nullable=False)
    rating: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    comment: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True, onupdate=func.now()
    )

    field: Mapped["Field"] = relationship("Field", back_populates="reviews")

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<Review(id_review={self.id_review}, id_field={self.id_field}, rating={self.rating})>"
