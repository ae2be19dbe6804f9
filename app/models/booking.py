"""Booking database model."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import Date, DateTime, ForeignKey, Integer, Numeric, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base
from app.models.base import JSONType, utcnow

if TYPE_CHECKING:
    from app.models.package import TourPackage


class Booking(Base):
    """Booking model.

    The payment sub-record ({transaction_id, method, amount, paid_at}) is
    embedded and written in the same statement that sets payment_status=paid.
    """

    __tablename__ = "bookings"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    package_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("packages.id"), nullable=False, index=True
    )
    created_by: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    guide_email: Mapped[str | None] = mapped_column(String(255), index=True)

    # Tour details
    tour_date: Mapped[date | None] = mapped_column(Date)
    travelers: Mapped[int] = mapped_column(Integer, default=1)
    price: Mapped[float] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text)

    # Status
    booking_status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="pending", index=True
    )  # pending, in-review, guide_assigned, accepted, rejected
    payment_status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="unpaid", index=True
    )  # unpaid, paid
    payment: Mapped[dict[str, Any] | None] = mapped_column(JSONType)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    # Relationships
    package: Mapped["TourPackage"] = relationship("TourPackage", lazy="raise")
