"""Booking ORM models."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import CheckConstraint, Enum as SAEnum, ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship

from lingomatch.core.database import Base, BaseModelMixin
from lingomatch.core.enums import BookingStatusEnum

if TYPE_CHECKING:
    from lingomatch.modules.matches.models import Match
    from lingomatch.modules.scheduling.models import AvailabilitySlot


class Booking(BaseModelMixin, Base):
    """Reservation of one slot by a student at a captured price."""

    __tablename__ = "bookings"
    __table_args__ = (CheckConstraint("price_at_booking >= 0", name="price_at_booking_non_negative"),)

    match_id: Mapped[UUID] = mapped_column(
        ForeignKey("matches.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    # One booking per slot: a second insert for the same slot fails.
    slot_id: Mapped[UUID] = mapped_column(
        ForeignKey("availability_slots.id", ondelete="RESTRICT"),
        nullable=False,
        unique=True,
    )
    student_id: Mapped[UUID] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    teacher_id: Mapped[UUID] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    price_at_booking: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[BookingStatusEnum] = mapped_column(
        SAEnum(BookingStatusEnum, name="booking_status_enum", native_enum=False),
        default=BookingStatusEnum.PENDING_PAYMENT,
        nullable=False,
        index=True,
    )

    slot: Mapped["AvailabilitySlot"] = relationship(back_populates="booking")
    match: Mapped["Match"] = relationship()
