"""Scheduling ORM models."""

from __future__ import annotations

from datetime import date, time
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import Date, ForeignKey, Time, UniqueConstraint
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from lingomatch.core.database import Base, BaseModelMixin
from lingomatch.core.enums import SlotStatusEnum

if TYPE_CHECKING:
    from lingomatch.modules.booking.models import Booking


class AvailabilitySlot(BaseModelMixin, Base):
    """One hour of teacher availability on a given date."""

    __tablename__ = "availability_slots"
    __table_args__ = (
        UniqueConstraint(
            "teacher_id",
            "slot_date",
            "start_time",
            name="uq_availability_slots_teacher_id_slot_date_start_time",
        ),
    )

    teacher_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    slot_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    start_time: Mapped[time] = mapped_column(Time, nullable=False)
    end_time: Mapped[time] = mapped_column(Time, nullable=False)
    status: Mapped[SlotStatusEnum] = mapped_column(
        SAEnum(SlotStatusEnum, name="slot_status_enum", native_enum=False),
        default=SlotStatusEnum.AVAILABLE,
        nullable=False,
        index=True,
    )

    booking: Mapped[Booking | None] = relationship(back_populates="slot", uselist=False, passive_deletes=True)
