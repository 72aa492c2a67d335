"""Booking repository layer."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from uuid import UUID

from sqlalchemy import Select, event, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from lingomatch.core.enums import BookingStatusEnum, RoleEnum
from lingomatch.modules.booking.models import Booking
from lingomatch.modules.scheduling.models import AvailabilitySlot


class BookingRepository:
    """DB operations for booking domain."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create_pending_bookings(
        self,
        match_id: UUID,
        student_id: UUID,
        teacher_id: UUID,
        slots: Sequence[AvailabilitySlot],
        price_at_booking: int,
    ) -> list[Booking]:
        bookings = [
            Booking(
                match_id=match_id,
                slot_id=slot.id,
                student_id=student_id,
                teacher_id=teacher_id,
                price_at_booking=price_at_booking,
                status=BookingStatusEnum.PENDING_PAYMENT,
            )
            for slot in slots
        ]
        self.session.add_all(bookings)
        await self.session.flush()
        for booking in bookings:
            await self.session.refresh(booking, attribute_names=["slot"])
        return bookings

    def on_commit(self, callback: Callable[[], None]) -> None:
        """Run callback after the request transaction commits; never runs if it rolls back."""
        event.listen(self.session.sync_session, "after_commit", lambda _session: callback(), once=True)

    async def get_bookings_by_ids(self, booking_ids: Sequence[UUID]) -> list[Booking]:
        stmt = select(Booking).options(selectinload(Booking.slot)).where(Booking.id.in_(booking_ids))
        return (await self.session.scalars(stmt)).all()

    async def list_bookings(self, user_id: UUID, role_name: RoleEnum) -> list[Booking]:
        base_stmt: Select[tuple[Booking]] = select(Booking).options(selectinload(Booking.slot))

        if role_name == RoleEnum.STUDENT:
            base_stmt = base_stmt.where(Booking.student_id == user_id)
        elif role_name == RoleEnum.TEACHER:
            base_stmt = base_stmt.where(Booking.teacher_id == user_id)

        stmt = base_stmt.order_by(Booking.created_at.desc())
        return (await self.session.scalars(stmt)).all()
