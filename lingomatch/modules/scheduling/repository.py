"""Scheduling repository layer."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date, time
from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from lingomatch.core.enums import SlotStatusEnum
from lingomatch.modules.scheduling.models import AvailabilitySlot


class SchedulingRepository:
    """DB access for availability slots."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create_slots(
        self,
        teacher_id: UUID,
        slot_date: date,
        ranges: Sequence[tuple[time, time]],
    ) -> list[AvailabilitySlot]:
        slots = [
            AvailabilitySlot(
                teacher_id=teacher_id,
                slot_date=slot_date,
                start_time=start_time,
                end_time=end_time,
                status=SlotStatusEnum.AVAILABLE,
            )
            for start_time, end_time in ranges
        ]
        self.session.add_all(slots)
        await self.session.flush()
        return slots

    async def list_spans(self, teacher_id: UUID, slot_date: date) -> list[tuple[time, time]]:
        stmt = select(AvailabilitySlot.start_time, AvailabilitySlot.end_time).where(
            AvailabilitySlot.teacher_id == teacher_id,
            AvailabilitySlot.slot_date == slot_date,
        )
        return [(start_time, end_time) for start_time, end_time in await self.session.execute(stmt)]

    async def get_slot_by_id(self, slot_id: UUID, for_update: bool = False) -> AvailabilitySlot | None:
        stmt = select(AvailabilitySlot).where(AvailabilitySlot.id == slot_id)
        if for_update:
            stmt = stmt.with_for_update()
        return await self.session.scalar(stmt)

    def _ordered(self, stmt: Select[tuple[AvailabilitySlot]]) -> Select[tuple[AvailabilitySlot]]:
        return stmt.order_by(AvailabilitySlot.slot_date.asc(), AvailabilitySlot.start_time.asc())

    async def list_available_slots(self, teacher_id: UUID, from_date: date) -> list[AvailabilitySlot]:
        stmt = self._ordered(
            select(AvailabilitySlot).where(
                AvailabilitySlot.teacher_id == teacher_id,
                AvailabilitySlot.status == SlotStatusEnum.AVAILABLE,
                AvailabilitySlot.slot_date >= from_date,
            ),
        )
        return (await self.session.scalars(stmt)).all()

    async def list_all_slots(self, teacher_id: UUID) -> list[AvailabilitySlot]:
        stmt = self._ordered(select(AvailabilitySlot).where(AvailabilitySlot.teacher_id == teacher_id))
        return (await self.session.scalars(stmt)).all()

    async def lock_slots(self, slot_ids: Sequence[UUID]) -> list[AvailabilitySlot]:
        """Load slots with row locks held until the transaction ends.

        Rows are locked in id order so concurrent reservations of overlapping
        sets cannot deadlock.
        """
        stmt = (
            select(AvailabilitySlot)
            .where(AvailabilitySlot.id.in_(slot_ids))
            .order_by(AvailabilitySlot.id)
            .with_for_update()
        )
        return (await self.session.scalars(stmt)).all()

    async def set_slots_status(
        self,
        slots: Sequence[AvailabilitySlot],
        status: SlotStatusEnum,
    ) -> Sequence[AvailabilitySlot]:
        for slot in slots:
            slot.status = status
        await self.session.flush()
        return slots

    async def delete_slot(self, slot: AvailabilitySlot) -> None:
        await self.session.delete(slot)
        await self.session.flush()
