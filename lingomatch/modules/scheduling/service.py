"""Scheduling business logic layer."""

from __future__ import annotations

import logging
from datetime import date, time
from uuid import UUID

from fastapi import Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from lingomatch.core.database import get_db_session
from lingomatch.core.enums import RoleEnum, SlotStatusEnum
from lingomatch.core.metrics import SLOTS_GENERATED_TOTAL
from lingomatch.modules.changefeed.repository import ChangeFeedRepository
from lingomatch.modules.identity.models import User
from lingomatch.modules.identity.repository import IdentityRepository
from lingomatch.modules.scheduling.models import AvailabilitySlot
from lingomatch.modules.scheduling.repository import SchedulingRepository
from lingomatch.modules.scheduling.slots import generate_hourly_ranges, overlaps
from lingomatch.shared.exceptions import (
    ConflictError,
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from lingomatch.shared.utils import local_today

logger = logging.getLogger(__name__)


class SchedulingService:
    """Availability store: slot generation, listing and removal."""

    def __init__(
        self,
        repository: SchedulingRepository,
        identity_repository: IdentityRepository,
        changefeed_repository: ChangeFeedRepository,
    ) -> None:
        self.repository = repository
        self.identity_repository = identity_repository
        self.changefeed_repository = changefeed_repository

    def _ensure_owner(self, teacher_id: UUID, actor: User) -> None:
        if actor.role == RoleEnum.ADMIN:
            return
        if actor.role == RoleEnum.TEACHER and actor.id == teacher_id:
            return
        raise ForbiddenError("Only the teacher can manage their availability")

    async def _ensure_teacher_exists(self, teacher_id: UUID, lock: bool = False) -> None:
        teacher = await self.identity_repository.get_user_by_id(teacher_id, for_update=lock)
        if teacher is None or teacher.role != RoleEnum.TEACHER:
            raise NotFoundError("Teacher not found")

    async def generate_slots(
        self,
        teacher_id: UUID,
        slot_date: date | None,
        start_time: time | None,
        end_time: time | None,
        actor: User,
    ) -> list[AvailabilitySlot]:
        """Split the range into one-hour slots and store them as available.

        Hours that overlap a slot the teacher already has on that date are
        skipped. The teacher row is locked first, so concurrent generations
        for one teacher see each other's slots.
        """
        self._ensure_owner(teacher_id, actor)
        if slot_date is None:
            raise ValidationError("Slot date is required")
        ranges = generate_hourly_ranges(start_time, end_time)
        if slot_date < local_today():
            raise ValidationError("Slot date must not be in the past")
        await self._ensure_teacher_exists(teacher_id, lock=True)

        existing = await self.repository.list_spans(teacher_id, slot_date)
        fresh = [pair for pair in ranges if not any(overlaps(pair, span) for span in existing)]
        if len(fresh) < len(ranges):
            logger.info(
                "Skipping %d slot(s) overlapping existing ones for teacher %s on %s",
                len(ranges) - len(fresh),
                teacher_id,
                slot_date,
            )
        if not fresh:
            return []

        try:
            slots = await self.repository.create_slots(teacher_id, slot_date, fresh)
        except IntegrityError as exc:
            logger.warning("Slot generation for teacher %s on %s lost a race", teacher_id, slot_date)
            raise ConflictError("Some of these slots were just created, please reload") from exc
        SLOTS_GENERATED_TOTAL.inc(len(slots))
        await self.changefeed_repository.record(
            aggregate_type="availability",
            aggregate_id=str(teacher_id),
            event_type="availability.slots.generated",
            payload={
                "teacher_id": str(teacher_id),
                "slot_date": slot_date.isoformat(),
                "slot_ids": [str(slot.id) for slot in slots],
            },
        )
        logger.info("Generated %d slot(s) for teacher %s on %s", len(slots), teacher_id, slot_date)
        return slots

    async def list_available_slots(self, teacher_id: UUID, from_date: date | None = None) -> list[AvailabilitySlot]:
        """Available slots from ``from_date`` (default today), oldest first."""
        await self._ensure_teacher_exists(teacher_id)
        return await self.repository.list_available_slots(teacher_id, from_date or local_today())

    async def list_all_slots(self, teacher_id: UUID, actor: User) -> list[AvailabilitySlot]:
        """Every slot of the teacher regardless of status."""
        self._ensure_owner(teacher_id, actor)
        return await self.repository.list_all_slots(teacher_id)

    async def delete_slot(self, teacher_id: UUID, slot_id: UUID, actor: User) -> None:
        """Remove an unbooked slot."""
        self._ensure_owner(teacher_id, actor)

        slot = await self.repository.get_slot_by_id(slot_id, for_update=True)
        if slot is None:
            raise NotFoundError("Slot not found")
        if slot.teacher_id != teacher_id:
            raise ForbiddenError("Slot belongs to another teacher")
        if slot.status != SlotStatusEnum.AVAILABLE:
            raise InvalidStateError("Booked slots cannot be deleted")

        await self.repository.delete_slot(slot)
        await self.changefeed_repository.record(
            aggregate_type="availability",
            aggregate_id=str(teacher_id),
            event_type="availability.slot.deleted",
            payload={"teacher_id": str(teacher_id), "slot_id": str(slot_id)},
        )
        logger.info("Deleted slot %s of teacher %s", slot_id, teacher_id)


async def get_scheduling_service(session: AsyncSession = Depends(get_db_session)) -> SchedulingService:
    """Dependency provider for scheduling service."""
    return SchedulingService(
        repository=SchedulingRepository(session),
        identity_repository=IdentityRepository(session),
        changefeed_repository=ChangeFeedRepository(session),
    )
