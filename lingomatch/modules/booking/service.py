"""Booking engine: reserve slots for a student at a snapshotted price."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from fastapi import Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from lingomatch.core.config import get_settings
from lingomatch.core.database import get_db_session
from lingomatch.core.enums import MatchStatusEnum, RoleEnum, SlotStatusEnum
from lingomatch.core.metrics import BOOKING_CONFLICTS_TOTAL, BOOKINGS_CREATED_TOTAL
from lingomatch.modules.changefeed.repository import ChangeFeedRepository
from lingomatch.modules.booking.models import Booking
from lingomatch.modules.booking.pricing import snapshot_price, total_price
from lingomatch.modules.booking.repository import BookingRepository
from lingomatch.modules.booking.schemas import BookingCreateRequest
from lingomatch.modules.identity.models import User
from lingomatch.modules.matches.repository import MatchesRepository
from lingomatch.modules.scheduling.repository import SchedulingRepository
from lingomatch.modules.scheduling.slots import slot_sort_key
from lingomatch.modules.teachers.repository import TeachersRepository
from lingomatch.shared.exceptions import (
    ConflictError,
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from lingomatch.shared.utils import local_now

settings = get_settings()
logger = logging.getLogger(__name__)


@dataclass(slots=True)
class BookingBatch:
    """Bookings of one request in chronological slot order."""

    bookings: list[Booking]
    total_price: int
    payment_reference: str


def build_batch(bookings: Iterable[Booking]) -> BookingBatch:
    """Sort bookings by slot date and start time and total them up."""
    ordered = sorted(bookings, key=lambda booking: slot_sort_key(booking.slot))
    return BookingBatch(
        bookings=ordered,
        total_price=total_price(booking.price_at_booking for booking in ordered),
        payment_reference=",".join(str(booking.id) for booking in ordered),
    )


def parse_payment_reference(reference: str) -> list[UUID]:
    """Parse a comma-joined list of booking ids."""
    booking_ids: list[UUID] = []
    for chunk in reference.split(","):
        chunk = chunk.strip()
        if not chunk:
            continue
        try:
            booking_ids.append(UUID(chunk))
        except ValueError as exc:
            raise ValidationError(f"Invalid booking id: {chunk!r}") from exc
    if not booking_ids:
        raise ValidationError("Payment reference is empty")
    return booking_ids


def _unique(ids: Sequence[UUID]) -> list[UUID]:
    return list(dict.fromkeys(ids))


class BookingService:
    """All-or-nothing reservation of availability slots."""

    def __init__(
        self,
        booking_repository: BookingRepository,
        scheduling_repository: SchedulingRepository,
        matches_repository: MatchesRepository,
        teachers_repository: TeachersRepository,
        changefeed_repository: ChangeFeedRepository,
    ) -> None:
        self.booking_repository = booking_repository
        self.scheduling_repository = scheduling_repository
        self.matches_repository = matches_repository
        self.teachers_repository = teachers_repository
        self.changefeed_repository = changefeed_repository

    async def create_bookings(self, payload: BookingCreateRequest, actor: User) -> BookingBatch:
        """Reserve every requested slot or none of them.

        Slots are read under row locks, so of two requests racing for the same
        slot the second one sees it booked and fails with ConflictError. Any
        error leaves the request transaction to be rolled back whole.
        """
        if actor.role != RoleEnum.STUDENT:
            raise ForbiddenError("Only students can book lessons")

        slot_ids = _unique(payload.slot_ids)
        if not slot_ids:
            raise ValidationError("Select at least one slot")
        if len(slot_ids) > settings.max_slots_per_booking:
            raise ValidationError(f"At most {settings.max_slots_per_booking} slots can be booked at once")

        match = await self.matches_repository.get_match_by_id(payload.match_id)
        if match is None:
            raise NotFoundError("Match not found")
        if match.student_id != actor.id:
            raise ForbiddenError("Match does not belong to current student")
        if match.status != MatchStatusEnum.ACTIVE:
            raise InvalidStateError("Match is not active")
        if match.teacher_id != payload.teacher_id:
            raise ValidationError("Teacher does not belong to this match")

        profile = await self.teachers_repository.get_profile_by_user_id(match.teacher_id)
        price = snapshot_price(profile.hourly_rate if profile is not None else None)

        slots = await self.scheduling_repository.lock_slots(slot_ids)
        now = local_now()
        usable = {
            slot.id
            for slot in slots
            if slot.status == SlotStatusEnum.AVAILABLE
            and slot.teacher_id == match.teacher_id
            and datetime.combine(slot.slot_date, slot.start_time) > now
        }
        unavailable = [slot_id for slot_id in slot_ids if slot_id not in usable]
        if unavailable:
            BOOKING_CONFLICTS_TOTAL.inc()
            logger.warning(
                "Booking rejected for student %s: %d slot(s) no longer available",
                actor.id,
                len(unavailable),
            )
            raise ConflictError("Selection is no longer valid, please re-select")

        try:
            await self.scheduling_repository.set_slots_status(slots, SlotStatusEnum.BOOKED)
            bookings = await self.booking_repository.create_pending_bookings(
                match_id=match.id,
                student_id=actor.id,
                teacher_id=match.teacher_id,
                slots=slots,
                price_at_booking=price,
            )
        except IntegrityError as exc:
            BOOKING_CONFLICTS_TOTAL.inc()
            logger.warning("Booking rejected for student %s: concurrent reservation", actor.id)
            raise ConflictError("Selection is no longer valid, please re-select") from exc

        batch = build_batch(bookings)
        created_count = len(bookings)
        self.booking_repository.on_commit(lambda: BOOKINGS_CREATED_TOTAL.inc(created_count))
        await self.changefeed_repository.record(
            aggregate_type="booking",
            aggregate_id=batch.payment_reference,
            event_type="booking.created",
            payload={
                "booking_ids": [str(booking.id) for booking in batch.bookings],
                "slot_ids": [str(booking.slot_id) for booking in batch.bookings],
                "match_id": str(match.id),
                "student_id": str(actor.id),
                "teacher_id": str(match.teacher_id),
                "total_price": batch.total_price,
            },
        )
        logger.info(
            "Created %d booking(s) for student %s with teacher %s, total %d",
            len(bookings),
            actor.id,
            match.teacher_id,
            batch.total_price,
        )
        return batch

    async def get_checkout(self, booking_ids: Sequence[UUID], actor: User) -> BookingBatch:
        """Load bookings named by a payment reference."""
        booking_ids = _unique(booking_ids)
        if not booking_ids:
            raise ValidationError("No bookings requested")

        bookings = await self.booking_repository.get_bookings_by_ids(booking_ids)
        if len(bookings) != len(booking_ids):
            raise NotFoundError("Booking not found")

        if actor.role != RoleEnum.ADMIN:
            for booking in bookings:
                if actor.id not in (booking.student_id, booking.teacher_id):
                    raise ForbiddenError("You cannot view this booking")

        return build_batch(bookings)

    async def list_bookings(self, actor: User) -> list[Booking]:
        """List bookings for actor according to role, newest first."""
        return await self.booking_repository.list_bookings(actor.id, actor.role)


async def get_booking_service(session: AsyncSession = Depends(get_db_session)) -> BookingService:
    """Dependency provider for booking service."""
    return BookingService(
        booking_repository=BookingRepository(session),
        scheduling_repository=SchedulingRepository(session),
        matches_repository=MatchesRepository(session),
        teachers_repository=TeachersRepository(session),
        changefeed_repository=ChangeFeedRepository(session),
    )
