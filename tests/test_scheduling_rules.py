from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from types import SimpleNamespace
from uuid import UUID, uuid4

import pytest
from sqlalchemy.exc import IntegrityError

import lingomatch.modules.scheduling.service as scheduling_service_module
from lingomatch.core.enums import RoleEnum, SlotStatusEnum
from lingomatch.modules.scheduling.service import SchedulingService
from lingomatch.shared.exceptions import (
    ConflictError,
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)

TODAY = date(2026, 10, 17)


@dataclass
class FakeSlot:
    id: UUID
    teacher_id: UUID
    slot_date: date
    start_time: time
    end_time: time
    status: SlotStatusEnum = SlotStatusEnum.AVAILABLE


class FakeSchedulingRepository:
    def __init__(self) -> None:
        self.slots: dict[UUID, FakeSlot] = {}

    def _ordered(self, slots: list[FakeSlot]) -> list[FakeSlot]:
        return sorted(slots, key=lambda slot: (slot.slot_date, slot.start_time))

    async def create_slots(self, teacher_id: UUID, slot_date: date, ranges) -> list[FakeSlot]:
        created = []
        for start_time, end_time in ranges:
            slot = FakeSlot(
                id=uuid4(),
                teacher_id=teacher_id,
                slot_date=slot_date,
                start_time=start_time,
                end_time=end_time,
            )
            self.slots[slot.id] = slot
            created.append(slot)
        return created

    async def list_spans(self, teacher_id: UUID, slot_date: date) -> list[tuple[time, time]]:
        return [
            (slot.start_time, slot.end_time)
            for slot in self.slots.values()
            if slot.teacher_id == teacher_id and slot.slot_date == slot_date
        ]

    async def get_slot_by_id(self, slot_id: UUID, for_update: bool = False) -> FakeSlot | None:
        return self.slots.get(slot_id)

    async def list_available_slots(self, teacher_id: UUID, from_date: date) -> list[FakeSlot]:
        return self._ordered(
            [
                slot
                for slot in self.slots.values()
                if slot.teacher_id == teacher_id
                and slot.status == SlotStatusEnum.AVAILABLE
                and slot.slot_date >= from_date
            ],
        )

    async def list_all_slots(self, teacher_id: UUID) -> list[FakeSlot]:
        return self._ordered([slot for slot in self.slots.values() if slot.teacher_id == teacher_id])

    async def delete_slot(self, slot: FakeSlot) -> None:
        del self.slots[slot.id]


class RacingSchedulingRepository(FakeSchedulingRepository):
    """Another request inserted the same hours between the read and the insert."""

    async def create_slots(self, teacher_id: UUID, slot_date: date, ranges) -> list[FakeSlot]:
        raise IntegrityError(
            "INSERT INTO availability_slots",
            {},
            Exception("uq_availability_slots_teacher_id_slot_date_start_time"),
        )


class FakeIdentityRepository:
    def __init__(self, users: dict[UUID, SimpleNamespace]) -> None:
        self.users = users

    async def get_user_by_id(self, user_id: UUID, for_update: bool = False) -> SimpleNamespace | None:
        return self.users.get(user_id)


class FakeChangeFeedRepository:
    def __init__(self) -> None:
        self.event_types: list[str] = []

    async def record(self, aggregate_type, aggregate_id, event_type, payload) -> None:
        self.event_types.append(event_type)


def make_user(role: RoleEnum) -> SimpleNamespace:
    return SimpleNamespace(id=uuid4(), role=role, passphrase_version=1)


def make_service(
    repository: FakeSchedulingRepository | None = None,
) -> tuple[SchedulingService, FakeSchedulingRepository, FakeChangeFeedRepository, SimpleNamespace]:
    teacher = make_user(RoleEnum.TEACHER)
    repository = repository or FakeSchedulingRepository()
    changefeed_repo = FakeChangeFeedRepository()
    service = SchedulingService(
        repository=repository,
        identity_repository=FakeIdentityRepository({teacher.id: teacher}),
        changefeed_repository=changefeed_repo,
    )
    return service, repository, changefeed_repo, teacher


@pytest.fixture(autouse=True)
def fixed_today(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(scheduling_service_module, "local_today", lambda: TODAY)


@pytest.mark.asyncio
async def test_generate_persists_available_hourly_slots() -> None:
    service, repository, changefeed_repo, teacher = make_service()

    slots = await service.generate_slots(teacher.id, TODAY, time(9, 0), time(11, 30), teacher)

    assert [(slot.start_time, slot.end_time) for slot in slots] == [
        (time(9, 0), time(10, 0)),
        (time(10, 0), time(11, 0)),
    ]
    assert all(slot.status == SlotStatusEnum.AVAILABLE for slot in repository.slots.values())
    assert changefeed_repo.event_types == ["availability.slots.generated"]


@pytest.mark.asyncio
async def test_short_range_persists_nothing() -> None:
    service, repository, changefeed_repo, teacher = make_service()

    with pytest.raises(ValidationError):
        await service.generate_slots(teacher.id, TODAY, time(9, 0), time(9, 30), teacher)

    assert repository.slots == {}
    assert changefeed_repo.event_types == []


@pytest.mark.asyncio
async def test_existing_hours_are_skipped() -> None:
    service, repository, _, teacher = make_service()
    await service.generate_slots(teacher.id, TODAY, time(9, 0), time(11, 0), teacher)

    created = await service.generate_slots(teacher.id, TODAY, time(10, 0), time(12, 0), teacher)

    assert [slot.start_time for slot in created] == [time(11, 0)]
    assert len(repository.slots) == 3


@pytest.mark.asyncio
async def test_regenerating_same_range_creates_nothing() -> None:
    service, repository, changefeed_repo, teacher = make_service()
    await service.generate_slots(teacher.id, TODAY, time(9, 0), time(10, 0), teacher)

    created = await service.generate_slots(teacher.id, TODAY, time(9, 0), time(10, 0), teacher)

    assert created == []
    assert len(repository.slots) == 1
    assert changefeed_repo.event_types == ["availability.slots.generated"]


@pytest.mark.asyncio
async def test_past_date_is_rejected() -> None:
    service, repository, _, teacher = make_service()

    with pytest.raises(ValidationError):
        await service.generate_slots(teacher.id, date(2026, 10, 16), time(9, 0), time(10, 0), teacher)
    assert repository.slots == {}


@pytest.mark.asyncio
async def test_missing_date_is_rejected() -> None:
    service, _, _, teacher = make_service()

    with pytest.raises(ValidationError):
        await service.generate_slots(teacher.id, None, time(9, 0), time(10, 0), teacher)


@pytest.mark.asyncio
async def test_other_users_cannot_generate_for_teacher() -> None:
    service, _, _, teacher = make_service()

    with pytest.raises(ForbiddenError):
        await service.generate_slots(teacher.id, TODAY, time(9, 0), time(10, 0), make_user(RoleEnum.STUDENT))
    with pytest.raises(ForbiddenError):
        await service.generate_slots(teacher.id, TODAY, time(9, 0), time(10, 0), make_user(RoleEnum.TEACHER))


@pytest.mark.asyncio
async def test_listing_is_ordered_and_repeatable() -> None:
    service, _, _, teacher = make_service()
    await service.generate_slots(teacher.id, date(2026, 10, 18), time(9, 0), time(10, 0), teacher)
    await service.generate_slots(teacher.id, TODAY, time(15, 0), time(17, 0), teacher)

    first = await service.list_available_slots(teacher.id)
    second = await service.list_available_slots(teacher.id)

    assert [(slot.slot_date, slot.start_time) for slot in first] == [
        (TODAY, time(15, 0)),
        (TODAY, time(16, 0)),
        (date(2026, 10, 18), time(9, 0)),
    ]
    assert [slot.id for slot in first] == [slot.id for slot in second]


@pytest.mark.asyncio
async def test_listing_hides_booked_and_earlier_slots() -> None:
    service, repository, _, teacher = make_service()
    slots = await service.generate_slots(teacher.id, TODAY, time(9, 0), time(11, 0), teacher)
    slots[0].status = SlotStatusEnum.BOOKED

    listed = await service.list_available_slots(teacher.id)
    later = await service.list_available_slots(teacher.id, date(2026, 10, 18))
    everything = await service.list_all_slots(teacher.id, teacher)

    assert [slot.id for slot in listed] == [slots[1].id]
    assert later == []
    assert len(everything) == 2


@pytest.mark.asyncio
async def test_listing_unknown_teacher_is_not_found() -> None:
    service, _, _, _ = make_service()

    with pytest.raises(NotFoundError):
        await service.list_available_slots(uuid4())


@pytest.mark.asyncio
async def test_booked_slot_cannot_be_deleted() -> None:
    service, repository, _, teacher = make_service()
    [slot] = await service.generate_slots(teacher.id, TODAY, time(9, 0), time(10, 0), teacher)
    slot.status = SlotStatusEnum.BOOKED

    with pytest.raises(InvalidStateError):
        await service.delete_slot(teacher.id, slot.id, teacher)

    assert slot.id in repository.slots


@pytest.mark.asyncio
async def test_available_slot_is_deleted_and_leaves_listing() -> None:
    service, repository, changefeed_repo, teacher = make_service()
    [slot] = await service.generate_slots(teacher.id, TODAY, time(9, 0), time(10, 0), teacher)

    await service.delete_slot(teacher.id, slot.id, teacher)

    assert slot.id not in repository.slots
    assert await service.list_available_slots(teacher.id) == []
    assert changefeed_repo.event_types[-1] == "availability.slot.deleted"


@pytest.mark.asyncio
async def test_delete_checks_existence_and_ownership() -> None:
    service, repository, _, teacher = make_service()
    foreign = FakeSlot(
        id=uuid4(),
        teacher_id=uuid4(),
        slot_date=TODAY,
        start_time=time(9, 0),
        end_time=time(10, 0),
    )
    repository.slots[foreign.id] = foreign

    with pytest.raises(NotFoundError):
        await service.delete_slot(teacher.id, uuid4(), teacher)
    with pytest.raises(ForbiddenError):
        await service.delete_slot(teacher.id, foreign.id, teacher)


@pytest.mark.asyncio
async def test_hours_overlapping_offset_slot_are_skipped() -> None:
    service, repository, _, teacher = make_service()
    await service.generate_slots(teacher.id, TODAY, time(9, 30), time(10, 30), teacher)

    created = await service.generate_slots(teacher.id, TODAY, time(8, 0), time(12, 0), teacher)

    assert [(slot.start_time, slot.end_time) for slot in created] == [
        (time(8, 0), time(9, 0)),
        (time(11, 0), time(12, 0)),
    ]
    spans = sorted((slot.start_time, slot.end_time) for slot in repository.slots.values())
    for (_, previous_end), (next_start, _) in zip(spans, spans[1:]):
        assert previous_end <= next_start


@pytest.mark.asyncio
async def test_slot_ending_at_midnight_blocks_the_last_hour() -> None:
    service, _, _, teacher = make_service()
    await service.generate_slots(teacher.id, TODAY, time(23, 0), time(0, 0), teacher)

    created = await service.generate_slots(teacher.id, TODAY, time(22, 30), time(0, 0), teacher)

    assert created == []


@pytest.mark.asyncio
async def test_concurrent_insert_of_same_hour_is_a_conflict() -> None:
    service, _, changefeed_repo, teacher = make_service(RacingSchedulingRepository())

    with pytest.raises(ConflictError):
        await service.generate_slots(teacher.id, TODAY, time(9, 0), time(10, 0), teacher)

    assert changefeed_repo.event_types == []
