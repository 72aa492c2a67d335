from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

import pytest

from lingomatch.core.enums import OutboxStatusEnum
from lingomatch.core.events import InMemoryChangeChannel
from lingomatch.modules.changefeed.relay import OutboxRelay


@dataclass
class FakeChangeEvent:
    id: UUID
    event_type: str
    payload: dict
    aggregate_type: str = "booking"
    aggregate_id: str = "batch"
    status: OutboxStatusEnum = OutboxStatusEnum.PENDING
    retries: int = 0
    occurred_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    processed_at: datetime | None = None
    error_message: str | None = None


class FakeChangeFeedRepository:
    def __init__(self, events: list[FakeChangeEvent]) -> None:
        self.events = events

    async def claim_pending(self, limit: int) -> list[FakeChangeEvent]:
        return [event for event in self.events if event.status == OutboxStatusEnum.PENDING][:limit]

    async def list_retryable(self, limit: int, max_retries: int) -> list[FakeChangeEvent]:
        return [
            event
            for event in self.events
            if event.status == OutboxStatusEnum.FAILED and event.retries < max_retries
        ][:limit]

    async def requeue(self, event: FakeChangeEvent) -> FakeChangeEvent:
        event.status = OutboxStatusEnum.PENDING
        event.error_message = None
        return event

    async def mark_delivered(
        self,
        event: FakeChangeEvent,
        processed_at: datetime,
    ) -> FakeChangeEvent:
        event.status = OutboxStatusEnum.PROCESSED
        event.processed_at = processed_at
        event.error_message = None
        return event

    async def mark_failed(self, event: FakeChangeEvent, error_message: str) -> FakeChangeEvent:
        event.status = OutboxStatusEnum.FAILED
        event.retries += 1
        event.error_message = error_message
        return event


def make_relay(
    events: list[FakeChangeEvent],
    channel: InMemoryChangeChannel,
    *,
    now: datetime | None = None,
    base_backoff_seconds: int = 30,
) -> OutboxRelay:
    now_point = now or datetime.now(UTC)
    return OutboxRelay(
        changefeed_repository=FakeChangeFeedRepository(events),  # type: ignore[arg-type]
        channel=channel,
        now_provider=lambda: now_point,
        base_backoff_seconds=base_backoff_seconds,
    )


@pytest.mark.asyncio
async def test_relay_publishes_pending_events_and_marks_them_processed() -> None:
    channel = InMemoryChangeChannel()
    received: list[tuple[str, dict]] = []

    async def _collect(topic: str, payload: dict) -> None:
        received.append((topic, payload))

    channel.subscribe("booking.created", _collect)
    event = FakeChangeEvent(
        id=uuid4(),
        event_type="booking.created",
        payload={"teacher_id": "t-1", "slot_ids": ["s-1"]},
    )

    stats = await make_relay([event], channel).run_once()

    assert stats == {"requeued": 0, "processed": 1, "failed": 0, "delivered": 1}
    assert event.status == OutboxStatusEnum.PROCESSED
    assert event.processed_at is not None
    topic, payload = received[0]
    assert topic == "booking.created"
    assert payload["event_id"] == str(event.id)
    assert payload["aggregate_type"] == "booking"
    assert payload["slot_ids"] == ["s-1"]


@pytest.mark.asyncio
async def test_events_without_subscribers_are_still_processed() -> None:
    event = FakeChangeEvent(id=uuid4(), event_type="availability.slot.deleted", payload={})

    stats = await make_relay([event], InMemoryChangeChannel()).run_once()

    assert stats["processed"] == 1
    assert stats["delivered"] == 0
    assert event.status == OutboxStatusEnum.PROCESSED


@pytest.mark.asyncio
async def test_handler_failure_marks_event_failed() -> None:
    channel = InMemoryChangeChannel()

    async def _broken(topic: str, payload: dict) -> None:
        raise RuntimeError("subscriber down")

    channel.subscribe("booking.created", _broken)
    event = FakeChangeEvent(id=uuid4(), event_type="booking.created", payload={})

    stats = await make_relay([event], channel).run_once()

    assert stats["failed"] == 1
    assert event.status == OutboxStatusEnum.FAILED
    assert event.retries == 1
    assert event.error_message == "subscriber down"


@pytest.mark.asyncio
async def test_failed_event_is_not_requeued_before_backoff() -> None:
    now = datetime(2026, 10, 17, 12, 0, tzinfo=UTC)
    event = FakeChangeEvent(
        id=uuid4(),
        event_type="booking.created",
        payload={},
        status=OutboxStatusEnum.FAILED,
        retries=2,
        updated_at=now - timedelta(seconds=30),
    )

    stats = await make_relay([event], InMemoryChangeChannel(), now=now).run_once()

    assert stats["requeued"] == 0
    assert event.status == OutboxStatusEnum.FAILED


@pytest.mark.asyncio
async def test_failed_event_is_retried_after_backoff() -> None:
    now = datetime(2026, 10, 17, 12, 0, tzinfo=UTC)
    event = FakeChangeEvent(
        id=uuid4(),
        event_type="booking.created",
        payload={},
        status=OutboxStatusEnum.FAILED,
        retries=2,
        updated_at=now - timedelta(seconds=61),
    )

    stats = await make_relay([event], InMemoryChangeChannel(), now=now).run_once()

    assert stats["requeued"] == 1
    assert stats["processed"] == 1
    assert event.status == OutboxStatusEnum.PROCESSED
