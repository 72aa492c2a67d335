"""Change feed repository layer."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from lingomatch.core.enums import OutboxStatusEnum
from lingomatch.modules.changefeed.models import ChangeEvent


class ChangeFeedRepository:
    """Append and drain change events."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def record(
        self,
        aggregate_type: str,
        aggregate_id: str,
        event_type: str,
        payload: dict[str, Any],
    ) -> ChangeEvent:
        """Queue an event; it becomes visible only if the caller's transaction commits."""
        event = ChangeEvent(
            aggregate_type=aggregate_type,
            aggregate_id=aggregate_id,
            event_type=event_type,
            payload=payload,
        )
        self.session.add(event)
        await self.session.flush()
        return event

    async def claim_pending(self, limit: int) -> list[ChangeEvent]:
        """Oldest pending events, skipping rows another relay already holds."""
        stmt = (
            select(ChangeEvent)
            .where(ChangeEvent.status == OutboxStatusEnum.PENDING)
            .order_by(ChangeEvent.occurred_at)
            .limit(limit)
            .with_for_update(skip_locked=True)
        )
        return (await self.session.scalars(stmt)).all()

    async def list_retryable(self, limit: int, max_retries: int) -> list[ChangeEvent]:
        stmt = (
            select(ChangeEvent)
            .where(ChangeEvent.status == OutboxStatusEnum.FAILED, ChangeEvent.retries < max_retries)
            .order_by(ChangeEvent.updated_at)
            .limit(limit)
        )
        return (await self.session.scalars(stmt)).all()

    async def _save(self, event: ChangeEvent, status: OutboxStatusEnum, **fields: Any) -> ChangeEvent:
        event.status = status
        for name, value in fields.items():
            setattr(event, name, value)
        await self.session.flush()
        return event

    async def requeue(self, event: ChangeEvent) -> ChangeEvent:
        return await self._save(event, OutboxStatusEnum.PENDING, error_message=None)

    async def mark_delivered(self, event: ChangeEvent, delivered_at: datetime) -> ChangeEvent:
        return await self._save(event, OutboxStatusEnum.PROCESSED, processed_at=delivered_at, error_message=None)

    async def mark_failed(self, event: ChangeEvent, error_message: str) -> ChangeEvent:
        return await self._save(
            event,
            OutboxStatusEnum.FAILED,
            retries=event.retries + 1,
            error_message=error_message,
            processed_at=None,
        )
