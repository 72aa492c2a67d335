"""Outbox relay that forwards committed changes to the change channel."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from lingomatch.core.events import ChangeChannel
from lingomatch.modules.changefeed.models import ChangeEvent
from lingomatch.modules.changefeed.repository import ChangeFeedRepository
from lingomatch.shared.utils import utc_now

logger = logging.getLogger(__name__)


class OutboxRelay:
    """Publish pending outbox events, retrying failed ones with backoff."""

    def __init__(
        self,
        changefeed_repository: ChangeFeedRepository,
        channel: ChangeChannel,
        *,
        batch_size: int = 100,
        max_retries: int = 5,
        base_backoff_seconds: int = 30,
        max_backoff_seconds: int = 300,
        now_provider=utc_now,
    ) -> None:
        self.changefeed_repository = changefeed_repository
        self.channel = channel
        self.batch_size = batch_size
        self.max_retries = max_retries
        self.base_backoff_seconds = base_backoff_seconds
        self.max_backoff_seconds = max_backoff_seconds
        self.now_provider = now_provider

    async def run_once(self) -> dict[str, int]:
        """Run one relay cycle."""
        stats = {"requeued": 0, "processed": 0, "failed": 0, "delivered": 0}
        stats["requeued"] = await self._requeue_retryable_failed_events()

        events = await self.changefeed_repository.claim_pending(limit=self.batch_size)
        for event in events:
            try:
                delivered = await self.channel.publish(event.event_type, self._message(event))
                await self.changefeed_repository.mark_delivered(event, self.now_provider())
                stats["processed"] += 1
                stats["delivered"] += delivered
            except Exception as exc:
                logger.warning("Outbox event %s (%s) failed: %s", event.id, event.event_type, exc)
                await self.changefeed_repository.mark_failed(event, str(exc))
                stats["failed"] += 1
        return stats

    @staticmethod
    def _message(event: ChangeEvent) -> dict:
        return {
            "event_id": str(event.id),
            "aggregate_type": event.aggregate_type,
            "aggregate_id": event.aggregate_id,
            "occurred_at": event.occurred_at.isoformat(),
            **(event.payload or {}),
        }

    async def _requeue_retryable_failed_events(self) -> int:
        now = self.now_provider()
        failed_events = await self.changefeed_repository.list_retryable(
            limit=self.batch_size,
            max_retries=self.max_retries,
        )
        requeued = 0
        for event in failed_events:
            if self._is_backoff_elapsed(event, now):
                await self.changefeed_repository.requeue(event)
                requeued += 1
        return requeued

    def _is_backoff_elapsed(self, event: ChangeEvent, now: datetime) -> bool:
        retries = max(event.retries, 1)
        backoff_seconds = min(
            self.max_backoff_seconds,
            self.base_backoff_seconds * (2 ** (retries - 1)),
        )
        last_attempt_at = event.updated_at or event.occurred_at
        return now >= last_attempt_at + timedelta(seconds=backoff_seconds)
