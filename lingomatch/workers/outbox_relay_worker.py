"""Executable worker that relays outbox events to the change channel."""

from __future__ import annotations

import asyncio
import logging
import os

from lingomatch.core.database import transaction
from lingomatch.core.events import ChangeChannel, get_change_channel
from lingomatch.modules.changefeed.relay import OutboxRelay
from lingomatch.modules.changefeed.repository import ChangeFeedRepository

logger = logging.getLogger(__name__)


async def run_cycle(channel: ChangeChannel | None = None) -> dict[str, int]:
    """Run a single relay cycle in one DB transaction."""
    async with transaction() as session:
        relay = OutboxRelay(
            changefeed_repository=ChangeFeedRepository(session),
            channel=channel or get_change_channel(),
            batch_size=int(os.getenv("OUTBOX_RELAY_BATCH_SIZE", "100")),
            max_retries=int(os.getenv("OUTBOX_RELAY_MAX_RETRIES", "5")),
            base_backoff_seconds=int(os.getenv("OUTBOX_RELAY_BASE_BACKOFF_SECONDS", "30")),
            max_backoff_seconds=int(os.getenv("OUTBOX_RELAY_MAX_BACKOFF_SECONDS", "300")),
        )
        return await relay.run_once()


async def main() -> None:
    """Run once or keep polling according to worker mode."""
    logging.basicConfig(level=os.getenv("OUTBOX_RELAY_LOG_LEVEL", "INFO"))
    mode = os.getenv("OUTBOX_RELAY_MODE", "once").strip().lower()
    poll_seconds = int(os.getenv("OUTBOX_RELAY_POLL_SECONDS", "5"))

    if mode == "once":
        stats = await run_cycle()
        logger.info("Outbox relay stats: %s", stats)
        return

    while True:
        try:
            stats = await run_cycle()
            logger.info("Outbox relay stats: %s", stats)
        except Exception:
            logger.exception("Outbox relay cycle failed")
        await asyncio.sleep(poll_seconds)


if __name__ == "__main__":
    asyncio.run(main())
