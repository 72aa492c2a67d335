"""Shared utility functions."""

from __future__ import annotations

from datetime import UTC, date, datetime
from zoneinfo import ZoneInfo

from lingomatch.core.config import get_settings


def utc_now() -> datetime:
    """Return aware UTC datetime."""
    return datetime.now(UTC)


def local_now() -> datetime:
    """Naive wall-clock time in the marketplace timezone, comparable with slot dates and times."""
    return utc_now().astimezone(ZoneInfo(get_settings().timezone)).replace(tzinfo=None)


def local_today() -> date:
    """Return today's date in the marketplace timezone."""
    return local_now().date()
