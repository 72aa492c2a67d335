"""Hourly slot splitting.

Times are handled as minute-of-day integers for the arithmetic and rendered
back as zero-padded ``HH:MM``.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, time
from typing import Protocol, TypeVar

from lingomatch.shared.exceptions import ValidationError

SLOT_MINUTES = 60
MINUTES_PER_DAY = 24 * 60


def to_minutes(value: time) -> int:
    """Minute of day for a wall-clock time; seconds are ignored."""
    return value.hour * 60 + value.minute


def from_minutes(minutes: int) -> time:
    """Inverse of :func:`to_minutes`."""
    if not 0 <= minutes < MINUTES_PER_DAY:
        raise ValidationError(f"Minute of day out of range: {minutes}")
    return time(hour=minutes // 60, minute=minutes % 60)


def format_minutes(minutes: int) -> str:
    """Render minute of day as ``HH:MM``."""
    return from_minutes(minutes).strftime("%H:%M")


def parse_minutes(value: str) -> int:
    """Parse ``HH:MM`` (optionally ``HH:MM:SS``) into minute of day."""
    parts = value.strip().split(":")
    if len(parts) not in (2, 3) or not all(part.isdigit() for part in parts):
        raise ValidationError(f"Invalid time value: {value!r}")
    hours, minutes = int(parts[0]), int(parts[1])
    if hours > 23 or minutes > 59:
        raise ValidationError(f"Invalid time value: {value!r}")
    return hours * 60 + minutes


def span_minutes(start_time: time, end_time: time) -> tuple[int, int]:
    """Minute-of-day bounds of a span; an end of 00:00 after a later start is midnight."""
    start_minutes = to_minutes(start_time)
    end_minutes = to_minutes(end_time)
    if end_minutes == 0 and start_minutes > 0:
        end_minutes = MINUTES_PER_DAY
    return start_minutes, end_minutes


def overlaps(first: tuple[time, time], second: tuple[time, time]) -> bool:
    """True when two same-day spans share at least one minute."""
    first_start, first_end = span_minutes(*first)
    second_start, second_end = span_minutes(*second)
    return first_start < second_end and second_start < first_end


def split_range(start_minutes: int, end_minutes: int, slot_minutes: int = SLOT_MINUTES) -> list[tuple[int, int]]:
    """Carve ``[start, end)`` into back-to-back units, dropping a short tail.

    A range of 24:00 is expressed as ``end_minutes == MINUTES_PER_DAY``.
    """
    if end_minutes <= start_minutes:
        raise ValidationError("End time must be after start time")

    ranges: list[tuple[int, int]] = []
    cursor = start_minutes
    while cursor + slot_minutes <= end_minutes:
        ranges.append((cursor, cursor + slot_minutes))
        cursor += slot_minutes

    if not ranges:
        raise ValidationError("Minimum one hour required")
    return ranges


def generate_hourly_ranges(start_time: time | None, end_time: time | None) -> list[tuple[time, time]]:
    """Split a teacher-supplied time range into one-hour ``(start, end)`` pairs.

    >>> generate_hourly_ranges(time(9, 0), time(11, 30))
    [(datetime.time(9, 0), datetime.time(10, 0)), (datetime.time(10, 0), datetime.time(11, 0))]
    """
    if start_time is None or end_time is None:
        raise ValidationError("Start time and end time are required")
    if any(value.second or value.microsecond for value in (start_time, end_time)):
        raise ValidationError("Times must be whole minutes")

    start_minutes, end_minutes = span_minutes(start_time, end_time)

    pairs: list[tuple[time, time]] = []
    for slot_start, slot_end in split_range(start_minutes, end_minutes):
        # The last slot of the day ends at midnight.
        pairs.append((from_minutes(slot_start), from_minutes(slot_end % MINUTES_PER_DAY)))
    return pairs


class _DatedSlot(Protocol):
    slot_date: date
    start_time: time


SlotT = TypeVar("SlotT", bound=_DatedSlot)


def slot_sort_key(slot: _DatedSlot) -> tuple[date, time]:
    """Chronological order of slots: date first, then start time."""
    return slot.slot_date, slot.start_time


def group_by_date(slots: Iterable[SlotT]) -> dict[date, list[SlotT]]:
    """Group slots by day keeping the incoming order inside each day."""
    grouped: dict[date, list[SlotT]] = {}
    for slot in slots:
        grouped.setdefault(slot.slot_date, []).append(slot)
    return grouped
