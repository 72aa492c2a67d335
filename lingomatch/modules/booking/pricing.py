"""Price snapshot helpers.

All amounts are integers in minor currency units (cents).
"""

from __future__ import annotations

from collections.abc import Iterable

from lingomatch.shared.exceptions import ValidationError


def snapshot_price(hourly_rate: int | None) -> int:
    """Capture the flat hourly rate owed for one booked slot.

    A booking is always one hour, so the snapshot is the rate itself. The
    returned value is copied into the booking and never recalculated.
    """
    if hourly_rate is None:
        raise ValidationError("Teacher has not set an hourly rate")
    if hourly_rate < 0:
        raise ValidationError("Hourly rate must not be negative")
    return int(hourly_rate)


def total_price(prices: Iterable[int]) -> int:
    """Amount handed to the payment step for a batch of bookings."""
    return sum(prices)


def format_cents(amount: int) -> str:
    """Render cents as a fixed two-decimal string, ``3000 -> "30.00"``."""
    sign = "-" if amount < 0 else ""
    units, cents = divmod(abs(amount), 100)
    return f"{sign}{units}.{cents:02d}"
