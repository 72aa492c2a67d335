"""Core enums used across modules."""

from enum import StrEnum


class RoleEnum(StrEnum):
    """System roles."""

    STUDENT = "student"
    TEACHER = "teacher"
    ADMIN = "admin"


class SlotStatusEnum(StrEnum):
    """Availability slot status."""

    AVAILABLE = "available"
    BOOKED = "booked"


class BookingStatusEnum(StrEnum):
    """Booking lifecycle status."""

    PENDING_PAYMENT = "pending_payment"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class MatchStatusEnum(StrEnum):
    """Teacher-student match status."""

    ACTIVE = "active"
    ARCHIVED = "archived"


class OutboxStatusEnum(StrEnum):
    """Outbox event status for change feed publishing."""

    PENDING = "pending"
    PROCESSED = "processed"
    FAILED = "failed"
