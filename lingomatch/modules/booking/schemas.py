"""Booking schemas."""

from __future__ import annotations

from datetime import date, datetime, time
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from lingomatch.core.enums import BookingStatusEnum


class BookingCreateRequest(BaseModel):
    """Reserve one or more slots of the matched teacher."""

    match_id: UUID
    teacher_id: UUID
    slot_ids: list[UUID] = Field(default_factory=list)


class BookingSlotRead(BaseModel):
    """Slot details joined into a booking."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    slot_date: date
    start_time: time
    end_time: time

    @field_serializer("start_time", "end_time")
    def serialize_time(self, value: time) -> str:
        return value.strftime("%H:%M")


class BookingRead(BaseModel):
    """Booking response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    match_id: UUID
    slot_id: UUID
    student_id: UUID
    teacher_id: UUID
    price_at_booking: int
    status: BookingStatusEnum
    slot: BookingSlotRead
    created_at: datetime
    updated_at: datetime


class BookingBatchRead(BaseModel):
    """Bookings handed to the payment step."""

    bookings: list[BookingRead]
    total_price: int
    total_display: str
    currency: str
    payment_reference: str
    payment_available: bool = False
