"""Scheduling schemas."""

from __future__ import annotations

from datetime import date, datetime, time
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_serializer

from lingomatch.core.enums import SlotStatusEnum


class SlotGenerateRequest(BaseModel):
    """Teacher-declared availability range for one day."""

    slot_date: date
    start_time: time
    end_time: time


class SlotRead(BaseModel):
    """Availability slot response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    teacher_id: UUID
    slot_date: date
    start_time: time
    end_time: time
    status: SlotStatusEnum
    created_at: datetime

    @field_serializer("start_time", "end_time")
    def serialize_time(self, value: time) -> str:
        return value.strftime("%H:%M")


class SlotDayGroup(BaseModel):
    """Slots of a single day in chronological order."""

    slot_date: date
    slots: list[SlotRead]
