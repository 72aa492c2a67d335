"""Teachers schemas."""

from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, Field


class HourlyRateUpdate(BaseModel):
    """Set teacher hourly rate request, in minor currency units."""

    hourly_rate: int = Field(ge=0)


class TeacherRateRead(BaseModel):
    """Teacher rate card response."""

    teacher_id: UUID
    hourly_rate: int | None
    currency: str
    display: str | None
