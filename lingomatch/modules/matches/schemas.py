"""Matches schemas."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from lingomatch.core.enums import MatchStatusEnum
from lingomatch.modules.identity.schemas import UserSummary


class MatchCreate(BaseModel):
    """Teacher accepts a student."""

    student_id: UUID


class MatchRead(BaseModel):
    """Match with both parties joined in."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    teacher_id: UUID
    student_id: UUID
    status: MatchStatusEnum
    teacher: UserSummary
    student: UserSummary
    created_at: datetime
