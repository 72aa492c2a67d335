"""Teachers API router."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends

from lingomatch.core.config import get_settings
from lingomatch.core.enums import RoleEnum
from lingomatch.modules.booking.pricing import format_cents
from lingomatch.modules.identity.service import get_current_user, require_roles
from lingomatch.modules.teachers.schemas import HourlyRateUpdate, TeacherRateRead
from lingomatch.modules.teachers.service import TeachersService, get_teachers_service

router = APIRouter(prefix="/teachers", tags=["teachers"])
settings = get_settings()


def _rate_read(teacher_id: UUID, hourly_rate: int | None) -> TeacherRateRead:
    return TeacherRateRead(
        teacher_id=teacher_id,
        hourly_rate=hourly_rate,
        currency=settings.currency,
        display=format_cents(hourly_rate) if hourly_rate is not None else None,
    )


@router.put("/me/rate", response_model=TeacherRateRead)
async def set_my_rate(
    payload: HourlyRateUpdate,
    service: TeachersService = Depends(get_teachers_service),
    current_user=Depends(require_roles(RoleEnum.TEACHER)),
) -> TeacherRateRead:
    """Set hourly rate for the authenticated teacher."""
    profile = await service.set_hourly_rate(current_user.id, payload.hourly_rate, current_user)
    return _rate_read(current_user.id, profile.hourly_rate)


@router.get("/{teacher_id}/rate", response_model=TeacherRateRead)
async def get_rate(
    teacher_id: UUID,
    service: TeachersService = Depends(get_teachers_service),
    _=Depends(get_current_user),
) -> TeacherRateRead:
    """Return teacher's current hourly rate."""
    hourly_rate = await service.get_hourly_rate(teacher_id)
    return _rate_read(teacher_id, hourly_rate)
