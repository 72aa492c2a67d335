"""Scheduling API router."""

from __future__ import annotations

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from lingomatch.core.enums import RoleEnum
from lingomatch.modules.identity.service import get_current_user, require_roles
from lingomatch.modules.scheduling.schemas import SlotDayGroup, SlotGenerateRequest, SlotRead
from lingomatch.modules.scheduling.service import SchedulingService, get_scheduling_service
from lingomatch.modules.scheduling.slots import group_by_date

router = APIRouter(prefix="/scheduling", tags=["scheduling"])


@router.post("/slots/generate", response_model=list[SlotRead], status_code=status.HTTP_201_CREATED)
async def generate_slots(
    payload: SlotGenerateRequest,
    service: SchedulingService = Depends(get_scheduling_service),
    current_user=Depends(require_roles(RoleEnum.TEACHER)),
) -> list[SlotRead]:
    """Split a time range into hourly slots for the current teacher."""
    slots = await service.generate_slots(
        current_user.id,
        payload.slot_date,
        payload.start_time,
        payload.end_time,
        current_user,
    )
    return [SlotRead.model_validate(slot) for slot in slots]


@router.get("/teachers/{teacher_id}/slots/available", response_model=list[SlotRead])
async def list_available_slots(
    teacher_id: UUID,
    from_date: date | None = Query(default=None),
    service: SchedulingService = Depends(get_scheduling_service),
    _=Depends(get_current_user),
) -> list[SlotRead]:
    """List available slots of a teacher."""
    slots = await service.list_available_slots(teacher_id, from_date)
    return [SlotRead.model_validate(slot) for slot in slots]


@router.get("/teachers/{teacher_id}/slots/available/grouped", response_model=list[SlotDayGroup])
async def list_available_slots_by_day(
    teacher_id: UUID,
    from_date: date | None = Query(default=None),
    service: SchedulingService = Depends(get_scheduling_service),
    _=Depends(get_current_user),
) -> list[SlotDayGroup]:
    """List available slots of a teacher grouped by day."""
    slots = await service.list_available_slots(teacher_id, from_date)
    return [
        SlotDayGroup(slot_date=day, slots=[SlotRead.model_validate(slot) for slot in day_slots])
        for day, day_slots in group_by_date(slots).items()
    ]


@router.get("/slots/mine", response_model=list[SlotRead])
async def list_my_slots(
    service: SchedulingService = Depends(get_scheduling_service),
    current_user=Depends(require_roles(RoleEnum.TEACHER)),
) -> list[SlotRead]:
    """List every slot of the current teacher, available and booked."""
    slots = await service.list_all_slots(current_user.id, current_user)
    return [SlotRead.model_validate(slot) for slot in slots]


@router.delete("/slots/{slot_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_slot(
    slot_id: UUID,
    service: SchedulingService = Depends(get_scheduling_service),
    current_user=Depends(require_roles(RoleEnum.TEACHER)),
) -> None:
    """Delete an unbooked slot of the current teacher."""
    await service.delete_slot(current_user.id, slot_id, current_user)
