"""Teachers business logic layer."""

from __future__ import annotations

import logging
from uuid import UUID

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from lingomatch.core.database import get_db_session
from lingomatch.core.enums import RoleEnum
from lingomatch.modules.identity.models import User
from lingomatch.modules.identity.repository import IdentityRepository
from lingomatch.modules.teachers.models import TeacherProfile
from lingomatch.modules.teachers.repository import TeachersRepository
from lingomatch.shared.exceptions import ForbiddenError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


class TeachersService:
    """Teacher rate card service."""

    def __init__(self, repository: TeachersRepository, identity_repository: IdentityRepository) -> None:
        self.repository = repository
        self.identity_repository = identity_repository

    async def _get_teacher(self, teacher_id: UUID) -> User:
        teacher = await self.identity_repository.get_user_by_id(teacher_id)
        if teacher is None or teacher.role != RoleEnum.TEACHER:
            raise NotFoundError("Teacher not found")
        return teacher

    async def set_hourly_rate(self, teacher_id: UUID, hourly_rate: int, actor: User) -> TeacherProfile:
        """Create or update the teacher rate card.

        Bookings already made keep the price captured when they were created.
        """
        if actor.role != RoleEnum.ADMIN and actor.id != teacher_id:
            raise ForbiddenError("Only the teacher or admin can change the hourly rate")
        if hourly_rate < 0:
            raise ValidationError("Hourly rate must not be negative")

        await self._get_teacher(teacher_id)
        profile = await self.repository.save_hourly_rate(teacher_id, hourly_rate)

        logger.info("Teacher %s hourly rate set to %s", teacher_id, hourly_rate)
        return profile

    async def get_hourly_rate(self, teacher_id: UUID) -> int | None:
        """Return current hourly rate or None when the teacher has not set one."""
        await self._get_teacher(teacher_id)
        profile = await self.repository.get_profile_by_user_id(teacher_id)
        if profile is None:
            return None
        return profile.hourly_rate


async def get_teachers_service(session: AsyncSession = Depends(get_db_session)) -> TeachersService:
    """Dependency provider for teachers service."""
    return TeachersService(TeachersRepository(session), IdentityRepository(session))
