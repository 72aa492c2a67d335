"""Teacher rate card repository layer."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from lingomatch.modules.teachers.models import TeacherProfile


class TeachersRepository:
    """Reads and writes teacher profiles."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_profile_by_user_id(self, user_id: UUID) -> TeacherProfile | None:
        return await self.session.scalar(select(TeacherProfile).where(TeacherProfile.user_id == user_id))

    async def save_hourly_rate(self, user_id: UUID, hourly_rate: int) -> TeacherProfile:
        """Set the rate, creating the profile on first use.

        The profile row is locked so two concurrent edits apply in order.
        """
        stmt = select(TeacherProfile).where(TeacherProfile.user_id == user_id).with_for_update()
        profile = await self.session.scalar(stmt)
        if profile is None:
            profile = TeacherProfile(user_id=user_id)
            self.session.add(profile)
        profile.hourly_rate = hourly_rate
        await self.session.flush()
        return profile
