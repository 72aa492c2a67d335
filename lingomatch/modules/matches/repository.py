"""Matches repository layer."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from lingomatch.core.enums import MatchStatusEnum
from lingomatch.modules.matches.models import Match


class MatchesRepository:
    """DB operations for the match registry."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create_match(self, teacher_id: UUID, student_id: UUID) -> Match:
        match = Match(teacher_id=teacher_id, student_id=student_id, status=MatchStatusEnum.ACTIVE)
        self.session.add(match)
        await self.session.flush()
        await self.session.refresh(match, attribute_names=["teacher", "student"])
        return match

    async def get_match_by_id(self, match_id: UUID) -> Match | None:
        stmt = (
            select(Match)
            .options(selectinload(Match.teacher), selectinload(Match.student))
            .where(Match.id == match_id)
        )
        return await self.session.scalar(stmt)

    async def get_match_by_pair(self, teacher_id: UUID, student_id: UUID) -> Match | None:
        stmt = select(Match).where(Match.teacher_id == teacher_id, Match.student_id == student_id)
        return await self.session.scalar(stmt)

    async def list_active_matches(self, user_id: UUID) -> list[Match]:
        stmt = (
            select(Match)
            .options(selectinload(Match.teacher), selectinload(Match.student))
            .where(
                or_(Match.teacher_id == user_id, Match.student_id == user_id),
                Match.status == MatchStatusEnum.ACTIVE,
            )
            .order_by(Match.created_at.desc())
        )
        return (await self.session.scalars(stmt)).all()

    async def set_status(self, match: Match, status: MatchStatusEnum) -> Match:
        match.status = status
        await self.session.flush()
        return match
