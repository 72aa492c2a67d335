"""Matches business logic layer."""

from __future__ import annotations

import logging
from uuid import UUID

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from lingomatch.core.database import get_db_session
from lingomatch.core.enums import MatchStatusEnum, RoleEnum
from lingomatch.modules.identity.models import User
from lingomatch.modules.identity.repository import IdentityRepository
from lingomatch.modules.matches.models import Match
from lingomatch.modules.matches.repository import MatchesRepository
from lingomatch.shared.exceptions import (
    ConflictError,
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
)

logger = logging.getLogger(__name__)


class MatchesService:
    """Match registry service."""

    def __init__(self, repository: MatchesRepository, identity_repository: IdentityRepository) -> None:
        self.repository = repository
        self.identity_repository = identity_repository

    async def create_match(self, student_id: UUID, actor: User) -> Match:
        """Teacher picks a student to teach."""
        if actor.role != RoleEnum.TEACHER:
            raise ForbiddenError("Only teachers can create matches")

        student = await self.identity_repository.get_user_by_id(student_id)
        if student is None or student.role != RoleEnum.STUDENT:
            raise NotFoundError("Student not found")

        existing = await self.repository.get_match_by_pair(actor.id, student_id)
        if existing is not None:
            raise ConflictError("Match already exists")

        match = await self.repository.create_match(actor.id, student_id)
        logger.info("Match %s created: teacher=%s student=%s", match.id, actor.id, student_id)
        return match

    async def list_matches(self, actor: User) -> list[Match]:
        """List active matches where actor is either party."""
        return await self.repository.list_active_matches(actor.id)

    async def archive_match(self, match_id: UUID, actor: User) -> Match:
        """Archive match; bookings already made are kept."""
        match = await self.repository.get_match_by_id(match_id)
        if match is None:
            raise NotFoundError("Match not found")
        if actor.id not in (match.teacher_id, match.student_id):
            raise ForbiddenError("You are not part of this match")
        if match.status == MatchStatusEnum.ARCHIVED:
            raise InvalidStateError("Match is already archived")
        return await self.repository.set_status(match, MatchStatusEnum.ARCHIVED)


async def get_matches_service(session: AsyncSession = Depends(get_db_session)) -> MatchesService:
    """Dependency provider for matches service."""
    return MatchesService(MatchesRepository(session), IdentityRepository(session))
