from __future__ import annotations

from dataclasses import dataclass
from types import SimpleNamespace
from uuid import UUID, uuid4

import pytest

from lingomatch.core.enums import MatchStatusEnum, RoleEnum
from lingomatch.modules.matches.service import MatchesService
from lingomatch.modules.teachers.service import TeachersService
from lingomatch.shared.exceptions import (
    ConflictError,
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)


@dataclass
class FakeMatch:
    id: UUID
    teacher_id: UUID
    student_id: UUID
    status: MatchStatusEnum = MatchStatusEnum.ACTIVE


@dataclass
class FakeProfile:
    user_id: UUID
    hourly_rate: int | None


class FakeIdentityRepository:
    def __init__(self, *users: SimpleNamespace) -> None:
        self.users = {user.id: user for user in users}

    async def get_user_by_id(self, user_id: UUID) -> SimpleNamespace | None:
        return self.users.get(user_id)


class FakeMatchesRepository:
    def __init__(self) -> None:
        self.matches: list[FakeMatch] = []

    async def create_match(self, teacher_id: UUID, student_id: UUID) -> FakeMatch:
        match = FakeMatch(id=uuid4(), teacher_id=teacher_id, student_id=student_id)
        self.matches.append(match)
        return match

    async def get_match_by_id(self, match_id: UUID) -> FakeMatch | None:
        return next((match for match in self.matches if match.id == match_id), None)

    async def get_match_by_pair(self, teacher_id: UUID, student_id: UUID) -> FakeMatch | None:
        return next(
            (match for match in self.matches if (match.teacher_id, match.student_id) == (teacher_id, student_id)),
            None,
        )

    async def list_active_matches(self, user_id: UUID) -> list[FakeMatch]:
        return [
            match
            for match in reversed(self.matches)
            if match.status == MatchStatusEnum.ACTIVE and user_id in (match.teacher_id, match.student_id)
        ]

    async def set_status(self, match: FakeMatch, status: MatchStatusEnum) -> FakeMatch:
        match.status = status
        return match


class FakeTeachersRepository:
    def __init__(self) -> None:
        self.profiles: dict[UUID, FakeProfile] = {}

    async def get_profile_by_user_id(self, user_id: UUID) -> FakeProfile | None:
        return self.profiles.get(user_id)

    async def save_hourly_rate(self, user_id: UUID, hourly_rate: int) -> FakeProfile:
        profile = self.profiles.setdefault(user_id, FakeProfile(user_id=user_id, hourly_rate=None))
        profile.hourly_rate = hourly_rate
        return profile


def make_user(role: RoleEnum) -> SimpleNamespace:
    return SimpleNamespace(id=uuid4(), role=role, passphrase_version=0)


@pytest.mark.asyncio
async def test_teacher_creates_and_lists_match() -> None:
    teacher, student = make_user(RoleEnum.TEACHER), make_user(RoleEnum.STUDENT)
    service = MatchesService(FakeMatchesRepository(), FakeIdentityRepository(teacher, student))

    match = await service.create_match(student.id, teacher)

    assert match.teacher_id == teacher.id
    assert match.student_id == student.id
    assert [item.id for item in await service.list_matches(student)] == [match.id]


@pytest.mark.asyncio
async def test_duplicate_match_is_a_conflict() -> None:
    teacher, student = make_user(RoleEnum.TEACHER), make_user(RoleEnum.STUDENT)
    service = MatchesService(FakeMatchesRepository(), FakeIdentityRepository(teacher, student))
    await service.create_match(student.id, teacher)

    with pytest.raises(ConflictError):
        await service.create_match(student.id, teacher)


@pytest.mark.asyncio
async def test_match_rules_for_roles_and_targets() -> None:
    teacher, student = make_user(RoleEnum.TEACHER), make_user(RoleEnum.STUDENT)
    other_teacher = make_user(RoleEnum.TEACHER)
    service = MatchesService(FakeMatchesRepository(), FakeIdentityRepository(teacher, student, other_teacher))

    with pytest.raises(ForbiddenError):
        await service.create_match(teacher.id, student)
    with pytest.raises(NotFoundError):
        await service.create_match(other_teacher.id, teacher)
    with pytest.raises(NotFoundError):
        await service.create_match(uuid4(), teacher)


@pytest.mark.asyncio
async def test_archive_match() -> None:
    teacher, student = make_user(RoleEnum.TEACHER), make_user(RoleEnum.STUDENT)
    service = MatchesService(FakeMatchesRepository(), FakeIdentityRepository(teacher, student))
    match = await service.create_match(student.id, teacher)

    with pytest.raises(ForbiddenError):
        await service.archive_match(match.id, make_user(RoleEnum.STUDENT))

    archived = await service.archive_match(match.id, student)

    assert archived.status == MatchStatusEnum.ARCHIVED
    assert await service.list_matches(teacher) == []
    with pytest.raises(InvalidStateError):
        await service.archive_match(match.id, teacher)


@pytest.mark.asyncio
async def test_teacher_sets_and_updates_rate() -> None:
    teacher = make_user(RoleEnum.TEACHER)
    service = TeachersService(FakeTeachersRepository(), FakeIdentityRepository(teacher))

    assert await service.get_hourly_rate(teacher.id) is None

    await service.set_hourly_rate(teacher.id, 3000, teacher)
    profile = await service.set_hourly_rate(teacher.id, 3500, teacher)

    assert profile.hourly_rate == 3500
    assert await service.get_hourly_rate(teacher.id) == 3500


@pytest.mark.asyncio
async def test_rate_changes_are_restricted() -> None:
    teacher = make_user(RoleEnum.TEACHER)
    admin = make_user(RoleEnum.ADMIN)
    service = TeachersService(FakeTeachersRepository(), FakeIdentityRepository(teacher, admin))

    with pytest.raises(ForbiddenError):
        await service.set_hourly_rate(teacher.id, 3000, make_user(RoleEnum.TEACHER))
    with pytest.raises(ValidationError):
        await service.set_hourly_rate(teacher.id, -5, teacher)
    with pytest.raises(NotFoundError):
        await service.get_hourly_rate(admin.id)

    profile = await service.set_hourly_rate(teacher.id, 2000, admin)
    assert profile.hourly_rate == 2000
