"""Identity business logic layer."""

from __future__ import annotations

from uuid import UUID

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from lingomatch.core.database import get_db_session
from lingomatch.core.enums import RoleEnum
from lingomatch.core.security import decode_token, oauth2_scheme
from lingomatch.modules.identity.models import User
from lingomatch.modules.identity.repository import IdentityRepository
from lingomatch.shared.exceptions import ForbiddenError


class IdentityService:
    """Resolve the actor supplied by the identity provider."""

    def __init__(self, repository: IdentityRepository) -> None:
        self.repository = repository

    async def get_user_from_access_token(self, token: str) -> User:
        """Resolve user from access token."""
        payload = decode_token(token)
        if payload.get("type") != "access":
            raise ForbiddenError("Invalid access token")

        subject = payload.get("sub")
        if not subject:
            raise ForbiddenError("Token subject is missing")

        try:
            user_id = UUID(subject)
        except ValueError as exc:
            raise ForbiddenError("Token subject is invalid") from exc

        user = await self.repository.get_user_by_id(user_id)
        if user is None:
            raise ForbiddenError("User not found")
        if not user.is_active:
            raise ForbiddenError("User is inactive")

        return user


async def get_identity_service(session: AsyncSession = Depends(get_db_session)) -> IdentityService:
    """Dependency to provide identity service."""
    return IdentityService(IdentityRepository(session))


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    service: IdentityService = Depends(get_identity_service),
) -> User:
    """Resolve currently authenticated user from bearer token."""
    return await service.get_user_from_access_token(token)


def require_roles(*roles: RoleEnum):
    """Dependency factory for role-based access."""

    async def _checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in roles:
            raise ForbiddenError("Operation not permitted for your role")
        return current_user

    return _checker
