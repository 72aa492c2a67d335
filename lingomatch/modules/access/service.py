"""Versioned passphrase gate.

The current configuration is fetched explicitly and handed to
``needs_reverification``; rotating the passphrase writes a new version and
every member with an older version must enter it again.
"""

from __future__ import annotations

import hmac
import logging

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from lingomatch.core.database import get_db_session
from lingomatch.core.enums import RoleEnum
from lingomatch.modules.access.models import AccessConfig
from lingomatch.modules.access.repository import AccessRepository
from lingomatch.modules.identity.models import User
from lingomatch.modules.identity.repository import IdentityRepository
from lingomatch.modules.identity.service import get_current_user
from lingomatch.shared.exceptions import ForbiddenError, ValidationError

logger = logging.getLogger(__name__)


def needs_reverification(user_version: int, config: AccessConfig | None, role: RoleEnum | None = None) -> bool:
    """Return True when the member has not entered the current passphrase.

    No configuration means the gate is disabled. Admins are never gated.
    """
    if config is None or role == RoleEnum.ADMIN:
        return False
    return user_version < config.version


class AccessService:
    """Passphrase verification and rotation."""

    def __init__(self, repository: AccessRepository, identity_repository: IdentityRepository) -> None:
        self.repository = repository
        self.identity_repository = identity_repository

    async def get_status(self, actor: User) -> tuple[AccessConfig | None, bool]:
        config = await self.repository.get_current_config()
        return config, needs_reverification(actor.passphrase_version, config, actor.role)

    async def verify_passphrase(self, actor: User, passphrase: str) -> User:
        """Record that actor knows the current passphrase."""
        config = await self.repository.get_current_config()
        if config is None:
            return actor
        if not hmac.compare_digest(passphrase.strip().encode(), config.passphrase.encode()):
            raise ValidationError("Passphrase is incorrect")
        return await self.identity_repository.set_passphrase_version(actor, config.version)

    async def rotate_passphrase(self, passphrase: str, actor: User) -> AccessConfig:
        """Publish a new passphrase version (admin only)."""
        if actor.role != RoleEnum.ADMIN:
            raise ForbiddenError("Only admin can change the passphrase")
        value = passphrase.strip()
        if not value:
            raise ValidationError("Passphrase must not be empty")

        current = await self.repository.get_current_config()
        next_version = 1 if current is None else current.version + 1
        config = await self.repository.create_config(next_version, value, actor.id)
        logger.info("Passphrase rotated to version %d by %s", next_version, actor.id)
        return config


async def get_access_service(session: AsyncSession = Depends(get_db_session)) -> AccessService:
    """Dependency provider for access service."""
    return AccessService(AccessRepository(session), IdentityRepository(session))


async def require_verified_user(
    current_user: User = Depends(get_current_user),
    service: AccessService = Depends(get_access_service),
) -> User:
    """Resolve current user and require the current passphrase version."""
    _, blocked = await service.get_status(current_user)
    if blocked:
        raise ForbiddenError("Passphrase re-verification required")
    return current_user
