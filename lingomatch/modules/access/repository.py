"""Access configuration repository layer."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from lingomatch.modules.access.models import AccessConfig


class AccessRepository:
    """DB operations for versioned access configuration."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_current_config(self) -> AccessConfig | None:
        stmt = select(AccessConfig).order_by(AccessConfig.version.desc()).limit(1)
        return await self.session.scalar(stmt)

    async def create_config(self, version: int, passphrase: str, created_by_id: UUID | None) -> AccessConfig:
        config = AccessConfig(version=version, passphrase=passphrase, created_by_id=created_by_id)
        self.session.add(config)
        await self.session.flush()
        return config
