"""Identity schemas."""

from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, ConfigDict

from lingomatch.core.enums import RoleEnum


class UserRead(BaseModel):
    """Authenticated user response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    full_name: str | None
    role: RoleEnum
    is_active: bool
    passphrase_version: int


class UserSummary(BaseModel):
    """Public user card embedded into other responses."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    full_name: str | None
    role: RoleEnum
