"""Access configuration ORM models."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from lingomatch.core.database import Base, BaseModelMixin


class AccessConfig(BaseModelMixin, Base):
    """One version of the community passphrase. The highest version is current."""

    __tablename__ = "access_configs"

    version: Mapped[int] = mapped_column(Integer, unique=True, nullable=False)
    passphrase: Mapped[str] = mapped_column(String(255), nullable=False)
    created_by_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
