"""Identity ORM models."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Enum as SAEnum, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from lingomatch.core.database import Base, BaseModelMixin
from lingomatch.core.enums import RoleEnum

if TYPE_CHECKING:
    from lingomatch.modules.teachers.models import TeacherProfile


class User(BaseModelMixin, Base):
    """Marketplace member mirrored from the identity provider."""

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    full_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    role: Mapped[RoleEnum] = mapped_column(
        SAEnum(RoleEnum, name="role_enum", native_enum=False),
        nullable=False,
        index=True,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    passphrase_version: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    teacher_profile: Mapped["TeacherProfile | None"] = relationship(back_populates="user", uselist=False)
