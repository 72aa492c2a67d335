"""Matches ORM models."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import Enum as SAEnum, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from lingomatch.core.database import Base, BaseModelMixin
from lingomatch.core.enums import MatchStatusEnum

if TYPE_CHECKING:
    from lingomatch.modules.identity.models import User


class Match(BaseModelMixin, Base):
    """Accepted teacher-student pairing that gates booking."""

    __tablename__ = "matches"
    __table_args__ = (UniqueConstraint("teacher_id", "student_id", name="uq_matches_teacher_id_student_id"),)

    teacher_id: Mapped[UUID] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id: Mapped[UUID] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    status: Mapped[MatchStatusEnum] = mapped_column(
        SAEnum(MatchStatusEnum, name="match_status_enum", native_enum=False),
        default=MatchStatusEnum.ACTIVE,
        nullable=False,
        index=True,
    )

    teacher: Mapped["User"] = relationship(foreign_keys=[teacher_id])
    student: Mapped["User"] = relationship(foreign_keys=[student_id])
