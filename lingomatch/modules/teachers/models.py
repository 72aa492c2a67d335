"""Teachers ORM models."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import CheckConstraint, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from lingomatch.core.database import Base, BaseModelMixin


class TeacherProfile(BaseModelMixin, Base):
    """Teacher profile and rate card linked to user account."""

    __tablename__ = "teacher_profiles"
    __table_args__ = (CheckConstraint("hourly_rate >= 0", name="hourly_rate_non_negative"),)

    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    bio: Mapped[str] = mapped_column(Text, default="", nullable=False)
    # Minor currency units (cents).
    hourly_rate: Mapped[int | None] = mapped_column(Integer, nullable=True)

    user = relationship("User", back_populates="teacher_profile")
