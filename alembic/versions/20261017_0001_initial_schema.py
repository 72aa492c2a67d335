"""Initial schema

Revision ID: 20261017_0001
Revises:
Create Date: 2026-10-17 09:00:00
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "20261017_0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


role_enum = sa.Enum("student", "teacher", "admin", name="role_enum", native_enum=False)
slot_status_enum = sa.Enum("available", "booked", name="slot_status_enum", native_enum=False)
booking_status_enum = sa.Enum(
    "pending_payment",
    "confirmed",
    "cancelled",
    name="booking_status_enum",
    native_enum=False,
)
match_status_enum = sa.Enum("active", "archived", name="match_status_enum", native_enum=False)
outbox_status_enum = sa.Enum("pending", "processed", "failed", name="outbox_status_enum", native_enum=False)


def _id_col() -> sa.Column:
    return sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False)


def _created_col() -> sa.Column:
    return sa.Column("created_at", sa.DateTime(timezone=True), nullable=False)


def _updated_col() -> sa.Column:
    return sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False)


def upgrade() -> None:
    op.create_table(
        "users",
        _id_col(),
        _created_col(),
        _updated_col(),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("full_name", sa.String(length=255), nullable=True),
        sa.Column("role", role_enum, nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("passphrase_version", sa.Integer(), nullable=False, server_default="0"),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=False)
    op.create_index("ix_users_role", "users", ["role"], unique=False)

    op.create_table(
        "access_configs",
        _id_col(),
        _created_col(),
        _updated_col(),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("passphrase", sa.String(length=255), nullable=False),
        sa.Column("created_by_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.ForeignKeyConstraint(
            ["created_by_id"],
            ["users.id"],
            name="fk_access_configs_created_by_id_users",
            ondelete="SET NULL",
        ),
        sa.UniqueConstraint("version", name="uq_access_configs_version"),
    )

    op.create_table(
        "teacher_profiles",
        _id_col(),
        _created_col(),
        _updated_col(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("bio", sa.Text(), nullable=False),
        sa.Column("hourly_rate", sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], name="fk_teacher_profiles_user_id_users", ondelete="CASCADE"),
        sa.UniqueConstraint("user_id", name="uq_teacher_profiles_user_id"),
        sa.CheckConstraint("hourly_rate >= 0", name="ck_teacher_profiles_hourly_rate_non_negative"),
    )

    op.create_table(
        "matches",
        _id_col(),
        _created_col(),
        _updated_col(),
        sa.Column("teacher_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("student_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("status", match_status_enum, nullable=False),
        sa.ForeignKeyConstraint(["teacher_id"], ["users.id"], name="fk_matches_teacher_id_users", ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["student_id"], ["users.id"], name="fk_matches_student_id_users", ondelete="CASCADE"),
        sa.UniqueConstraint("teacher_id", "student_id", name="uq_matches_teacher_id_student_id"),
    )
    op.create_index("ix_matches_teacher_id", "matches", ["teacher_id"], unique=False)
    op.create_index("ix_matches_student_id", "matches", ["student_id"], unique=False)
    op.create_index("ix_matches_status", "matches", ["status"], unique=False)

    op.create_table(
        "availability_slots",
        _id_col(),
        _created_col(),
        _updated_col(),
        sa.Column("teacher_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("slot_date", sa.Date(), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=False),
        sa.Column("end_time", sa.Time(), nullable=False),
        sa.Column("status", slot_status_enum, nullable=False),
        sa.ForeignKeyConstraint(["teacher_id"], ["users.id"], name="fk_availability_slots_teacher_id_users", ondelete="CASCADE"),
        sa.UniqueConstraint(
            "teacher_id",
            "slot_date",
            "start_time",
            name="uq_availability_slots_teacher_id_slot_date_start_time",
        ),
    )
    op.create_index("ix_availability_slots_teacher_id", "availability_slots", ["teacher_id"], unique=False)
    op.create_index("ix_availability_slots_slot_date", "availability_slots", ["slot_date"], unique=False)
    op.create_index("ix_availability_slots_status", "availability_slots", ["status"], unique=False)

    op.create_table(
        "bookings",
        _id_col(),
        _created_col(),
        _updated_col(),
        sa.Column("match_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("slot_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("student_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("teacher_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("price_at_booking", sa.Integer(), nullable=False),
        sa.Column("status", booking_status_enum, nullable=False),
        sa.ForeignKeyConstraint(["match_id"], ["matches.id"], name="fk_bookings_match_id_matches", ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["slot_id"], ["availability_slots.id"], name="fk_bookings_slot_id_availability_slots", ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["student_id"], ["users.id"], name="fk_bookings_student_id_users", ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["teacher_id"], ["users.id"], name="fk_bookings_teacher_id_users", ondelete="CASCADE"),
        sa.UniqueConstraint("slot_id", name="uq_bookings_slot_id"),
        sa.CheckConstraint("price_at_booking >= 0", name="ck_bookings_price_at_booking_non_negative"),
    )
    op.create_index("ix_bookings_match_id", "bookings", ["match_id"], unique=False)
    op.create_index("ix_bookings_student_id", "bookings", ["student_id"], unique=False)
    op.create_index("ix_bookings_teacher_id", "bookings", ["teacher_id"], unique=False)
    op.create_index("ix_bookings_status", "bookings", ["status"], unique=False)

    op.create_table(
        "outbox_events",
        _id_col(),
        _created_col(),
        _updated_col(),
        sa.Column("aggregate_type", sa.String(length=64), nullable=False),
        sa.Column("aggregate_id", sa.Text(), nullable=False),
        sa.Column("event_type", sa.String(length=128), nullable=False),
        sa.Column("payload", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("status", outbox_status_enum, nullable=False),
        sa.Column("occurred_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("processed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("retries", sa.Integer(), nullable=False),
        sa.Column("error_message", sa.Text(), nullable=True),
    )
    op.create_index("ix_outbox_events_aggregate_type", "outbox_events", ["aggregate_type"], unique=False)
    op.create_index("ix_outbox_events_event_type", "outbox_events", ["event_type"], unique=False)
    op.create_index("ix_outbox_events_status", "outbox_events", ["status"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_outbox_events_status", table_name="outbox_events")
    op.drop_index("ix_outbox_events_event_type", table_name="outbox_events")
    op.drop_index("ix_outbox_events_aggregate_type", table_name="outbox_events")
    op.drop_table("outbox_events")

    op.drop_index("ix_bookings_status", table_name="bookings")
    op.drop_index("ix_bookings_teacher_id", table_name="bookings")
    op.drop_index("ix_bookings_student_id", table_name="bookings")
    op.drop_index("ix_bookings_match_id", table_name="bookings")
    op.drop_table("bookings")

    op.drop_index("ix_availability_slots_status", table_name="availability_slots")
    op.drop_index("ix_availability_slots_slot_date", table_name="availability_slots")
    op.drop_index("ix_availability_slots_teacher_id", table_name="availability_slots")
    op.drop_table("availability_slots")

    op.drop_index("ix_matches_status", table_name="matches")
    op.drop_index("ix_matches_student_id", table_name="matches")
    op.drop_index("ix_matches_teacher_id", table_name="matches")
    op.drop_table("matches")

    op.drop_table("teacher_profiles")
    op.drop_table("access_configs")

    op.drop_index("ix_users_role", table_name="users")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
