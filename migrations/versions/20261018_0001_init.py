"""initial schema

Revision ID: 20261018_0001
Revises:
Create Date: 2026-10-18 10:00:00

"""

from alembic import op
import sqlalchemy as sa


revision = "20261018_0001"
down_revision = None
branch_labels = None
depends_on = None


waiting_list_status = sa.Enum(
    "pending",
    "approved",
    "rejected",
    name="waiting_list_status",
    create_type=False,
)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    bind = op.get_bind()
    waiting_list_status.create(bind, checkfirst=True)

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "events",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("parent_event_id", sa.Integer(), sa.ForeignKey("events.id", ondelete="CASCADE"), nullable=True),
        sa.Column("host_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("location", sa.String(length=255), nullable=True),
        sa.Column("start_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("end_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("team_size", sa.Integer(), nullable=True),
        sa.Column("flexible_team_size", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("team_size_min", sa.Integer(), nullable=True),
        sa.Column("team_size_max", sa.Integer(), nullable=True),
        sa.Column("payment_enabled", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("custom_fields", sa.JSON(), nullable=True),
        sa.Column("whatsapp_group_link", sa.String(length=512), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_events_parent_event_id", "events", ["parent_event_id"])
    op.create_index("ix_events_host_id", "events", ["host_id"])

    op.create_table(
        "registrations",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("event_id", sa.Integer(), sa.ForeignKey("events.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=True),
        sa.Column("team_name", sa.String(length=255), nullable=True),
        sa.Column("responses", sa.JSON(), nullable=True),
        sa.Column("payment_proof", sa.String(length=1024), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("event_id", "user_id", name="uq_registration_event_user"),
    )
    op.create_index("ix_registrations_event_id", "registrations", ["event_id"])
    op.create_index("ix_registrations_user_id", "registrations", ["user_id"])

    op.create_table(
        "participants",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "registration_id",
            sa.Integer(),
            sa.ForeignKey("registrations.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("details", sa.JSON(), nullable=False),
    )
    op.create_index("ix_participants_registration_id", "participants", ["registration_id"])

    op.create_table(
        "waiting_list",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("event_id", sa.Integer(), sa.ForeignKey("events.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=True),
        sa.Column("team_name", sa.String(length=255), nullable=True),
        sa.Column("responses", sa.JSON(), nullable=True),
        sa.Column("participants", sa.JSON(), nullable=True),
        sa.Column("payment_proof", sa.String(length=1024), nullable=True),
        sa.Column("status", waiting_list_status, nullable=False, server_default="pending"),
        *_timestamps(),
    )
    op.create_index("ix_waiting_list_event_id", "waiting_list", ["event_id"])
    op.create_index("ix_waiting_list_user_id", "waiting_list", ["user_id"])
    op.create_index("ix_waiting_list_status", "waiting_list", ["status"])


def downgrade() -> None:
    op.drop_index("ix_waiting_list_status", table_name="waiting_list")
    op.drop_index("ix_waiting_list_user_id", table_name="waiting_list")
    op.drop_index("ix_waiting_list_event_id", table_name="waiting_list")
    op.drop_table("waiting_list")

    op.drop_index("ix_participants_registration_id", table_name="participants")
    op.drop_table("participants")

    op.drop_index("ix_registrations_user_id", table_name="registrations")
    op.drop_index("ix_registrations_event_id", table_name="registrations")
    op.drop_table("registrations")

    op.drop_index("ix_events_host_id", table_name="events")
    op.drop_index("ix_events_parent_event_id", table_name="events")
    op.drop_table("events")

    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")

    bind = op.get_bind()
    waiting_list_status.drop(bind, checkfirst=True)
