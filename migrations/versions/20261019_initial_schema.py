"""initial schema: users, events and everything hanging off them

Revision ID: 20261019_initial_schema
Revises:
Create Date: 2026-10-19 00:00:00
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '20261019_initial_schema'
down_revision: Union[str, Sequence[str], None] = None
branch_labels = None
depends_on = None


def _id() -> sa.Column:
    return sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True)


def _fk(name: str, target: str, nullable: bool = False) -> sa.Column:
    return sa.Column(name, sa.Integer(), sa.ForeignKey(f"{target}.id"), nullable=nullable)


def _ts(name: str, nullable: bool = False) -> sa.Column:
    return sa.Column(name, sa.DateTime(), nullable=nullable)


def upgrade() -> None:
    op.create_table(
        "users",
        _id(),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("email", sa.String(160), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("role", sa.String(20), nullable=False),
        sa.Column("approved", sa.Boolean(), nullable=False),
        sa.Column("phone", sa.String(30)),
        sa.Column("profile_picture", sa.String(500), nullable=False),
        sa.Column("city", sa.String(120)),
        sa.Column("area", sa.String(120)),
        sa.Column("address_line", sa.String(255)),
        sa.Column("lat", sa.Float()),
        sa.Column("lng", sa.Float()),
        sa.Column("preferred_event_types", sa.JSON(), nullable=False),
        sa.Column("preferred_city", sa.String(120)),
        _ts("created_at"),
        _ts("updated_at"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_role", "users", ["role"])
    op.create_index("ix_users_phone", "users", ["phone"])
    op.create_index("ix_users_city", "users", ["city"])

    op.create_table(
        "events",
        _id(),
        _fk("booked_by_id", "users"),
        _fk("assigned_manager_id", "users", nullable=True),
        sa.Column("assigned_team", sa.JSON(), nullable=False),
        sa.Column("type", sa.String(32), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text()),
        _ts("scheduled_at"),
        sa.Column("guest_count", sa.Integer(), nullable=False),
        sa.Column("venue", sa.String(200)),
        sa.Column("address_line", sa.String(255), nullable=False),
        sa.Column("city", sa.String(120), nullable=False),
        sa.Column("pincode", sa.String(20), nullable=False),
        sa.Column("landmark", sa.String(200)),
        sa.Column("lat", sa.Float()),
        sa.Column("lng", sa.Float()),
        sa.Column("map_link", sa.String(500)),
        sa.Column("additional_services", sa.JSON(), nullable=False),
        sa.Column("custom_requests", sa.Text()),
        sa.Column("status", sa.String(20), nullable=False),
        _ts("auto_assign_deadline", nullable=True),
        _ts("reminder_sent_at", nullable=True),
        _ts("created_at"),
        _ts("updated_at"),
    )
    for col in ("booked_by_id", "assigned_manager_id", "scheduled_at", "city", "status", "auto_assign_deadline", "created_at"):
        op.create_index(f"ix_events_{col}", "events", [col])

    op.create_table(
        "event_status_history",
        _id(),
        _fk("event_id", "events"),
        sa.Column("status", sa.String(20), nullable=False),
        _ts("at"),
        _fk("by_id", "users", nullable=True),
    )
    op.create_index("ix_event_status_history_event_id", "event_status_history", ["event_id"])

    op.create_table(
        "notifications",
        _id(),
        _fk("user_id", "users"),
        sa.Column("type", sa.String(32), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("body", sa.Text(), nullable=False),
        sa.Column("link", sa.String(500)),
        sa.Column("read", sa.Boolean(), nullable=False),
        _fk("related_event_id", "events", nullable=True),
        _ts("created_at"),
    )
    for col in ("user_id", "related_event_id", "created_at"):
        op.create_index(f"ix_notifications_{col}", "notifications", [col])

    op.create_table(
        "manager_conversations",
        _id(),
        _fk("event_id", "events"),
        _fk("user_id", "users"),
        _fk("manager_id", "users"),
        _ts("created_at"),
        _ts("updated_at"),
    )
    for col in ("event_id", "user_id", "manager_id"):
        op.create_index(f"ix_manager_conversations_{col}", "manager_conversations", [col])

    op.create_table(
        "conversation_messages",
        _id(),
        _fk("conversation_id", "manager_conversations"),
        sa.Column("sender", sa.String(10), nullable=False),
        sa.Column("text", sa.Text(), nullable=False),
        _ts("at"),
    )
    op.create_index("ix_conversation_messages_conversation_id", "conversation_messages", ["conversation_id"])

    op.create_table(
        "resources",
        _id(),
        _fk("manager_id", "users"),
        sa.Column("name", sa.String(160), nullable=False),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("unit", sa.String(20), nullable=False),
        sa.Column("available", sa.Boolean(), nullable=False),
        _ts("created_at"),
        _ts("updated_at"),
    )
    op.create_index("ix_resources_manager_id", "resources", ["manager_id"])

    op.create_table(
        "feedback",
        _id(),
        _fk("event_id", "events"),
        _fk("user_id", "users"),
        _fk("manager_id", "users"),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column("comment", sa.Text()),
        sa.Column("manager_reply", sa.Text()),
        _ts("manager_replied_at", nullable=True),
        sa.Column("service_rating", sa.Integer()),
        _ts("created_at"),
        sa.UniqueConstraint("event_id", "user_id", name="uq_feedback_event_user"),
    )
    for col in ("event_id", "user_id", "manager_id", "created_at"):
        op.create_index(f"ix_feedback_{col}", "feedback", [col])

    op.create_table(
        "payments",
        _id(),
        _fk("user_id", "users"),
        _fk("event_id", "events"),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("currency", sa.String(3), nullable=False),
        sa.Column("method", sa.String(20), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("external_id", sa.String(80)),
        sa.Column("receipt_url", sa.String(255)),
        sa.Column("refunded_amount", sa.Float(), nullable=False),
        sa.Column("metadata", sa.JSON()),
        _ts("created_at"),
    )
    for col in ("user_id", "event_id", "status", "created_at"):
        op.create_index(f"ix_payments_{col}", "payments", [col])

    op.create_table(
        "refunds",
        _id(),
        _fk("event_id", "events"),
        _fk("user_id", "users"),
        _fk("payment_id", "payments", nullable=True),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("reason", sa.Text(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        _fk("processed_by_id", "users", nullable=True),
        _ts("processed_at", nullable=True),
        sa.Column("admin_note", sa.Text()),
        _ts("created_at"),
        _ts("updated_at"),
    )
    for col in ("event_id", "user_id", "status"):
        op.create_index(f"ix_refunds_{col}", "refunds", [col])

    op.create_table(
        "promotions",
        _id(),
        sa.Column("code", sa.String(40), nullable=False),
        sa.Column("type", sa.String(10), nullable=False),
        sa.Column("value", sa.Float(), nullable=False),
        sa.Column("min_order_amount", sa.Float(), nullable=False),
        _ts("valid_from"),
        _ts("valid_to"),
        sa.Column("event_type", sa.String(32)),
        sa.Column("max_uses", sa.Integer()),
        sa.Column("used_count", sa.Integer(), nullable=False),
        sa.Column("active", sa.Boolean(), nullable=False),
        _fk("created_by_id", "users", nullable=True),
        _ts("created_at"),
    )
    op.create_index("ix_promotions_code", "promotions", ["code"], unique=True)

    op.create_table(
        "support_tickets",
        _id(),
        _fk("user_id", "users"),
        sa.Column("subject", sa.String(200), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("category", sa.String(20), nullable=False),
        _fk("related_event_id", "events", nullable=True),
        _ts("created_at"),
        _ts("updated_at"),
    )
    for col in ("user_id", "status", "category"):
        op.create_index(f"ix_support_tickets_{col}", "support_tickets", [col])

    op.create_table(
        "support_ticket_replies",
        _id(),
        _fk("ticket_id", "support_tickets"),
        sa.Column("sender", sa.String(10), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        _ts("at"),
    )
    op.create_index("ix_support_ticket_replies_ticket_id", "support_ticket_replies", ["ticket_id"])

    op.create_table(
        "surveys",
        _id(),
        _fk("event_id", "events"),
        _fk("user_id", "users"),
        sa.Column("answers", sa.JSON(), nullable=False),
        _ts("created_at"),
        sa.UniqueConstraint("event_id", "user_id", name="uq_surveys_event_user"),
    )
    op.create_index("ix_surveys_event_id", "surveys", ["event_id"])
    op.create_index("ix_surveys_user_id", "surveys", ["user_id"])

    op.create_table(
        "manager_requests",
        _id(),
        _fk("user_id", "users"),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("message", sa.Text()),
        _fk("processed_by_id", "users", nullable=True),
        _ts("processed_at", nullable=True),
        _ts("created_at"),
    )
    for col in ("user_id", "status", "created_at"):
        op.create_index(f"ix_manager_requests_{col}", "manager_requests", [col])

    op.create_table(
        "user_activity",
        _id(),
        _fk("user_id", "users"),
        sa.Column("action", sa.String(32), nullable=False),
        sa.Column("entity_type", sa.String(40)),
        sa.Column("entity_id", sa.Integer()),
        sa.Column("metadata", sa.JSON()),
        sa.Column("ip", sa.String(64)),
        _ts("created_at"),
    )
    for col in ("user_id", "action", "created_at"):
        op.create_index(f"ix_user_activity_{col}", "user_activity", [col])


def downgrade() -> None:
    for table in (
        "user_activity",
        "manager_requests",
        "surveys",
        "support_ticket_replies",
        "support_tickets",
        "promotions",
        "refunds",
        "payments",
        "feedback",
        "resources",
        "conversation_messages",
        "manager_conversations",
        "notifications",
        "event_status_history",
        "events",
        "users",
    ):
        op.drop_table(table)
