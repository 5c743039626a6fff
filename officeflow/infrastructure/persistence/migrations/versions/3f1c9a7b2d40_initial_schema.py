"""initial_schema_users_clients_tasks_history_notifications_activity

Revision ID: 3f1c9a7b2d40
Revises:
Create Date: 2026-10-18 09:12:41.208113

"""

from collections.abc import Sequence
from typing import Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3f1c9a7b2d40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "app_user",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column(
            "role",
            sa.String(length=32),
            server_default="BUSINESS_CONSULTANT",
            nullable=False,
        ),
        sa.Column("phone", sa.String(length=32), nullable=True),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )

    op.create_table(
        "client",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("contact_person", sa.String(length=255), nullable=False),
        sa.Column("company_name", sa.String(length=255), nullable=True),
        sa.Column("email", sa.String(length=320), nullable=True),
        sa.Column("phone", sa.String(length=32), nullable=True),
        sa.Column("is_guest", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("access_expiry", sa.DateTime(timezone=True), nullable=True),
        sa.Column("manager_id", sa.String(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["manager_id"], ["app_user.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_client_access_expiry", "client", ["access_expiry"])
    op.create_index("ix_client_manager_id", "client", ["manager_id"])

    op.create_table(
        "task",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("title", sa.String(length=500), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=32), server_default="pending", nullable=False),
        sa.Column("priority", sa.String(length=16), server_default="medium", nullable=False),
        sa.Column("due_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "billing_status", sa.String(length=32), server_default="none", nullable=False
        ),
        sa.Column("billing_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("scheduled_deletion_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("assigned_to_id", sa.String(), nullable=True),
        sa.Column("assigned_by_id", sa.String(), nullable=False),
        sa.Column("client_id", sa.String(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["assigned_to_id"], ["app_user.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["assigned_by_id"], ["app_user.id"]),
        sa.ForeignKeyConstraint(["client_id"], ["client.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_task_assigned_to_id", "task", ["assigned_to_id"])
    op.create_index("ix_task_assigned_by_id", "task", ["assigned_by_id"])
    op.create_index("ix_task_client_id", "task", ["client_id"])
    op.create_index("ix_task_scheduled_deletion_date", "task", ["scheduled_deletion_date"])
    op.create_index("ix_task_status_billing", "task", ["status", "billing_status"])

    op.create_table(
        "task_assignee",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("task_id", sa.String(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["task_id"], ["task.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["app_user.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("task_id", "user_id", name="uq_task_assignee_task_user"),
    )
    op.create_index("ix_task_assignee_task_id", "task_assignee", ["task_id"])
    op.create_index("ix_task_assignee_user_id", "task_assignee", ["user_id"])

    # task_id has no foreign key: billing history outlives the task.
    op.create_table(
        "client_history",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("client_id", sa.String(), nullable=False),
        sa.Column("type", sa.String(length=32), server_default="general", nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("created_by_id", sa.String(), nullable=True),
        sa.Column("task_id", sa.String(), nullable=True),
        sa.Column("task_title", sa.String(length=500), nullable=True),
        sa.Column("task_description", sa.Text(), nullable=True),
        sa.Column("task_status", sa.String(length=32), nullable=True),
        sa.Column("task_completed_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("task_billed_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("billing_details", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["client_id"], ["client.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["created_by_id"], ["app_user.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_client_history_client_id", "client_history", ["client_id"])
    op.create_index("ix_client_history_task_id", "client_history", ["task_id"])
    op.create_index(
        "ix_client_history_client_created", "client_history", ["client_id", "created_at"]
    )

    op.create_table(
        "notification",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("sent_by_id", sa.String(), nullable=True),
        sa.Column("sent_to_id", sa.String(), nullable=False),
        sa.Column("is_read", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["sent_by_id"], ["app_user.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["sent_to_id"], ["app_user.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_notification_recipient_created", "notification", ["sent_to_id", "created_at"]
    )

    op.create_table(
        "activity",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("type", sa.String(length=32), nullable=False),
        sa.Column("action", sa.String(length=64), nullable=False),
        sa.Column("target", sa.String(length=500), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("details", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["app_user.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_activity_type", "activity", ["type"])
    op.create_index("ix_activity_action", "activity", ["action"])
    op.create_index("ix_activity_user_id", "activity", ["user_id"])
    op.create_index("ix_activity_created_at", "activity", ["created_at"])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("activity")
    op.drop_table("notification")
    op.drop_table("client_history")
    op.drop_table("task_assignee")
    op.drop_table("task")
    op.drop_table("client")
    op.drop_table("app_user")
