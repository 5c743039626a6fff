"""add task_comment table

Revision ID: 8b2e4d6f1a93
Revises: 3f1c9a7b2d40
Create Date: 2026-10-25

Comments on a task; deleted with the task (billing approval, sweeper, delete).
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "8b2e4d6f1a93"
down_revision: Union[str, Sequence[str], None] = "3f1c9a7b2d40"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "task_comment",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("task_id", sa.String(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=True),
        sa.Column("content", sa.Text(), nullable=False),
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
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["task_id"], ["task.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["app_user.id"], ondelete="SET NULL"),
    )
    op.create_index(
        "ix_task_comment_task_created",
        "task_comment",
        ["task_id", "created_at"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_task_comment_task_created", table_name="task_comment")
    op.drop_table("task_comment")
