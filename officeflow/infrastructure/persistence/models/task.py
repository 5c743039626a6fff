"""Task and TaskAssignee ORM models.

TaskAssignee edges are the source of truth for who works on a task.
Task.assigned_to_id is a denormalized "primary assignee" cache written in the
same transaction as the edges; business logic never reads it on its own
except for the partner ownership rule.
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from officeflow.domain.enums import BillingStatus, TaskPriority, TaskStatus
from officeflow.infrastructure.persistence.database import Base
from officeflow.infrastructure.persistence.models.mixins import CreatedAtMixin, CuidMixin, Model


class Task(Model, Base):
    """Unit of work with billing lifecycle. Table: task."""

    __tablename__ = "task"

    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default=TaskStatus.PENDING.value,
        server_default=TaskStatus.PENDING.value,
    )
    priority: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default=TaskPriority.MEDIUM.value,
        server_default=TaskPriority.MEDIUM.value,
    )
    due_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    billing_status: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default=BillingStatus.NONE.value,
        server_default=BillingStatus.NONE.value,
    )
    billing_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    scheduled_deletion_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, index=True
    )
    assigned_to_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("app_user.id", ondelete="SET NULL"), nullable=True, index=True
    )
    assigned_by_id: Mapped[str] = mapped_column(
        String, ForeignKey("app_user.id"), nullable=False, index=True
    )
    client_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("client.id", ondelete="SET NULL"), nullable=True, index=True
    )

    __table_args__ = (
        Index("ix_task_status_billing", "status", "billing_status"),
    )


class TaskAssignee(CuidMixin, CreatedAtMixin, Base):
    """One (task, user) assignment edge. Table: task_assignee."""

    __tablename__ = "task_assignee"

    task_id: Mapped[str] = mapped_column(
        String, ForeignKey("task.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[str] = mapped_column(
        String, ForeignKey("app_user.id", ondelete="CASCADE"), nullable=False, index=True
    )

    __table_args__ = (
        UniqueConstraint("task_id", "user_id", name="uq_task_assignee_task_user"),
    )
