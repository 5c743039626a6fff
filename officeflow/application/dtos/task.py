"""DTOs for tasks, assignment, and billing approval (no dependency on ORM)."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class TaskResult:
    """Task with its current assignee set (edge table, sorted by assignment time)."""

    id: str
    title: str
    description: str | None
    status: str
    priority: str
    due_date: datetime | None
    billing_status: str
    billing_date: datetime | None
    scheduled_deletion_date: datetime | None
    assigned_to_id: str | None
    assigned_by_id: str
    client_id: str | None
    created_at: datetime
    updated_at: datetime
    assignee_ids: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class TaskCreate:
    """Input for creating a task. assignee_ids order decides the primary assignee."""

    title: str
    priority: str
    status: str
    description: str | None = None
    due_date: datetime | None = None
    assignee_ids: list[str] = field(default_factory=list)
    client_id: str | None = None


@dataclass(frozen=True)
class AssignmentDelta:
    """Edge changes computed by one reconciliation."""

    previous_ids: list[str]
    requested_ids: list[str]
    to_add: list[str]
    to_remove: list[str]

    @property
    def is_noop(self) -> bool:
        return not self.to_add and not self.to_remove


@dataclass(frozen=True)
class TaskAssignmentResult:
    """Outcome of reassign: persisted assignee set, primary pointer, and the delta applied."""

    task_id: str
    assignee_ids: list[str]
    assigned_to_id: str | None
    delta: AssignmentDelta


@dataclass(frozen=True)
class BillingApprovalResult:
    """Confirmation of billing approval."""

    task_id: str
    billing_status: str
    billing_date: datetime
    scheduled_deletion_date: datetime | None
    task_deleted: bool
    client_history_id: str | None = None


# Fields an edit may change; status and assignees have their own operations.
EDITABLE_TASK_FIELDS: frozenset[str] = frozenset(
    {"title", "description", "priority", "due_date", "client_id"}
)


@dataclass(frozen=True)
class TaskCommentResult:
    """Comment with its author's display name (None once the author is deleted)."""

    id: str
    task_id: str
    user_id: str | None
    user_name: str | None
    content: str
    created_at: datetime
