"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs only; no infrastructure imports.
Repositories never commit: the calling use case owns the transaction.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from officeflow.application.dtos.activity import ActivityFeedQuery, ActivityResult
    from officeflow.application.dtos.client import (
        ClientHistoryCreate,
        ClientHistoryResult,
        ClientResult,
    )
    from officeflow.application.dtos.notification import (
        NotificationRequest,
        NotificationResult,
    )
    from officeflow.application.dtos.task import (
        TaskCommentResult,
        TaskCreate,
        TaskResult,
    )
    from officeflow.application.dtos.user import UserResult


# Task repository interface
class ITaskRepository(Protocol):
    """Protocol for task and assignment-edge persistence."""

    async def get_by_id(self, task_id: str) -> TaskResult | None:
        """Return task with assignee ids, or None."""

    async def get_for_update(self, task_id: str) -> TaskResult | None:
        """Lock the task row (SELECT ... FOR UPDATE) and return it, or None."""

    async def create_task(self, data: TaskCreate, assigned_by_id: str) -> TaskResult:
        """Insert a task row without assignment edges."""

    async def get_assignee_ids(self, task_id: str) -> list[str]:
        """Return user ids of current assignment edges (oldest edge first)."""

    async def add_assignees(self, task_id: str, user_ids: list[str]) -> None:
        """Insert one edge per user id."""

    async def remove_assignees(self, task_id: str, user_ids: list[str]) -> int:
        """Delete edges for the given user ids; return rows deleted."""

    async def set_primary_assignee(self, task_id: str, user_id: str | None) -> None:
        """Write the legacy primary-assignee cache."""

    async def update_status(
        self, task_id: str, status: str, billing_status: str | None = None
    ) -> TaskResult:
        """Set status (and billing status when given); return updated task."""

    async def mark_billed(
        self,
        task_id: str,
        billing_date: datetime,
        scheduled_deletion_date: datetime | None,
    ) -> TaskResult:
        """Set billing_status=billed, billing_date and scheduled_deletion_date."""

    async def update_fields(self, task_id: str, changes: dict[str, Any]) -> TaskResult:
        """Set the given plain columns; return updated task."""

    async def delete_task(self, task_id: str) -> bool:
        """Delete comments and edges, then the task; True if a task row was deleted."""

    async def list_tasks(
        self,
        *,
        visible_to_user_id: str | None = None,
        include_created_by: bool = False,
        status: str | None = None,
        billing_status: str | None = None,
        skip: int = 0,
        limit: int = 10,
    ) -> list[TaskResult]:
        """List tasks, newest first. visible_to_user_id restricts to assigned (and optionally created) tasks."""

    async def list_due_for_deletion(
        self, now: datetime, limit: int = 500
    ) -> list[TaskResult]:
        """Return billed tasks whose scheduled_deletion_date <= now."""

    async def detach_client(self, client_id: str) -> int:
        """Clear client_id on the client's tasks; return rows updated."""


# User repository interface
class IUserRepository(Protocol):
    """Protocol for user lookups (identity is external; users are read-only here)."""

    async def get_by_id(self, user_id: str) -> UserResult | None:
        """Return user by ID."""

    async def get_by_ids(self, user_ids: set[str]) -> list[UserResult]:
        """Return users for the given ids (batch; missing ids are absent)."""


# Client repository interface
class IClientRepository(Protocol):
    """Protocol for client records."""

    async def get_by_id(self, client_id: str) -> ClientResult | None:
        """Return client by ID."""

    async def list_expired_guests(self, now: datetime) -> list[ClientResult]:
        """Return guest clients whose access_expiry < now."""

    async def delete_client(self, client_id: str) -> bool:
        """Delete client; return True if deleted."""


# Client history repository interface
class IClientHistoryRepository(Protocol):
    """Protocol for the append-only client history."""

    async def create(self, data: ClientHistoryCreate) -> ClientHistoryResult:
        """Append one record."""

    async def list_by_client(self, client_id: str) -> list[ClientHistoryResult]:
        """Return all records for client, newest first."""

    async def list_task_history(self, client_id: str) -> list[ClientHistoryResult]:
        """Return records linked to a task, newest completion first."""

    async def count_for_task(self, task_id: str, history_type: str) -> int:
        """Return how many records of the type reference the task."""

    async def count_for_client(self, client_id: str, history_type: str) -> int:
        """Return how many records of the type belong to the client."""


# Task comment repository interface
class ITaskCommentRepository(Protocol):
    """Protocol for comments on a task."""

    async def create(
        self, task_id: str, user_id: str, content: str, user_name: str | None = None
    ) -> TaskCommentResult:
        """Add one comment."""

    async def list_for_task(self, task_id: str) -> list[TaskCommentResult]:
        """Return the task's comments, oldest first."""

    async def count_for_task(self, task_id: str) -> int:
        """Return how many comments the task has."""


# Notification repository interface
class INotificationRepository(Protocol):
    """Protocol for in-app notifications."""

    async def create(self, request: NotificationRequest) -> NotificationResult:
        """Insert a notification row."""

    async def get_by_id(self, notification_id: str) -> NotificationResult | None:
        """Return notification by ID."""

    async def list_for_recipient(
        self, user_id: str, limit: int = 10
    ) -> list[NotificationResult]:
        """Return recipient's notifications, newest first."""

    async def mark_read(self, notification_id: str) -> NotificationResult | None:
        """Flip is_read to True; return updated row or None."""

    async def delete_for_recipient(self, user_id: str) -> int:
        """Delete all notifications of the recipient; return rows deleted."""


# Activity repository interface
class IActivityRepository(Protocol):
    """Protocol for the activity feed store."""

    async def create(
        self,
        type: str,
        action: str,
        target: str,
        user_id: str,
        details: dict[str, Any] | None = None,
    ) -> ActivityResult:
        """Insert an activity row."""

    async def count(self) -> int:
        """Return total activity rows."""

    async def delete_oldest(self, count: int) -> int:
        """Delete the count oldest rows by created_at; return rows deleted."""

    async def list_feed(self, query: ActivityFeedQuery) -> list[ActivityResult]:
        """Return filtered feed, newest first."""
