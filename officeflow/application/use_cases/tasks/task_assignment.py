"""Task assignment: create tasks and reconcile their assignee sets.

Assignment edges (task_assignee rows) are the source of truth. Every change
to them happens inside one transaction that first locks the task row, and
the legacy primary-assignee pointer is rewritten in that same transaction.
Activity and notifications are side effects issued after the commit; their
failures are logged and never reach the caller.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from sqlalchemy.ext.asyncio import AsyncSession

from officeflow.application.dtos.task import (
    AssignmentDelta,
    TaskAssignmentResult,
    TaskCreate,
    TaskResult,
)
from officeflow.application.dtos.user import UserResult
from officeflow.application.services import notification_messages
from officeflow.domain.enums import (
    ActivityAction,
    ActivityType,
    TaskPriority,
    TaskStatus,
    UserRole,
)
from officeflow.domain.exceptions import (
    AuthorizationException,
    ResourceNotFoundException,
    ValidationException,
)
from officeflow.domain.policies import (
    can_create_task,
    can_reassign_task,
    can_view_all_tasks,
    can_view_task,
)
from officeflow.domain.value_objects.activity_details import (
    TaskCreatedDetails,
    TaskReassignedDetails,
)
from officeflow.shared.logging import get_logger

if TYPE_CHECKING:
    from officeflow.application.dtos.notification import NotificationRequest
    from officeflow.application.interfaces.repositories import (
        IClientRepository,
        ITaskRepository,
        IUserRepository,
    )
    from officeflow.application.interfaces.services import (
        IActivityRecorder,
        INotificationDispatcher,
    )

logger = get_logger(__name__)

MAX_PAGE_SIZE = 100


def dedupe_ids(ids: Iterable[str]) -> list[str]:
    """Drop duplicates and blanks, keeping first-seen order."""
    seen: set[str] = set()
    result: list[str] = []
    for user_id in ids:
        if user_id and user_id not in seen:
            seen.add(user_id)
            result.append(user_id)
    return result


def compute_delta(current_ids: list[str], requested_ids: list[str]) -> AssignmentDelta:
    """Edges to add (requested - current) and remove (current - requested)."""
    current = set(current_ids)
    requested = set(requested_ids)
    return AssignmentDelta(
        previous_ids=list(current_ids),
        requested_ids=list(requested_ids),
        to_add=[u for u in requested_ids if u not in current],
        to_remove=[u for u in current_ids if u not in requested],
    )


class TaskAssignmentService:
    """Creates tasks, reassigns them, and serves the task read model."""

    def __init__(
        self,
        db: AsyncSession,
        task_repo: ITaskRepository,
        user_repo: IUserRepository,
        client_repo: IClientRepository,
        activity_recorder: IActivityRecorder,
        notification_dispatcher: INotificationDispatcher,
    ) -> None:
        self.db = db
        self._task_repo = task_repo
        self._user_repo = user_repo
        self._client_repo = client_repo
        self._recorder = activity_recorder
        self._dispatcher = notification_dispatcher

    async def reassign(
        self,
        task_id: str,
        requested_assignee_ids: list[str],
        actor: UserResult,
        note: str | None = None,
    ) -> TaskAssignmentResult:
        """Make the task's assignee set equal to requested_assignee_ids.

        The first requested id becomes the primary assignee (None when the
        set is empty). Calling with the current set changes no edges but
        still records an activity entry.

        Raises:
            ResourceNotFoundException: Task does not exist.
            AuthorizationException: Actor is not Admin, or is a Partner who is
                not the task's current primary assignee.
            ValidationException: Some requested ids are not existing users.
        """
        requested = dedupe_ids(requested_assignee_ids)
        async with self.db.begin():
            task = await self._task_repo.get_for_update(task_id)
            if task is None:
                raise ResourceNotFoundException("task", task_id)
            if not can_reassign_task(actor.role, actor.id, task.assigned_to_id):
                raise AuthorizationException("task", "reassign")
            users = await self._load_assignees(requested)
            delta = await self._reconcile(task_id, task.assignee_ids, requested)
            assignee_ids = await self._task_repo.get_assignee_ids(task_id)

        logger.info(
            "Task %s reassigned by %s: +%d -%d",
            task_id,
            actor.id,
            len(delta.to_add),
            len(delta.to_remove),
        )
        await self._recorder.record(
            ActivityType.TASK.value,
            ActivityAction.REASSIGNED.value,
            task.title,
            actor.id,
            TaskReassignedDetails(
                task_id=task_id,
                previous_assignee_ids=delta.previous_ids,
                new_assignee_ids=delta.requested_ids,
                previous_primary_assignee_id=task.assigned_to_id,
                note=note,
            ),
        )
        names = [users[u].name for u in requested]
        requests = [
            notification_messages.task_assigned(
                task_title=task.title,
                actor_id=actor.id,
                actor_name=actor.name,
                recipient_id=user_id,
                note=note,
            )
            for user_id in delta.to_add
            if user_id != actor.id
        ]
        requests.extend(
            notification_messages.task_reassigned(
                task_title=task.title,
                actor_id=actor.id,
                recipient_id=user_id,
                new_assignee_names=names,
            )
            for user_id in delta.to_remove
        )
        await self._dispatch_all(requests)
        return TaskAssignmentResult(
            task_id=task_id,
            assignee_ids=assignee_ids,
            assigned_to_id=requested[0] if requested else None,
            delta=delta,
        )

    async def create_task(self, data: TaskCreate, actor: UserResult) -> TaskResult:
        """Create a task with its initial assignee set in one transaction.

        Raises:
            AuthorizationException: Actor is neither Admin nor Partner.
            ValidationException: Bad status/priority or unknown assignee ids.
            ResourceNotFoundException: client_id does not exist.
        """
        if not can_create_task(actor.role):
            raise AuthorizationException("task", "create")
        if not data.title or not data.title.strip():
            raise ValidationException("Task title is required", field="title")
        if data.status not in TaskStatus.values():
            raise ValidationException(f"Invalid status: {data.status}", field="status")
        if data.priority not in TaskPriority.values():
            raise ValidationException(
                f"Invalid priority: {data.priority}", field="priority"
            )
        requested = dedupe_ids(data.assignee_ids)
        async with self.db.begin():
            await self._load_assignees(requested)
            if data.client_id is not None:
                client = await self._client_repo.get_by_id(data.client_id)
                if client is None:
                    raise ResourceNotFoundException("client", data.client_id)
            created = await self._task_repo.create_task(data, assigned_by_id=actor.id)
            delta = await self._reconcile(created.id, [], requested)
            task = await self._task_repo.get_by_id(created.id)

        logger.info("Task %s created by %s", task.id, actor.id)
        await self._recorder.record(
            ActivityType.TASK.value,
            ActivityAction.CREATED.value,
            task.title,
            actor.id,
            TaskCreatedDetails(
                task_id=task.id,
                assignee_ids=requested,
                client_id=task.client_id,
            ),
        )
        await self._dispatch_all(
            notification_messages.task_assigned(
                task_title=task.title,
                actor_id=actor.id,
                actor_name=actor.name,
                recipient_id=user_id,
            )
            for user_id in delta.to_add
            if user_id != actor.id
        )
        return task

    async def get_task(self, task_id: str, actor: UserResult) -> TaskResult:
        """Return one task visible to the actor.

        Raises:
            ResourceNotFoundException: Task does not exist.
            AuthorizationException: Actor is not Admin, the creator or an assignee.
        """
        async with self.db.begin():
            task = await self._task_repo.get_by_id(task_id)
        if task is None:
            raise ResourceNotFoundException("task", task_id)
        if not can_view_task(
            actor.role, actor.id, task.assigned_by_id, task.assignee_ids
        ):
            raise AuthorizationException("task", "read")
        return task

    async def list_tasks(
        self,
        actor: UserResult,
        *,
        status: str | None = None,
        billing_status: str | None = None,
        skip: int = 0,
        limit: int = 10,
    ) -> list[TaskResult]:
        """List tasks newest first, filtered to what the actor may see.

        Admins see every task, partners the tasks they created or work on,
        everyone else the tasks they are assigned to.
        """
        limit = max(1, min(limit, MAX_PAGE_SIZE))
        visible_to = None if can_view_all_tasks(actor.role) else actor.id
        async with self.db.begin():
            return await self._task_repo.list_tasks(
                visible_to_user_id=visible_to,
                include_created_by=actor.role == UserRole.PARTNER.value,
                status=status,
                billing_status=billing_status,
                skip=max(0, skip),
                limit=limit,
            )

    async def _load_assignees(self, user_ids: list[str]) -> dict[str, UserResult]:
        """Resolve every id to a user or raise ValidationException listing the misses."""
        if not user_ids:
            return {}
        users = {u.id: u for u in await self._user_repo.get_by_ids(set(user_ids))}
        invalid = [u for u in user_ids if u not in users]
        if invalid:
            raise ValidationException(
                f"Unknown assignee ids: {', '.join(invalid)}",
                field="assignee_ids",
                invalid_ids=invalid,
            )
        return users

    async def _reconcile(
        self, task_id: str, current_ids: list[str], requested_ids: list[str]
    ) -> AssignmentDelta:
        """Apply the edge diff and primary pointer. Caller holds the transaction."""
        delta = compute_delta(current_ids, requested_ids)
        await self._task_repo.remove_assignees(task_id, delta.to_remove)
        await self._task_repo.add_assignees(task_id, delta.to_add)
        await self._task_repo.set_primary_assignee(
            task_id, requested_ids[0] if requested_ids else None
        )
        return delta

    async def _dispatch_all(self, requests: Iterable[NotificationRequest]) -> None:
        for request in requests:
            try:
                await self._dispatcher.dispatch(request)
            except Exception:
                logger.exception(
                    "Notification dispatch failed for user %s", request.sent_to_id
                )
