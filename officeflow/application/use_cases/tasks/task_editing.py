"""Task edits and deletion.

Edits touch only the plain task fields; status goes through billing approval
and assignees through reassignment. Both operations lock the task row first.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy.ext.asyncio import AsyncSession

from officeflow.application.dtos.task import EDITABLE_TASK_FIELDS, TaskResult
from officeflow.application.dtos.user import UserResult
from officeflow.domain.enums import (
    ActivityAction,
    ActivityType,
    BillingStatus,
    TaskPriority,
)
from officeflow.domain.exceptions import (
    AuthorizationException,
    InvalidStateException,
    ResourceNotFoundException,
    ValidationException,
)
from officeflow.domain.policies import can_delete_task, can_edit_task
from officeflow.domain.value_objects.activity_details import (
    TaskDeletedDetails,
    TaskUpdatedDetails,
)
from officeflow.shared.logging import get_logger
from officeflow.shared.utils.datetime import ensure_utc

if TYPE_CHECKING:
    from officeflow.application.interfaces.repositories import (
        IClientRepository,
        ITaskCommentRepository,
        ITaskRepository,
    )
    from officeflow.application.interfaces.services import IActivityRecorder

logger = get_logger(__name__)


def _validate_changes(changes: dict[str, Any]) -> dict[str, Any]:
    unknown = sorted(set(changes) - EDITABLE_TASK_FIELDS)
    if unknown:
        raise ValidationException(
            f"Fields cannot be edited: {', '.join(unknown)}", field=unknown[0]
        )
    cleaned = dict(changes)
    if "title" in cleaned:
        title = (cleaned["title"] or "").strip()
        if not title:
            raise ValidationException("Task title is required", field="title")
        cleaned["title"] = title
    if "priority" in cleaned and cleaned["priority"] not in TaskPriority.values():
        raise ValidationException(
            f"Invalid priority: {cleaned['priority']}", field="priority"
        )
    if "due_date" in cleaned:
        cleaned["due_date"] = ensure_utc(cleaned["due_date"])
    return cleaned


class TaskEditService:
    """Updates and deletes tasks on behalf of their creator or a manager."""

    def __init__(
        self,
        db: AsyncSession,
        task_repo: ITaskRepository,
        client_repo: IClientRepository,
        comment_repo: ITaskCommentRepository,
        activity_recorder: IActivityRecorder,
    ) -> None:
        self.db = db
        self._task_repo = task_repo
        self._client_repo = client_repo
        self._comment_repo = comment_repo
        self._recorder = activity_recorder

    async def update_task(
        self, task_id: str, changes: dict[str, Any], actor: UserResult
    ) -> TaskResult:
        """Apply a partial update; only fields whose value differs are written.

        An update that changes nothing writes nothing and records no activity.

        Raises:
            ValidationException: Unknown field, blank title or bad priority.
            ResourceNotFoundException: Task or the new client does not exist.
            AuthorizationException: Actor is neither Admin nor the creator.
            InvalidStateException: Client change on a task already queued or billed.
        """
        cleaned = _validate_changes(changes)
        async with self.db.begin():
            task = await self._task_repo.get_for_update(task_id)
            if task is None:
                raise ResourceNotFoundException("task", task_id)
            if not can_edit_task(actor.role, actor.id, task.assigned_by_id):
                raise AuthorizationException("task", "update")
            changed = {
                name: value
                for name, value in cleaned.items()
                if getattr(task, name) != value
            }
            if not changed:
                return task
            if "client_id" in changed:
                await self._check_client_change(task, changed["client_id"])
            updated = await self._task_repo.update_fields(task_id, changed)

        fields = sorted(changed)
        logger.info("Task %s updated by %s: %s", task_id, actor.id, ", ".join(fields))
        await self._recorder.record(
            ActivityType.TASK.value,
            ActivityAction.UPDATED.value,
            updated.title,
            actor.id,
            TaskUpdatedDetails(task_id=task_id, changed_fields=fields),
        )
        return updated

    async def delete_task(self, task_id: str, actor: UserResult) -> None:
        """Delete the task with its comments and assignment edges.

        Raises:
            ResourceNotFoundException: Task does not exist.
            AuthorizationException: Actor is neither Admin, Partner nor the creator.
        """
        async with self.db.begin():
            task = await self._task_repo.get_for_update(task_id)
            if task is None:
                raise ResourceNotFoundException("task", task_id)
            if not can_delete_task(actor.role, actor.id, task.assigned_by_id):
                raise AuthorizationException("task", "delete")
            comment_count = await self._comment_repo.count_for_task(task_id)
            await self._task_repo.delete_task(task_id)

        logger.info("Task %s deleted by %s", task_id, actor.id)
        await self._recorder.record(
            ActivityType.TASK.value,
            ActivityAction.DELETED.value,
            task.title,
            actor.id,
            TaskDeletedDetails(
                task_id=task_id,
                client_id=task.client_id,
                billing_status=task.billing_status,
                comment_count=comment_count,
            ),
        )

    async def _check_client_change(
        self, task: TaskResult, client_id: str | None
    ) -> None:
        # History rows are written against the client present at approval time.
        if task.billing_status != BillingStatus.NOT_BILLABLE.value:
            raise InvalidStateException(
                "Client cannot change once billing has started",
                task.id,
                current_state=task.billing_status,
                expected_state=BillingStatus.NOT_BILLABLE.value,
            )
        if client_id is not None:
            client = await self._client_repo.get_by_id(client_id)
            if client is None:
                raise ResourceNotFoundException("client", client_id)
