"""Billing approval and the task status transitions that feed it.

Billing lifecycle: none -> pending_billing (on completion) -> billed.
Approval is the only way into billed and there is no way back out.
"""

from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING

from sqlalchemy.ext.asyncio import AsyncSession

from officeflow.application.dtos.client import ClientHistoryCreate
from officeflow.application.dtos.task import BillingApprovalResult, TaskResult
from officeflow.application.dtos.user import UserResult
from officeflow.domain.enums import (
    ActivityAction,
    ActivityType,
    BillingStatus,
    ClientHistoryType,
    TaskStatus,
)
from officeflow.domain.exceptions import (
    AuthorizationException,
    InvalidStateException,
    ResourceNotFoundException,
    ValidationException,
)
from officeflow.domain.policies import can_approve_billing, can_update_task_status
from officeflow.domain.value_objects.activity_details import (
    BillingApprovedDetails,
    TaskStatusChangedDetails,
)
from officeflow.shared.logging import get_logger
from officeflow.shared.utils.datetime import utc_now

if TYPE_CHECKING:
    from officeflow.application.interfaces.repositories import (
        IClientHistoryRepository,
        IClientRepository,
        ITaskRepository,
    )
    from officeflow.application.interfaces.services import IActivityRecorder

logger = get_logger(__name__)

NOT_PENDING_MESSAGE = "Task is not pending billing approval"


class BillingApprovalService:
    """Approves billing for completed tasks and applies status changes."""

    def __init__(
        self,
        db: AsyncSession,
        task_repo: ITaskRepository,
        history_repo: IClientHistoryRepository,
        client_repo: IClientRepository,
        activity_recorder: IActivityRecorder,
        *,
        deletion_grace_hours: int = 24,
    ) -> None:
        self.db = db
        self._task_repo = task_repo
        self._history_repo = history_repo
        self._client_repo = client_repo
        self._recorder = activity_recorder
        self._grace = timedelta(hours=deletion_grace_hours)

    async def approve_billing(
        self, task_id: str, actor: UserResult
    ) -> BillingApprovalResult:
        """Move a pending_billing task to billed in one transaction.

        Client-linked tasks get a permanent task_completed history record and
        a scheduled deletion date; tasks without a client are deleted in the
        same transaction. The activity entry is part of the transaction too.

        Raises:
            AuthorizationException: Actor is not Admin.
            ResourceNotFoundException: Task does not exist.
            InvalidStateException: Task is not pending_billing (checked after
                the row lock, so concurrent approvals cannot both succeed).
        """
        if not can_approve_billing(actor.role):
            raise AuthorizationException("task", "approve_billing")
        now = utc_now()
        scheduled_deletion = now + self._grace
        history_id: str | None = None
        async with self.db.begin():
            task = await self._task_repo.get_for_update(task_id)
            if task is None:
                raise ResourceNotFoundException("task", task_id)
            if task.billing_status != BillingStatus.PENDING_BILLING.value:
                raise InvalidStateException(
                    NOT_PENDING_MESSAGE,
                    resource_id=task_id,
                    current_state=task.billing_status,
                    expected_state=BillingStatus.PENDING_BILLING.value,
                )
            if task.client_id is not None:
                history = await self._history_repo.create(
                    ClientHistoryCreate(
                        client_id=task.client_id,
                        type=ClientHistoryType.TASK_COMPLETED.value,
                        content=f"Task completed and billed: {task.title}",
                        created_by_id=actor.id,
                        task_id=task.id,
                        task_title=task.title,
                        task_description=task.description,
                        task_status=TaskStatus.COMPLETED.value,
                        task_completed_date=now,
                        task_billed_date=now,
                        billing_details={
                            "billed_by": actor.id,
                            "billed_by_name": actor.name,
                            "billed_at": now.isoformat(),
                        },
                    )
                )
                history_id = history.id
            await self._task_repo.mark_billed(task_id, now, scheduled_deletion)
            delete_now = task.client_id is None
            await self._recorder.append(
                ActivityType.TASK.value,
                ActivityAction.BILLING_APPROVED.value,
                task.title,
                actor.id,
                BillingApprovedDetails(
                    task_id=task_id,
                    previous_billing_status=task.billing_status,
                    client_id=task.client_id,
                    client_history_id=history_id,
                    task_deleted=delete_now,
                    scheduled_deletion_date=None if delete_now else scheduled_deletion,
                ),
            )
            if delete_now:
                await self._task_repo.delete_task(task_id)

        logger.info(
            "Billing approved for task %s by %s (deleted=%s)", task_id, actor.id, delete_now
        )
        await self._recorder.trim()
        return BillingApprovalResult(
            task_id=task_id,
            billing_status=BillingStatus.BILLED.value,
            billing_date=now,
            scheduled_deletion_date=None if delete_now else scheduled_deletion,
            task_deleted=delete_now,
            client_history_id=history_id,
        )

    async def update_status(
        self, task_id: str, status: str, actor: UserResult
    ) -> TaskResult:
        """Change task status; completing a client task queues it for billing approval.

        Only tasks whose client is a permanent (non-guest) client enter
        pending_billing. Guest-client and client-less tasks stay not billable,
        so guest purges never meet billed history.

        Raises:
            ValidationException: Unknown status value.
            ResourceNotFoundException: Task does not exist.
            AuthorizationException: Actor is not Admin, the creator or an assignee.
        """
        if status not in TaskStatus.values():
            raise ValidationException(f"Invalid status: {status}", field="status")
        async with self.db.begin():
            task = await self._task_repo.get_for_update(task_id)
            if task is None:
                raise ResourceNotFoundException("task", task_id)
            if not can_update_task_status(
                actor.role, actor.id, task.assigned_by_id, task.assignee_ids
            ):
                raise AuthorizationException("task", "update_status")
            pending_billing = (
                status == TaskStatus.COMPLETED.value
                and task.status != TaskStatus.COMPLETED.value
                and task.billing_status == BillingStatus.NOT_BILLABLE.value
                and await self._has_permanent_client(task)
            )
            updated = await self._task_repo.update_status(
                task_id,
                status,
                billing_status=BillingStatus.PENDING_BILLING.value
                if pending_billing
                else None,
            )

        await self._recorder.record(
            ActivityType.TASK.value,
            ActivityAction.STATUS_CHANGED.value,
            task.title,
            actor.id,
            TaskStatusChangedDetails(
                task_id=task_id,
                old_status=task.status,
                new_status=status,
                pending_billing=pending_billing,
            ),
        )
        return updated

    async def list_pending_billing(
        self, actor: UserResult, *, skip: int = 0, limit: int = 50
    ) -> list[TaskResult]:
        """Admin approval queue: tasks with billing_status pending_billing."""
        if not can_approve_billing(actor.role):
            raise AuthorizationException("task", "list_pending_billing")
        async with self.db.begin():
            return await self._task_repo.list_tasks(
                billing_status=BillingStatus.PENDING_BILLING.value,
                skip=max(0, skip),
                limit=max(1, min(limit, 100)),
            )

    async def _has_permanent_client(self, task: TaskResult) -> bool:
        if task.client_id is None:
            return False
        client = await self._client_repo.get_by_id(task.client_id)
        return client is not None and not client.is_guest
