"""Delete billed tasks whose grace window has passed."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy.ext.asyncio import AsyncSession

from officeflow.application.dtos.maintenance import SweepResult
from officeflow.application.dtos.task import TaskResult
from officeflow.domain.enums import ActivityAction, ActivityType
from officeflow.domain.value_objects.activity_details import TaskSweptDetails
from officeflow.shared.logging import get_logger
from officeflow.shared.utils.datetime import utc_now

if TYPE_CHECKING:
    from officeflow.application.interfaces.repositories import ITaskRepository
    from officeflow.application.interfaces.services import IActivityRecorder

logger = get_logger(__name__)

# Tasks deleted per transaction
SWEEP_BATCH_SIZE = 500


class TaskDeletionSweeper:
    """Deletes tasks with billing_status billed and scheduled_deletion_date <= now.

    Client history rows are never touched; they keep the task id as a plain
    reference. When system_actor_id is given, one system/auto_deleted
    activity is recorded per swept task.
    """

    def __init__(
        self,
        db: AsyncSession,
        task_repo: ITaskRepository,
        activity_recorder: IActivityRecorder | None = None,
        *,
        system_actor_id: str | None = None,
        batch_size: int = SWEEP_BATCH_SIZE,
    ) -> None:
        self.db = db
        self._task_repo = task_repo
        self._recorder = activity_recorder
        self._system_actor_id = system_actor_id
        self._batch_size = batch_size

    async def run(self, now: datetime | None = None) -> SweepResult:
        now = now or utc_now()
        swept: list[TaskResult] = []
        while True:
            async with self.db.begin():
                due = await self._task_repo.list_due_for_deletion(
                    now, limit=self._batch_size
                )
                for task in due:
                    if await self._task_repo.delete_task(task.id):
                        swept.append(task)
            if len(due) < self._batch_size:
                break
        if swept:
            logger.info("Swept %d billed task(s) past their deletion date", len(swept))
        if self._recorder is not None and self._system_actor_id:
            for task in swept:
                await self._recorder.record(
                    ActivityType.SYSTEM.value,
                    ActivityAction.AUTO_DELETED.value,
                    task.title,
                    self._system_actor_id,
                    TaskSweptDetails(
                        task_id=task.id,
                        client_id=task.client_id,
                        scheduled_deletion_date=task.scheduled_deletion_date,
                    ),
                )
        return SweepResult(deleted_task_ids=[t.id for t in swept])
