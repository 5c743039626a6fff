"""Task repository: task rows and (task, user) assignment edges."""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime
from typing import Any

from sqlalchemy import delete, exists, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from officeflow.application.dtos.task import TaskCreate, TaskResult
from officeflow.domain.enums import BillingStatus
from officeflow.domain.exceptions import ResourceNotFoundException
from officeflow.infrastructure.persistence.models.task import Task, TaskAssignee
from officeflow.infrastructure.persistence.models.task_comment import TaskComment
from officeflow.infrastructure.persistence.repositories.base import BaseRepository
from officeflow.shared.utils.datetime import ensure_utc


def _to_result(t: Task, assignee_ids: list[str]) -> TaskResult:
    """Map Task ORM to TaskResult DTO."""
    return TaskResult(
        id=t.id,
        title=t.title,
        description=t.description,
        status=t.status,
        priority=t.priority,
        due_date=ensure_utc(t.due_date),
        billing_status=t.billing_status,
        billing_date=ensure_utc(t.billing_date),
        scheduled_deletion_date=ensure_utc(t.scheduled_deletion_date),
        assigned_to_id=t.assigned_to_id,
        assigned_by_id=t.assigned_by_id,
        client_id=t.client_id,
        created_at=ensure_utc(t.created_at),
        updated_at=ensure_utc(t.updated_at),
        assignee_ids=list(assignee_ids),
    )


class TaskRepository(BaseRepository[Task]):
    """Task repository. Implements ITaskRepository."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Task)

    async def _require(self, task_id: str) -> Task:
        task = await self.get_model(task_id)
        if task is None:
            raise ResourceNotFoundException("task", task_id)
        return task

    async def get_by_id(self, task_id: str) -> TaskResult | None:
        task = await self.get_model(task_id)
        if task is None:
            return None
        return _to_result(task, await self.get_assignee_ids(task_id))

    async def get_for_update(self, task_id: str) -> TaskResult | None:
        """Lock the task row for the rest of the transaction and return fresh values."""
        stmt = (
            select(Task)
            .where(Task.id == task_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        task = result.scalar_one_or_none()
        if task is None:
            return None
        return _to_result(task, await self.get_assignee_ids(task_id))

    async def create_task(self, data: TaskCreate, assigned_by_id: str) -> TaskResult:
        """Create a task row; edges and primary pointer are written by the assignment engine."""
        task = Task(
            title=data.title,
            description=data.description,
            status=data.status,
            priority=data.priority,
            due_date=data.due_date,
            billing_status=BillingStatus.NONE.value,
            assigned_by_id=assigned_by_id,
            client_id=data.client_id,
        )
        task = await self.add(task)
        return _to_result(task, [])

    async def get_assignee_ids(self, task_id: str) -> list[str]:
        stmt = (
            select(TaskAssignee.user_id)
            .where(TaskAssignee.task_id == task_id)
            .order_by(TaskAssignee.created_at, TaskAssignee.id)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def _get_assignee_map(self, task_ids: list[str]) -> dict[str, list[str]]:
        """Batch-load assignee ids for many tasks."""
        if not task_ids:
            return {}
        stmt = (
            select(TaskAssignee.task_id, TaskAssignee.user_id)
            .where(TaskAssignee.task_id.in_(task_ids))
            .order_by(TaskAssignee.created_at, TaskAssignee.id)
        )
        result = await self.db.execute(stmt)
        by_task: dict[str, list[str]] = defaultdict(list)
        for task_id, user_id in result.all():
            by_task[task_id].append(user_id)
        return by_task

    async def add_assignees(self, task_id: str, user_ids: list[str]) -> None:
        if not user_ids:
            return
        self.db.add_all(TaskAssignee(task_id=task_id, user_id=uid) for uid in user_ids)
        await self.db.flush()

    async def remove_assignees(self, task_id: str, user_ids: list[str]) -> int:
        if not user_ids:
            return 0
        stmt = delete(TaskAssignee).where(
            TaskAssignee.task_id == task_id,
            TaskAssignee.user_id.in_(user_ids),
        )
        result = await self.db.execute(stmt)
        return result.rowcount or 0

    async def set_primary_assignee(self, task_id: str, user_id: str | None) -> None:
        task = await self._require(task_id)
        task.assigned_to_id = user_id
        await self.save(task)

    async def update_status(
        self, task_id: str, status: str, billing_status: str | None = None
    ) -> TaskResult:
        task = await self._require(task_id)
        task.status = status
        if billing_status is not None:
            task.billing_status = billing_status
        task = await self.save(task)
        return _to_result(task, await self.get_assignee_ids(task_id))

    async def mark_billed(
        self,
        task_id: str,
        billing_date: datetime,
        scheduled_deletion_date: datetime | None,
    ) -> TaskResult:
        task = await self._require(task_id)
        task.billing_status = BillingStatus.BILLED.value
        task.billing_date = billing_date
        task.scheduled_deletion_date = scheduled_deletion_date
        task = await self.save(task)
        return _to_result(task, await self.get_assignee_ids(task_id))

    async def update_fields(self, task_id: str, changes: dict[str, Any]) -> TaskResult:
        """Set plain columns (title, description, priority, due_date, client_id)."""
        task = await self._require(task_id)
        for name, value in changes.items():
            setattr(task, name, value)
        task = await self.save(task)
        return _to_result(task, await self.get_assignee_ids(task_id))

    async def delete_task(self, task_id: str) -> bool:
        """Delete comments and edges first (no reliance on FK cascade), then the task row."""
        await self.db.execute(delete(TaskComment).where(TaskComment.task_id == task_id))
        await self.db.execute(delete(TaskAssignee).where(TaskAssignee.task_id == task_id))
        result = await self.db.execute(delete(Task).where(Task.id == task_id))
        return bool(result.rowcount)

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
        stmt = select(Task)
        if visible_to_user_id is not None:
            is_assignee = exists().where(
                TaskAssignee.task_id == Task.id,
                TaskAssignee.user_id == visible_to_user_id,
            )
            conditions = [Task.assigned_to_id == visible_to_user_id, is_assignee]
            if include_created_by:
                conditions.append(Task.assigned_by_id == visible_to_user_id)
            stmt = stmt.where(or_(*conditions))
        if status is not None:
            stmt = stmt.where(Task.status == status)
        if billing_status is not None:
            stmt = stmt.where(Task.billing_status == billing_status)
        stmt = stmt.order_by(Task.created_at.desc(), Task.id).offset(skip).limit(limit)
        result = await self.db.execute(stmt)
        tasks = list(result.scalars().all())
        assignees = await self._get_assignee_map([t.id for t in tasks])
        return [_to_result(t, assignees.get(t.id, [])) for t in tasks]

    async def list_due_for_deletion(
        self, now: datetime, limit: int = 500
    ) -> list[TaskResult]:
        stmt = (
            select(Task)
            .where(
                Task.billing_status == BillingStatus.BILLED.value,
                Task.scheduled_deletion_date.is_not(None),
                Task.scheduled_deletion_date <= now,
            )
            .order_by(Task.scheduled_deletion_date)
            .limit(limit)
        )
        result = await self.db.execute(stmt)
        return [_to_result(t, []) for t in result.scalars().all()]

    async def detach_client(self, client_id: str) -> int:
        stmt = (
            update(Task)
            .where(Task.client_id == client_id)
            .values(client_id=None)
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        return result.rowcount or 0
