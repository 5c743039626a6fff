"""Task comments: anyone who can see a task may comment on it and read the thread."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy.ext.asyncio import AsyncSession

from officeflow.application.dtos.task import TaskCommentResult, TaskResult
from officeflow.application.dtos.user import UserResult
from officeflow.application.services import notification_messages
from officeflow.application.use_cases.tasks.task_assignment import dedupe_ids
from officeflow.domain.enums import ActivityAction, ActivityType
from officeflow.domain.exceptions import (
    AuthorizationException,
    ResourceNotFoundException,
    ValidationException,
)
from officeflow.domain.policies import can_view_task
from officeflow.domain.value_objects.activity_details import TaskCommentedDetails
from officeflow.shared.logging import get_logger

if TYPE_CHECKING:
    from officeflow.application.interfaces.repositories import (
        ITaskCommentRepository,
        ITaskRepository,
    )
    from officeflow.application.interfaces.services import (
        IActivityRecorder,
        INotificationDispatcher,
    )

logger = get_logger(__name__)


class TaskCommentService:
    def __init__(
        self,
        db: AsyncSession,
        task_repo: ITaskRepository,
        comment_repo: ITaskCommentRepository,
        activity_recorder: IActivityRecorder,
        notification_dispatcher: INotificationDispatcher,
    ) -> None:
        self.db = db
        self._task_repo = task_repo
        self._comment_repo = comment_repo
        self._recorder = activity_recorder
        self._dispatcher = notification_dispatcher

    async def add_comment(
        self, task_id: str, content: str, actor: UserResult
    ) -> TaskCommentResult:
        """Store a comment, record task/commented, and notify the creator and assignees.

        The commenter is never notified about their own comment.

        Raises:
            ValidationException: Content is empty or whitespace.
            ResourceNotFoundException: Task does not exist.
            AuthorizationException: Actor cannot see the task.
        """
        text = (content or "").strip()
        if not text:
            raise ValidationException("Comment content is required", field="content")
        async with self.db.begin():
            task = await self._visible_task(task_id, actor, "comment")
            comment = await self._comment_repo.create(
                task_id, actor.id, text, user_name=actor.name
            )

        logger.info("Comment %s added to task %s by %s", comment.id, task_id, actor.id)
        await self._recorder.record(
            ActivityType.TASK.value,
            ActivityAction.COMMENTED.value,
            task.title,
            actor.id,
            TaskCommentedDetails(task_id=task_id, comment_id=comment.id),
        )
        recipients = dedupe_ids([task.assigned_by_id, *task.assignee_ids])
        for user_id in recipients:
            if user_id == actor.id:
                continue
            request = notification_messages.task_commented(
                task_title=task.title,
                actor_id=actor.id,
                actor_name=actor.name,
                recipient_id=user_id,
            )
            try:
                await self._dispatcher.dispatch(request)
            except Exception:
                logger.exception("Comment notification failed for user %s", user_id)
        return comment

    async def list_comments(
        self, task_id: str, actor: UserResult
    ) -> list[TaskCommentResult]:
        """Oldest first. Same visibility rule as reading the task."""
        async with self.db.begin():
            await self._visible_task(task_id, actor, "read")
            return await self._comment_repo.list_for_task(task_id)

    async def _visible_task(
        self, task_id: str, actor: UserResult, action: str
    ) -> TaskResult:
        task = await self._task_repo.get_by_id(task_id)
        if task is None:
            raise ResourceNotFoundException("task", task_id)
        if not can_view_task(
            actor.role, actor.id, task.assigned_by_id, task.assignee_ids
        ):
            raise AuthorizationException("task", action)
        return task
