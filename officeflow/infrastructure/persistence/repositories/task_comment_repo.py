"""Task comment repository."""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from officeflow.application.dtos.task import TaskCommentResult
from officeflow.infrastructure.persistence.models.task_comment import TaskComment
from officeflow.infrastructure.persistence.models.user import User
from officeflow.infrastructure.persistence.repositories.base import BaseRepository
from officeflow.shared.utils.datetime import ensure_utc


def _to_result(c: TaskComment, user_name: str | None) -> TaskCommentResult:
    return TaskCommentResult(
        id=c.id,
        task_id=c.task_id,
        user_id=c.user_id,
        user_name=user_name,
        content=c.content,
        created_at=ensure_utc(c.created_at),
    )


class TaskCommentRepository(BaseRepository[TaskComment]):
    """Implements ITaskCommentRepository. Deletion happens through TaskRepository.delete_task."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, TaskComment)

    async def create(
        self, task_id: str, user_id: str, content: str, user_name: str | None = None
    ) -> TaskCommentResult:
        comment = await self.add(
            TaskComment(task_id=task_id, user_id=user_id, content=content)
        )
        return _to_result(comment, user_name)

    async def list_for_task(self, task_id: str) -> list[TaskCommentResult]:
        """Oldest first, each with the author's current name."""
        stmt = (
            select(TaskComment, User.name)
            .outerjoin(User, User.id == TaskComment.user_id)
            .where(TaskComment.task_id == task_id)
            .order_by(TaskComment.created_at, TaskComment.id)
        )
        result = await self.db.execute(stmt)
        return [_to_result(comment, name) for comment, name in result.all()]

    async def count_for_task(self, task_id: str) -> int:
        stmt = select(func.count(TaskComment.id)).where(TaskComment.task_id == task_id)
        result = await self.db.execute(stmt)
        return int(result.scalar_one())
