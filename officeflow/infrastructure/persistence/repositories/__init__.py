"""SQLAlchemy repositories implementing the application ports."""

from officeflow.infrastructure.persistence.repositories.activity_repo import (
    ActivityRepository,
)
from officeflow.infrastructure.persistence.repositories.base import BaseRepository
from officeflow.infrastructure.persistence.repositories.client_history_repo import (
    ClientHistoryRepository,
)
from officeflow.infrastructure.persistence.repositories.client_repo import (
    ClientRepository,
)
from officeflow.infrastructure.persistence.repositories.notification_repo import (
    NotificationRepository,
)
from officeflow.infrastructure.persistence.repositories.task_comment_repo import (
    TaskCommentRepository,
)
from officeflow.infrastructure.persistence.repositories.task_repo import TaskRepository
from officeflow.infrastructure.persistence.repositories.user_repo import UserRepository

__all__ = [
    "ActivityRepository",
    "BaseRepository",
    "ClientHistoryRepository",
    "ClientRepository",
    "NotificationRepository",
    "TaskCommentRepository",
    "TaskRepository",
    "UserRepository",
]
