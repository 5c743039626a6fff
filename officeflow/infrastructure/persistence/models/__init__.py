"""ORM models. Importing this package registers every table on Base.metadata."""

from officeflow.infrastructure.persistence.models.activity import Activity
from officeflow.infrastructure.persistence.models.client import Client
from officeflow.infrastructure.persistence.models.client_history import ClientHistory
from officeflow.infrastructure.persistence.models.notification import Notification
from officeflow.infrastructure.persistence.models.task import Task, TaskAssignee
from officeflow.infrastructure.persistence.models.task_comment import TaskComment
from officeflow.infrastructure.persistence.models.user import User

__all__ = [
    "Activity",
    "Client",
    "ClientHistory",
    "Notification",
    "Task",
    "TaskAssignee",
    "TaskComment",
    "User",
]
