"""Application ports (Protocols) implemented by infrastructure."""

from officeflow.application.interfaces.repositories import (
    IActivityRepository,
    IClientHistoryRepository,
    IClientRepository,
    INotificationRepository,
    ITaskCommentRepository,
    ITaskRepository,
    IUserRepository,
)
from officeflow.application.interfaces.services import (
    IActivityRecorder,
    IEmailSender,
    INotificationDispatcher,
)

__all__ = [
    "IActivityRecorder",
    "IActivityRepository",
    "IClientHistoryRepository",
    "IClientRepository",
    "IEmailSender",
    "INotificationDispatcher",
    "INotificationRepository",
    "ITaskCommentRepository",
    "ITaskRepository",
    "IUserRepository",
]
