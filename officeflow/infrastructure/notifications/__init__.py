"""Notification delivery: dispatchers, background worker and email sender."""

from officeflow.infrastructure.notifications.delivery import NotificationDeliveryService
from officeflow.infrastructure.notifications.dispatcher import (
    InlineNotificationDispatcher,
    NotificationWorker,
    QueuedNotificationDispatcher,
)
from officeflow.infrastructure.notifications.email_sender import (
    LogOnlyEmailSender,
    SmtpEmailSender,
    build_email_sender,
)

__all__ = [
    "InlineNotificationDispatcher",
    "LogOnlyEmailSender",
    "NotificationDeliveryService",
    "NotificationWorker",
    "QueuedNotificationDispatcher",
    "SmtpEmailSender",
    "build_email_sender",
]
