from officeflow.application.use_cases.notifications.inbox import NotificationInbox

__all__ = ["NotificationInbox"]
