"""Service interfaces (ports) for the application layer."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from officeflow.application.dtos.activity import ActivityResult
    from officeflow.application.dtos.notification import NotificationRequest
    from officeflow.domain.value_objects.activity_details import ActivityDetails


# Email sender interface
class IEmailSender(Protocol):
    """Protocol for sending email to a list of recipients."""

    async def send(
        self,
        to_emails: list[str],
        subject: str,
        body: str,
    ) -> None:
        """Send email to the given addresses. No-op or log if not configured."""


# Notification dispatcher interface
class INotificationDispatcher(Protocol):
    """Best-effort side channel. Called after the primary transaction commits."""

    async def dispatch(self, request: NotificationRequest) -> None:
        """Deliver or enqueue the notification. Never raises."""


# Activity recorder interface
class IActivityRecorder(Protocol):
    """Append-only audit trail with bounded retention."""

    async def record(
        self,
        type: str,
        action: str,
        target: str,
        actor_id: str,
        details: ActivityDetails | dict[str, Any] | None = None,
    ) -> ActivityResult | None:
        """Insert in its own transaction, then trim. Never raises; None when skipped or failed."""

    async def append(
        self,
        type: str,
        action: str,
        target: str,
        actor_id: str,
        details: ActivityDetails | dict[str, Any] | None = None,
    ) -> ActivityResult | None:
        """Insert inside the caller's open transaction. Raises on failure."""

    async def trim(self) -> int:
        """Enforce the retention cap; return rows deleted. Never raises."""
