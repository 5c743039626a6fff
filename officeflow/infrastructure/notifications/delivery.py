"""Notification delivery: one in-app row per request, then best-effort email."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from officeflow.application.dtos.notification import (
    NotificationRequest,
    NotificationResult,
)
from officeflow.application.interfaces.services import IEmailSender
from officeflow.application.services.notification_messages import email_body
from officeflow.infrastructure.persistence.repositories.notification_repo import (
    NotificationRepository,
)
from officeflow.infrastructure.persistence.repositories.user_repo import UserRepository
from officeflow.shared.logging import get_logger

logger = get_logger(__name__)


class NotificationDeliveryService:
    """Writes the notification row in its own transaction.

    Raises when the row cannot be written so the caller may retry; email
    failures after the commit are logged and never retried.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        email_sender: IEmailSender | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._email_sender = email_sender

    async def deliver(self, request: NotificationRequest) -> NotificationResult:
        recipient_email: str | None = None
        async with self._session_factory() as session:
            async with session.begin():
                notification = await NotificationRepository(session).create(request)
                if request.send_email and self._email_sender is not None:
                    recipient = await UserRepository(session).get_by_id(
                        request.sent_to_id
                    )
                    recipient_email = recipient.email if recipient else None
        if recipient_email:
            await self._send_email(request, recipient_email)
        return notification

    async def _send_email(self, request: NotificationRequest, to_email: str) -> None:
        try:
            await self._email_sender.send(
                [to_email],
                request.email_subject or request.title,
                email_body(request),
            )
        except Exception:
            logger.exception(
                "Failed to send notification email to user %s", request.sent_to_id
            )
