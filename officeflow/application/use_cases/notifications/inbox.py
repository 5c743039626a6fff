"""Notification inbox for the current user."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy.ext.asyncio import AsyncSession

from officeflow.application.dtos.notification import NotificationResult
from officeflow.application.dtos.user import UserResult
from officeflow.domain.exceptions import AuthorizationException, ResourceNotFoundException

if TYPE_CHECKING:
    from officeflow.application.interfaces.repositories import INotificationRepository


class NotificationInbox:
    """List, mark read and clear a user's notifications."""

    def __init__(self, db: AsyncSession, notification_repo: INotificationRepository) -> None:
        self.db = db
        self._repo = notification_repo

    async def list_recent(
        self, actor: UserResult, limit: int = 10
    ) -> list[NotificationResult]:
        async with self.db.begin():
            return await self._repo.list_for_recipient(actor.id, max(1, min(limit, 100)))

    async def mark_read(self, notification_id: str, actor: UserResult) -> NotificationResult:
        """Only the recipient may mark a notification as read."""
        async with self.db.begin():
            notification = await self._repo.get_by_id(notification_id)
            if notification is None:
                raise ResourceNotFoundException("notification", notification_id)
            if notification.sent_to_id != actor.id:
                raise AuthorizationException("notification", "mark_read")
            return await self._repo.mark_read(notification_id)

    async def clear(self, actor: UserResult) -> int:
        async with self.db.begin():
            return await self._repo.delete_for_recipient(actor.id)
