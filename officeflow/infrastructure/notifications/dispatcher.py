"""Notification dispatchers and the background delivery worker.

Use cases call dispatch() after their transaction has committed. The queued
dispatcher hands requests to NotificationWorker, which the app lifespan
starts and stops; the inline dispatcher delivers immediately and is used by
scripts and tests.
"""

from __future__ import annotations

import asyncio

from officeflow.application.dtos.notification import NotificationRequest
from officeflow.infrastructure.notifications.delivery import NotificationDeliveryService
from officeflow.shared.logging import get_logger

logger = get_logger(__name__)


class QueuedNotificationDispatcher:
    """INotificationDispatcher that enqueues requests for NotificationWorker."""

    def __init__(self, queue: asyncio.Queue[NotificationRequest]) -> None:
        self._queue = queue

    async def dispatch(self, request: NotificationRequest) -> None:
        try:
            self._queue.put_nowait(request)
        except asyncio.QueueFull:
            logger.warning(
                "Notification queue full; dropping %r for user %s",
                request.title,
                request.sent_to_id,
            )


class InlineNotificationDispatcher:
    """INotificationDispatcher that delivers in the caller's task. Never raises."""

    def __init__(self, delivery: NotificationDeliveryService) -> None:
        self._delivery = delivery

    async def dispatch(self, request: NotificationRequest) -> None:
        try:
            await self._delivery.deliver(request)
        except Exception:
            logger.exception(
                "Failed to deliver notification %r to user %s",
                request.title,
                request.sent_to_id,
            )


class NotificationWorker:
    """Consumes the notification queue; each request gets up to max_attempts tries."""

    def __init__(
        self,
        delivery: NotificationDeliveryService,
        *,
        queue_size: int = 1000,
        max_attempts: int = 3,
        retry_delay_seconds: float = 2.0,
    ) -> None:
        self.queue: asyncio.Queue[NotificationRequest] = asyncio.Queue(maxsize=queue_size)
        self._delivery = delivery
        self._max_attempts = max_attempts
        self._retry_delay_seconds = retry_delay_seconds
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def dispatcher(self) -> QueuedNotificationDispatcher:
        """Return a dispatcher feeding this worker's queue."""
        return QueuedNotificationDispatcher(self.queue)

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="notification-worker")
        logger.info("Notification worker started")

    async def stop(self, drain_timeout: float = 5.0) -> None:
        """Wait up to drain_timeout for queued requests, then cancel the consumer."""
        if self._task is None:
            return
        try:
            await asyncio.wait_for(self.queue.join(), timeout=drain_timeout)
        except TimeoutError:
            logger.warning(
                "Notification worker stopping with %d undelivered requests",
                self.queue.qsize(),
            )
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Notification worker stopped")

    async def _run(self) -> None:
        while True:
            request = await self.queue.get()
            try:
                await self.deliver_with_retry(request)
            finally:
                self.queue.task_done()

    async def deliver_with_retry(self, request: NotificationRequest) -> bool:
        """Deliver one request; return False when every attempt failed."""
        for attempt in range(1, self._max_attempts + 1):
            try:
                await self._delivery.deliver(request)
                return True
            except Exception:
                if attempt == self._max_attempts:
                    logger.exception(
                        "Giving up on notification %r to user %s after %d attempts",
                        request.title,
                        request.sent_to_id,
                        attempt,
                    )
                    return False
                logger.warning(
                    "Notification %r to user %s failed (attempt %d/%d); retrying",
                    request.title,
                    request.sent_to_id,
                    attempt,
                    self._max_attempts,
                )
                await asyncio.sleep(self._retry_delay_seconds)
        return False
