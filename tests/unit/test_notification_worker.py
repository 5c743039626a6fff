"""Notification dispatchers and the retrying worker (delivery mocked)."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from officeflow.application.dtos.notification import NotificationRequest
from officeflow.infrastructure.notifications import (
    InlineNotificationDispatcher,
    NotificationWorker,
    QueuedNotificationDispatcher,
)


def _request(recipient: str = "u1") -> NotificationRequest:
    return NotificationRequest(
        title="Task Assigned", content="x", sent_by_id="adm", sent_to_id=recipient
    )


async def test_retry_succeeds_on_second_attempt():
    delivery = AsyncMock()
    delivery.deliver = AsyncMock(side_effect=[RuntimeError("db down"), None])
    worker = NotificationWorker(delivery, max_attempts=3, retry_delay_seconds=0)

    assert await worker.deliver_with_retry(_request()) is True
    assert delivery.deliver.await_count == 2


async def test_gives_up_after_max_attempts():
    delivery = AsyncMock()
    delivery.deliver = AsyncMock(side_effect=RuntimeError("db down"))
    worker = NotificationWorker(delivery, max_attempts=3, retry_delay_seconds=0)

    assert await worker.deliver_with_retry(_request()) is False
    assert delivery.deliver.await_count == 3


async def test_queue_full_drops_without_raising():
    queue: asyncio.Queue[NotificationRequest] = asyncio.Queue(maxsize=1)
    dispatcher = QueuedNotificationDispatcher(queue)
    await dispatcher.dispatch(_request("u1"))
    await dispatcher.dispatch(_request("u2"))
    assert queue.qsize() == 1
    assert queue.get_nowait().sent_to_id == "u1"


async def test_worker_drains_queue_on_stop():
    delivery = AsyncMock()
    worker = NotificationWorker(delivery, retry_delay_seconds=0)
    worker.start()
    assert worker.running
    dispatcher = worker.dispatcher()
    for recipient in ("u1", "u2", "u3"):
        await dispatcher.dispatch(_request(recipient))

    await worker.stop(drain_timeout=2.0)

    assert not worker.running
    delivered = [call.args[0].sent_to_id for call in delivery.deliver.await_args_list]
    assert delivered == ["u1", "u2", "u3"]


async def test_worker_survives_failed_request():
    delivery = AsyncMock()
    delivery.deliver = AsyncMock(side_effect=[RuntimeError("boom"), None])
    worker = NotificationWorker(delivery, max_attempts=1, retry_delay_seconds=0)
    worker.start()
    await worker.dispatcher().dispatch(_request("u1"))
    await worker.dispatcher().dispatch(_request("u2"))
    await worker.stop(drain_timeout=2.0)
    assert delivery.deliver.await_count == 2


async def test_stop_without_start_is_noop():
    worker = NotificationWorker(AsyncMock())
    await worker.stop()
    assert not worker.running


async def test_inline_dispatcher_swallows_failures():
    delivery = AsyncMock()
    delivery.deliver = AsyncMock(side_effect=RuntimeError("boom"))
    await InlineNotificationDispatcher(delivery).dispatch(_request())
    delivery.deliver.assert_awaited_once()


@pytest.mark.parametrize("send_email", [True, False])
async def test_inline_dispatcher_passes_request_through(send_email):
    delivery = AsyncMock()
    request = NotificationRequest(
        title="t", content="c", sent_by_id=None, sent_to_id="u9", send_email=send_email
    )
    await InlineNotificationDispatcher(delivery).dispatch(request)
    delivery.deliver.assert_awaited_once_with(request)
