"""Notification delivery and the inbox against a real database."""

from unittest.mock import AsyncMock

import pytest
from sqlalchemy import select

from officeflow.application.dtos.notification import NotificationRequest
from officeflow.application.use_cases.notifications import NotificationInbox
from officeflow.domain.exceptions import AuthorizationException, ResourceNotFoundException
from officeflow.infrastructure.notifications import (
    InlineNotificationDispatcher,
    NotificationDeliveryService,
)
from officeflow.infrastructure.persistence.models import Notification
from officeflow.infrastructure.persistence.repositories import NotificationRepository


def _request(users, recipient="a", send_email=True) -> NotificationRequest:
    return NotificationRequest(
        title="Task Assigned",
        content="Ada Admin assigned you a task: Audit",
        sent_by_id=users["admin"].id,
        sent_to_id=users[recipient].id,
        send_email=send_email,
        email_subject="Task Assigned: Audit",
    )


async def test_delivery_writes_row_and_emails(session_factory, users, fetch):
    sender = AsyncMock()
    delivery = NotificationDeliveryService(session_factory, sender)
    result = await delivery.deliver(_request(users))

    rows = await fetch(select(Notification))
    assert [r.id for r in rows] == [result.id]
    assert rows[0].is_read is False
    sender.send.assert_awaited_once()
    to_emails, subject, body = sender.send.await_args.args
    assert to_emails == ["alan@example.com"]
    assert subject == "Task Assigned: Audit"
    assert "Ada Admin assigned you a task: Audit" in body


async def test_email_failure_keeps_row(session_factory, users, fetch):
    sender = AsyncMock()
    sender.send = AsyncMock(side_effect=RuntimeError("smtp down"))
    await NotificationDeliveryService(session_factory, sender).deliver(_request(users))
    assert len(await fetch(select(Notification))) == 1


async def test_no_email_when_not_requested(session_factory, users):
    sender = AsyncMock()
    delivery = NotificationDeliveryService(session_factory, sender)
    await delivery.deliver(_request(users, send_email=False))
    sender.send.assert_not_awaited()


async def test_inline_dispatch_of_unknown_recipient_is_swallowed(session_factory, fetch):
    delivery = NotificationDeliveryService(session_factory)
    request = NotificationRequest(
        title="x", content="y", sent_by_id=None, sent_to_id="ghost-user"
    )
    await InlineNotificationDispatcher(delivery).dispatch(request)
    assert await fetch(select(Notification)) == []


@pytest.fixture
def inbox(open_session):
    def _make() -> NotificationInbox:
        session = open_session()
        return NotificationInbox(session, NotificationRepository(session))

    return _make


async def test_inbox_mark_read_and_clear(session_factory, inbox, users):
    delivery = NotificationDeliveryService(session_factory)
    first = await delivery.deliver(_request(users))
    await delivery.deliver(_request(users))
    await delivery.deliver(_request(users, recipient="b"))

    listed = await inbox().list_recent(users["a"])
    assert len(listed) == 2
    assert all(n.sent_to_id == users["a"].id for n in listed)

    read = await inbox().mark_read(first.id, users["a"])
    assert read.is_read is True

    with pytest.raises(AuthorizationException):
        await inbox().mark_read(first.id, users["b"])
    with pytest.raises(ResourceNotFoundException):
        await inbox().mark_read("missing", users["a"])

    assert await inbox().clear(users["a"]) == 2
    assert await inbox().list_recent(users["a"]) == []
    assert len(await inbox().list_recent(users["b"])) == 1
