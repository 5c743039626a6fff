"""Task edits, deletion and comments against a real database."""

from datetime import UTC, datetime

import pytest
from sqlalchemy import select

from officeflow.domain.exceptions import AuthorizationException, InvalidStateException
from officeflow.infrastructure.persistence.models import (
    Activity,
    Client,
    Task,
    TaskAssignee,
    TaskComment,
)
from officeflow.shared.utils.datetime import ensure_utc


@pytest.fixture
async def task_id(seed, users):
    """Task created by the partner, assigned to a and b (a is primary)."""
    task = Task(
        title="VAT return",
        assigned_by_id=users["partner"].id,
        assigned_to_id=users["a"].id,
    )
    await seed(task)
    await seed(
        TaskAssignee(task_id=task.id, user_id=users["a"].id),
        TaskAssignee(task_id=task.id, user_id=users["b"].id),
    )
    return task.id


async def test_comment_is_stored_recorded_and_notified(
    comment_service, task_id, users, dispatcher, fetch
):
    comment = await comment_service().add_comment(task_id, "Figures ready", users["a"])

    rows = await fetch(select(TaskComment).where(TaskComment.task_id == task_id))
    assert [r.content for r in rows] == ["Figures ready"]
    assert comment.user_name == "Alan"
    assert sorted(dispatcher.recipients("New Comment on Task")) == sorted(
        [users["partner"].id, users["b"].id]
    )
    activity = await fetch(select(Activity).where(Activity.action == "commented"))
    assert activity[0].details == {
        "kind": "task_commented",
        "task_id": task_id,
        "comment_id": comment.id,
    }


async def test_comments_list_oldest_first_with_author_names(
    comment_service, task_id, users
):
    await comment_service().add_comment(task_id, "first", users["a"])
    await comment_service().add_comment(task_id, "second", users["partner"])

    comments = await comment_service().list_comments(task_id, users["b"])

    assert [(c.content, c.user_name) for c in comments] == [
        ("first", "Alan"),
        ("second", "Pat Partner"),
    ]


async def test_non_assignee_cannot_read_comments(comment_service, task_id, users):
    with pytest.raises(AuthorizationException):
        await comment_service().list_comments(task_id, users["d"])


async def test_creator_edits_fields(edit_service, task_id, users, fetch):
    due = datetime(2026, 3, 31, 17, 0, tzinfo=UTC)
    task = await edit_service().update_task(
        task_id,
        {"title": "VAT return Q1", "priority": "high", "due_date": due},
        users["partner"],
    )

    assert task.title == "VAT return Q1"
    assert sorted(task.assignee_ids) == sorted([users["a"].id, users["b"].id])
    row = (await fetch(select(Task).where(Task.id == task_id)))[0]
    assert row.priority == "high"
    assert ensure_utc(row.due_date) == due
    activity = await fetch(select(Activity).where(Activity.action == "updated"))
    assert activity[0].details["changed_fields"] == ["due_date", "priority", "title"]


async def test_client_is_locked_once_billed(edit_service, seed, task_id, users):
    client = Client(contact_person="Carla", company_name="Acme Ltd")
    await seed(client)
    billed = Task(
        title="Payroll",
        assigned_by_id=users["partner"].id,
        status="completed",
        billing_status="billed",
    )
    await seed(billed)

    with pytest.raises(InvalidStateException):
        await edit_service().update_task(
            billed.id, {"client_id": client.id}, users["admin"]
        )
    task = await edit_service().update_task(
        task_id, {"client_id": client.id}, users["admin"]
    )
    assert task.client_id == client.id


async def test_delete_removes_comments_and_edges(
    edit_service, comment_service, task_id, users, fetch
):
    await comment_service().add_comment(task_id, "done", users["a"])

    await edit_service().delete_task(task_id, users["partner2"])

    assert await fetch(select(Task).where(Task.id == task_id)) == []
    assert await fetch(select(TaskAssignee).where(TaskAssignee.task_id == task_id)) == []
    assert await fetch(select(TaskComment)) == []
    activity = await fetch(select(Activity).where(Activity.action == "deleted"))
    assert activity[0].details["comment_count"] == 1


async def test_assignee_cannot_delete(edit_service, task_id, users, fetch):
    with pytest.raises(AuthorizationException):
        await edit_service().delete_task(task_id, users["a"])
    assert len(await fetch(select(Task).where(Task.id == task_id))) == 1
