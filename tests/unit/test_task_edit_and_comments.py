"""TaskEditService and TaskCommentService unit tests with mocked repos."""

from contextlib import asynccontextmanager
from dataclasses import replace
from datetime import UTC, datetime
from unittest.mock import AsyncMock

import pytest

from officeflow.application.dtos.client import ClientResult
from officeflow.application.dtos.task import TaskCommentResult, TaskResult
from officeflow.application.dtos.user import UserResult
from officeflow.application.use_cases.tasks import TaskCommentService, TaskEditService
from officeflow.domain.exceptions import (
    AuthorizationException,
    InvalidStateException,
    ResourceNotFoundException,
    ValidationException,
)
from officeflow.domain.value_objects import (
    TaskCommentedDetails,
    TaskDeletedDetails,
    TaskUpdatedDetails,
)

NOW = datetime(2026, 1, 15, 12, 0, tzinfo=UTC)


def _user(user_id: str, role: str = "BUSINESS_CONSULTANT") -> UserResult:
    return UserResult(
        id=user_id, name=user_id.upper(), email=f"{user_id}@x.io", role=role, is_active=True
    )


def _task(**overrides) -> TaskResult:
    task = TaskResult(
        id="t1",
        title="Audit",
        description=None,
        status="pending",
        priority="medium",
        due_date=None,
        billing_status="none",
        billing_date=None,
        scheduled_deletion_date=None,
        assigned_to_id="a",
        assigned_by_id="creator",
        client_id="c1",
        created_at=NOW,
        updated_at=NOW,
        assignee_ids=["a", "b"],
    )
    return replace(task, **overrides)


class _FakeSession:
    @asynccontextmanager
    async def begin(self):
        yield


@pytest.fixture
def edit():
    task_repo = AsyncMock()
    task_repo.get_for_update = AsyncMock(return_value=_task())
    task_repo.update_fields = AsyncMock(
        side_effect=lambda task_id, changes: _task(**changes)
    )
    client_repo = AsyncMock()
    client_repo.get_by_id = AsyncMock(
        return_value=ClientResult(
            id="c2",
            contact_person="Hank",
            company_name="Globex",
            email=None,
            phone=None,
            is_guest=False,
            access_expiry=None,
            manager_id=None,
        )
    )
    comment_repo = AsyncMock()
    comment_repo.count_for_task = AsyncMock(return_value=3)
    recorder = AsyncMock()
    svc = TaskEditService(
        db=_FakeSession(),
        task_repo=task_repo,
        client_repo=client_repo,
        comment_repo=comment_repo,
        activity_recorder=recorder,
    )
    svc.task_repo = task_repo
    svc.client_repo = client_repo
    svc.recorder = recorder
    return svc


@pytest.fixture
def comments(dispatcher):
    task_repo = AsyncMock()
    task_repo.get_by_id = AsyncMock(return_value=_task())
    comment_repo = AsyncMock()
    comment_repo.create = AsyncMock(
        side_effect=lambda task_id, user_id, content, user_name=None: TaskCommentResult(
            id="cm1",
            task_id=task_id,
            user_id=user_id,
            user_name=user_name,
            content=content,
            created_at=NOW,
        )
    )
    comment_repo.list_for_task = AsyncMock(return_value=[])
    recorder = AsyncMock()
    svc = TaskCommentService(
        db=_FakeSession(),
        task_repo=task_repo,
        comment_repo=comment_repo,
        activity_recorder=recorder,
        notification_dispatcher=dispatcher,
    )
    svc.task_repo = task_repo
    svc.comment_repo = comment_repo
    svc.recorder = recorder
    return svc


async def test_creator_updates_only_changed_fields(edit):
    task = await edit.update_task(
        "t1", {"title": " Audit 2026 ", "priority": "medium"}, _user("creator")
    )

    assert task.title == "Audit 2026"
    edit.task_repo.update_fields.assert_awaited_once_with("t1", {"title": "Audit 2026"})
    details = edit.recorder.record.await_args.args[4]
    assert isinstance(details, TaskUpdatedDetails)
    assert details.changed_fields == ["title"]


async def test_update_without_changes_records_nothing(edit):
    task = await edit.update_task("t1", {"priority": "medium"}, _user("creator"))

    assert task.priority == "medium"
    edit.task_repo.update_fields.assert_not_awaited()
    edit.recorder.record.assert_not_awaited()


async def test_assignee_cannot_edit_task(edit):
    with pytest.raises(AuthorizationException):
        await edit.update_task("t1", {"title": "New"}, _user("a"))


@pytest.mark.parametrize(
    "changes,field",
    [
        ({"status": "completed"}, "status"),
        ({"title": "  "}, "title"),
        ({"priority": "urgent"}, "priority"),
    ],
)
async def test_update_rejects_bad_input(edit, changes, field):
    with pytest.raises(ValidationException) as exc_info:
        await edit.update_task("t1", changes, _user("admin", "ADMIN"))
    assert exc_info.value.details["field"] == field
    edit.task_repo.get_for_update.assert_not_awaited()


async def test_client_cannot_change_once_billing_started(edit):
    edit.task_repo.get_for_update.return_value = _task(billing_status="pending_billing")

    with pytest.raises(InvalidStateException):
        await edit.update_task("t1", {"client_id": "c2"}, _user("admin", "ADMIN"))
    edit.task_repo.update_fields.assert_not_awaited()


async def test_update_to_unknown_client_is_not_found(edit):
    edit.client_repo.get_by_id.return_value = None

    with pytest.raises(ResourceNotFoundException):
        await edit.update_task("t1", {"client_id": "missing"}, _user("creator"))


async def test_partner_deletes_task_and_activity_counts_comments(edit):
    await edit.delete_task("t1", _user("p", "PARTNER"))

    edit.task_repo.delete_task.assert_awaited_once_with("t1")
    details = edit.recorder.record.await_args.args[4]
    assert isinstance(details, TaskDeletedDetails)
    assert details.comment_count == 3
    assert details.client_id == "c1"


async def test_consultant_cannot_delete_task_they_did_not_create(edit):
    with pytest.raises(AuthorizationException):
        await edit.delete_task("t1", _user("a"))
    edit.task_repo.delete_task.assert_not_awaited()


async def test_delete_missing_task_is_not_found(edit):
    edit.task_repo.get_for_update.return_value = None

    with pytest.raises(ResourceNotFoundException):
        await edit.delete_task("t1", _user("admin", "ADMIN"))


async def test_comment_notifies_creator_and_other_assignees(comments, dispatcher):
    comment = await comments.add_comment("t1", "  Draft attached ", _user("a"))

    assert comment.content == "Draft attached"
    assert comment.user_name == "A"
    assert dispatcher.recipients("New Comment on Task") == ["creator", "b"]
    details = comments.recorder.record.await_args.args[4]
    assert isinstance(details, TaskCommentedDetails)
    assert details.comment_id == "cm1"


async def test_blank_comment_is_rejected(comments):
    with pytest.raises(ValidationException):
        await comments.add_comment("t1", "   ", _user("a"))
    comments.comment_repo.create.assert_not_awaited()


async def test_outsider_cannot_comment_or_read_comments(comments):
    with pytest.raises(AuthorizationException):
        await comments.add_comment("t1", "hello", _user("d"))
    with pytest.raises(AuthorizationException):
        await comments.list_comments("t1", _user("d"))


async def test_comment_survives_notification_failure(comments):
    comments._dispatcher = AsyncMock()
    comments._dispatcher.dispatch = AsyncMock(side_effect=RuntimeError("down"))

    comment = await comments.add_comment("t1", "hello", _user("a"))

    assert comment.id == "cm1"
