"""Billing approval, status transitions and the deletion sweep on a real database."""

from datetime import timedelta

import pytest
from sqlalchemy import select

from officeflow.application.use_cases.maintenance import TaskDeletionSweeper
from officeflow.application.use_cases.tasks import BillingApprovalService
from officeflow.domain.exceptions import AuthorizationException, InvalidStateException
from officeflow.infrastructure.persistence.models import (
    Activity,
    Client,
    ClientHistory,
    Task,
    TaskAssignee,
    TaskComment,
)
from officeflow.infrastructure.persistence.repositories import (
    ClientHistoryRepository,
    ClientRepository,
    TaskRepository,
)
from officeflow.infrastructure.services import ActivityRecorder
from officeflow.shared.utils.datetime import ensure_utc, utc_now


@pytest.fixture
async def client_row(seed, users):
    row = Client(
        contact_person="Carla", company_name="Acme Ltd", manager_id=users["partner"].id
    )
    await seed(row)
    return row


@pytest.fixture
def pending_task(seed, users):
    async def _make(client_id=None, billing_status="pending_billing", status="completed"):
        task = Task(
            title="Year-end accounts",
            description="Prepare and file",
            status=status,
            billing_status=billing_status,
            assigned_by_id=users["admin"].id,
            assigned_to_id=users["a"].id,
            client_id=client_id,
        )
        await seed(task)
        await seed(TaskAssignee(task_id=task.id, user_id=users["a"].id))
        return task.id

    return _make


async def _task(fetch, task_id):
    rows = await fetch(select(Task).where(Task.id == task_id))
    return rows[0] if rows else None


async def test_approve_client_task_writes_history_and_schedule(
    billing_service, pending_task, client_row, users, fetch
):
    task_id = await pending_task(client_id=client_row.id)
    result = await billing_service().approve_billing(task_id, users["admin"])

    task = await _task(fetch, task_id)
    assert task.billing_status == "billed"
    assert not result.task_deleted
    delta = ensure_utc(task.scheduled_deletion_date) - ensure_utc(task.billing_date)
    assert delta == timedelta(hours=24)

    history = await fetch(select(ClientHistory).where(ClientHistory.task_id == task_id))
    assert len(history) == 1
    entry = history[0]
    assert entry.type == "task_completed"
    assert entry.task_title == "Year-end accounts"
    assert entry.task_description == "Prepare and file"
    assert entry.content == "Task completed and billed: Year-end accounts"
    assert entry.billing_details["billed_by"] == users["admin"].id
    assert entry.billing_details["billed_by_name"] == "Ada Admin"
    assert result.client_history_id == entry.id

    activity = await fetch(select(Activity).where(Activity.action == "billing_approved"))
    assert len(activity) == 1
    assert activity[0].details["kind"] == "billing_approved"


async def test_approve_task_without_client_deletes_it(
    billing_service, pending_task, users, fetch, seed
):
    task_id = await pending_task()
    await seed(TaskComment(task_id=task_id, user_id=users["a"].id, content="Filed"))
    result = await billing_service().approve_billing(task_id, users["admin"])

    assert result.task_deleted
    assert await _task(fetch, task_id) is None
    assert await fetch(select(TaskAssignee).where(TaskAssignee.task_id == task_id)) == []
    assert await fetch(select(ClientHistory)) == []
    assert await fetch(select(TaskComment)) == []
    activity = await fetch(select(Activity).where(Activity.action == "billing_approved"))
    assert activity[0].details["task_deleted"] is True


async def test_second_approval_is_rejected(
    billing_service, pending_task, client_row, users, fetch
):
    task_id = await pending_task(client_id=client_row.id)
    await billing_service().approve_billing(task_id, users["admin"])
    before = await _task(fetch, task_id)

    with pytest.raises(InvalidStateException, match="not pending billing approval"):
        await billing_service().approve_billing(task_id, users["admin"])

    after = await _task(fetch, task_id)
    assert after.billing_date == before.billing_date
    assert after.scheduled_deletion_date == before.scheduled_deletion_date
    history = await fetch(select(ClientHistory).where(ClientHistory.task_id == task_id))
    assert len(history) == 1


async def test_not_pending_leaves_task_untouched(
    billing_service, pending_task, users, fetch
):
    task_id = await pending_task(billing_status="none", status="in-progress")
    with pytest.raises(InvalidStateException):
        await billing_service().approve_billing(task_id, users["admin"])
    task = await _task(fetch, task_id)
    assert task.billing_status == "none"
    assert task.billing_date is None
    assert await fetch(select(Activity)) == []


async def test_only_admin_approves(billing_service, pending_task, users):
    task_id = await pending_task()
    with pytest.raises(AuthorizationException):
        await billing_service().approve_billing(task_id, users["partner"])


class _FailingHistoryRepository(ClientHistoryRepository):
    async def create(self, data):
        raise RuntimeError("disk full")


async def test_history_failure_rolls_back_billing(
    open_session, session_factory, pending_task, client_row, users, fetch
):
    task_id = await pending_task(client_id=client_row.id)
    session = open_session()
    service = BillingApprovalService(
        db=session,
        task_repo=TaskRepository(session),
        history_repo=_FailingHistoryRepository(session),
        client_repo=ClientRepository(session),
        activity_recorder=ActivityRecorder(session_factory, db=session),
    )
    with pytest.raises(RuntimeError):
        await service.approve_billing(task_id, users["admin"])

    task = await _task(fetch, task_id)
    assert task.billing_status == "pending_billing"
    assert task.scheduled_deletion_date is None
    assert await fetch(select(Activity)) == []


async def test_completing_client_task_queues_billing(
    billing_service, pending_task, client_row, users
):
    task_id = await pending_task(
        client_id=client_row.id, billing_status="none", status="in-progress"
    )
    updated = await billing_service().update_status(task_id, "completed", users["a"])

    assert updated.status == "completed"
    assert updated.billing_status == "pending_billing"
    queue = await billing_service().list_pending_billing(users["admin"])
    assert [t.id for t in queue] == [task_id]


async def test_sweeper_keeps_client_history(
    billing_service, open_session, session_factory, pending_task, client_row, users, fetch
):
    task_id = await pending_task(client_id=client_row.id)
    await billing_service().approve_billing(task_id, users["admin"])

    session = open_session()
    sweeper = TaskDeletionSweeper(
        session,
        TaskRepository(session),
        ActivityRecorder(session_factory),
        system_actor_id=users["admin"].id,
    )
    early = await sweeper.run(now=utc_now())
    assert early.deleted_count == 0

    result = await sweeper.run(now=utc_now() + timedelta(hours=25))
    assert result.deleted_task_ids == [task_id]
    assert await _task(fetch, task_id) is None
    history = await fetch(select(ClientHistory).where(ClientHistory.task_id == task_id))
    assert len(history) == 1
    assert history[0].task_title == "Year-end accounts"
    swept = await fetch(select(Activity).where(Activity.action == "auto_deleted"))
    assert len(swept) == 1
    assert swept[0].type == "system"


async def test_end_to_end_reassign_then_bill(
    assignment_service, billing_service, seed, client_row, users, fetch, dispatcher
):
    task = Task(
        title="VAT return",
        assigned_by_id=users["admin"].id,
        assigned_to_id=users["a"].id,
        client_id=client_row.id,
    )
    await seed(task)
    await seed(
        TaskAssignee(task_id=task.id, user_id=users["a"].id),
        TaskAssignee(task_id=task.id, user_id=users["b"].id),
    )

    await assignment_service().reassign(
        task.id, [users["b"].id, users["d"].id], users["admin"]
    )
    assert dispatcher.recipients("Task Assigned") == [users["d"].id]
    assert dispatcher.recipients("Task Reassigned") == [users["a"].id]
    assert (await _task(fetch, task.id)).assigned_to_id == users["b"].id

    await billing_service().update_status(task.id, "completed", users["b"])
    await billing_service().approve_billing(task.id, users["admin"])
    with pytest.raises(InvalidStateException):
        await billing_service().approve_billing(task.id, users["admin"])
    assert (await _task(fetch, task.id)).billing_status == "billed"
