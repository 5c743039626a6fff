from officeflow.application.services import notification_messages


def test_task_assigned_without_note():
    req = notification_messages.task_assigned(
        task_title="Audit", actor_id="u1", actor_name="Ada", recipient_id="u2"
    )
    assert req.title == "Task Assigned"
    assert req.content == "Ada assigned you a task: Audit"
    assert req.sent_by_id == "u1"
    assert req.sent_to_id == "u2"
    assert req.send_email is True
    assert req.email_subject == "Task Assigned: Audit"


def test_task_assigned_appends_note():
    req = notification_messages.task_assigned(
        task_title="Audit",
        actor_id="u1",
        actor_name="Ada",
        recipient_id="u2",
        note="urgent",
    )
    assert req.content.endswith(" - Note: urgent")


def test_task_reassigned_lists_new_assignees():
    req = notification_messages.task_reassigned(
        task_title="Audit",
        actor_id="u1",
        recipient_id="u3",
        new_assignee_names=["Beth", "Dina"],
    )
    assert req.title == "Task Reassigned"
    assert req.content == 'Your task "Audit" has been reassigned to Beth, Dina.'


def test_task_reassigned_to_nobody():
    req = notification_messages.task_reassigned(
        task_title="Audit", actor_id="u1", recipient_id="u3", new_assignee_names=[]
    )
    assert req.content == 'Your task "Audit" has been reassigned.'


def test_email_body_contains_content():
    req = notification_messages.task_assigned(
        task_title="Audit", actor_id="u1", actor_name="Ada", recipient_id="u2"
    )
    body = notification_messages.email_body(req)
    assert body.startswith("Task Assigned\n")
    assert "Ada assigned you a task: Audit" in body


def test_task_commented_is_in_app_only():
    req = notification_messages.task_commented(
        task_title="Audit", actor_id="u1", actor_name="Ada", recipient_id="u2"
    )
    assert req.title == "New Comment on Task"
    assert req.content == "Ada commented on task: Audit"
    assert req.send_email is False
