"""Builders for task notifications (in-app title/content plus email subject)."""

from __future__ import annotations

from officeflow.application.dtos.notification import NotificationRequest


def task_assigned(
    *,
    task_title: str,
    actor_id: str,
    actor_name: str,
    recipient_id: str,
    note: str | None = None,
) -> NotificationRequest:
    """Notification for a user who gained an assignment edge."""
    content = f"{actor_name} assigned you a task: {task_title}"
    if note:
        content += f" - Note: {note}"
    return NotificationRequest(
        title="Task Assigned",
        content=content,
        sent_by_id=actor_id,
        sent_to_id=recipient_id,
        send_email=True,
        email_subject=f"Task Assigned: {task_title}",
    )


def task_reassigned(
    *,
    task_title: str,
    actor_id: str,
    recipient_id: str,
    new_assignee_names: list[str],
) -> NotificationRequest:
    """Notification for a user whose assignment edge was removed."""
    if new_assignee_names:
        content = (
            f'Your task "{task_title}" has been reassigned to '
            f"{', '.join(new_assignee_names)}."
        )
    else:
        content = f'Your task "{task_title}" has been reassigned.'
    return NotificationRequest(
        title="Task Reassigned",
        content=content,
        sent_by_id=actor_id,
        sent_to_id=recipient_id,
        send_email=True,
        email_subject=f"Task Reassigned: {task_title}",
    )


def task_commented(
    *,
    task_title: str,
    actor_id: str,
    actor_name: str,
    recipient_id: str,
) -> NotificationRequest:
    """In-app only; comments are too frequent for email."""
    return NotificationRequest(
        title="New Comment on Task",
        content=f"{actor_name} commented on task: {task_title}",
        sent_by_id=actor_id,
        sent_to_id=recipient_id,
    )


def email_body(request: NotificationRequest) -> str:
    """Plain-text email body for a notification."""
    return "\n".join(
        [request.title, "", request.content, "", "Log in to view the task details."]
    )
