"""Notification DTOs (no dependency on ORM)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class NotificationRequest:
    """One notification to deliver (in-app row, optional email)."""

    title: str
    content: str
    sent_by_id: str | None
    sent_to_id: str
    send_email: bool = False
    email_subject: str | None = None


@dataclass(frozen=True)
class NotificationResult:
    id: str
    title: str
    content: str
    sent_by_id: str | None
    sent_to_id: str
    is_read: bool
    created_at: datetime
