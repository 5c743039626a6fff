"""Client and client history DTOs (no dependency on ORM)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class ClientResult:
    id: str
    contact_person: str
    company_name: str | None
    email: str | None
    phone: str | None
    is_guest: bool
    access_expiry: datetime | None
    manager_id: str | None


@dataclass(frozen=True)
class ClientHistoryCreate:
    """Input for one append-only client history record."""

    client_id: str
    type: str
    content: str
    created_by_id: str | None
    task_id: str | None = None
    task_title: str | None = None
    task_description: str | None = None
    task_status: str | None = None
    task_completed_date: datetime | None = None
    task_billed_date: datetime | None = None
    billing_details: dict[str, Any] | None = None


@dataclass(frozen=True)
class ClientHistoryResult:
    id: str
    client_id: str
    type: str
    content: str
    created_by_id: str | None
    task_id: str | None
    task_title: str | None
    task_description: str | None
    task_status: str | None
    task_completed_date: datetime | None
    task_billed_date: datetime | None
    billing_details: dict[str, Any] | None
    created_at: datetime
