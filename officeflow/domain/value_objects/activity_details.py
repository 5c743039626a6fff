"""Typed payloads for Activity.details.

Each activity kind has one frozen dataclass. The stored JSON carries a
"kind" tag so parse_activity_details can rebuild the right type; entries
written before the tag existed (or by unknown kinds) come back as None.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from datetime import datetime
from typing import Any, ClassVar


@dataclass(frozen=True)
class ActivityDetails:
    """Base for activity detail payloads. Subclasses set kind."""

    kind: ClassVar[str] = ""

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-safe dict with the kind tag."""
        data = asdict(self)
        for key, value in data.items():
            if isinstance(value, datetime):
                data[key] = value.isoformat()
        data["kind"] = self.kind
        return data


@dataclass(frozen=True)
class TaskCreatedDetails(ActivityDetails):
    kind: ClassVar[str] = "task_created"

    task_id: str
    assignee_ids: list[str] = field(default_factory=list)
    client_id: str | None = None


@dataclass(frozen=True)
class TaskReassignedDetails(ActivityDetails):
    """Previous and new assignee sets of one reassign call."""

    kind: ClassVar[str] = "task_reassigned"

    task_id: str
    previous_assignee_ids: list[str]
    new_assignee_ids: list[str]
    previous_primary_assignee_id: str | None = None
    note: str | None = None


@dataclass(frozen=True)
class TaskStatusChangedDetails(ActivityDetails):
    kind: ClassVar[str] = "task_status_changed"

    task_id: str
    old_status: str
    new_status: str
    pending_billing: bool = False


@dataclass(frozen=True)
class TaskUpdatedDetails(ActivityDetails):
    kind: ClassVar[str] = "task_updated"

    task_id: str
    changed_fields: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class TaskDeletedDetails(ActivityDetails):
    kind: ClassVar[str] = "task_deleted"

    task_id: str
    client_id: str | None = None
    billing_status: str | None = None
    comment_count: int = 0


@dataclass(frozen=True)
class TaskCommentedDetails(ActivityDetails):
    kind: ClassVar[str] = "task_commented"

    task_id: str
    comment_id: str


@dataclass(frozen=True)
class BillingApprovedDetails(ActivityDetails):
    """Billing approval: previous billing status and what happened to the task."""

    kind: ClassVar[str] = "billing_approved"

    task_id: str
    previous_billing_status: str
    client_id: str | None = None
    client_history_id: str | None = None
    task_deleted: bool = False
    scheduled_deletion_date: datetime | None = None


@dataclass(frozen=True)
class ClientNoteDetails(ActivityDetails):
    kind: ClassVar[str] = "client_note"

    client_id: str
    history_id: str


@dataclass(frozen=True)
class GuestClientPurgedDetails(ActivityDetails):
    kind: ClassVar[str] = "guest_client_purged"

    client_id: str
    reason: str = "access_expired"
    expired_on: datetime | None = None
    client_email: str | None = None
    client_phone: str | None = None


@dataclass(frozen=True)
class TaskSweptDetails(ActivityDetails):
    kind: ClassVar[str] = "task_swept"

    task_id: str
    client_id: str | None = None
    scheduled_deletion_date: datetime | None = None


_DETAIL_TYPES: dict[str, type[ActivityDetails]] = {
    cls.kind: cls
    for cls in (
        TaskCreatedDetails,
        TaskReassignedDetails,
        TaskStatusChangedDetails,
        TaskUpdatedDetails,
        TaskDeletedDetails,
        TaskCommentedDetails,
        BillingApprovedDetails,
        ClientNoteDetails,
        GuestClientPurgedDetails,
        TaskSweptDetails,
    )
}


def parse_activity_details(data: dict[str, Any] | None) -> ActivityDetails | None:
    """Rebuild a typed payload from stored JSON; None for missing or unknown kinds.

    Datetime fields are returned as the ISO strings they were stored as.
    """
    if not data:
        return None
    cls = _DETAIL_TYPES.get(data.get("kind", ""))
    if cls is None:
        return None
    names = {f.name for f in fields(cls)}
    return cls(**{k: v for k, v in data.items() if k in names})
