"""Application DTOs (plain dataclasses; no ORM or HTTP types)."""

from officeflow.application.dtos.activity import ActivityFeedQuery, ActivityResult
from officeflow.application.dtos.client import (
    ClientHistoryCreate,
    ClientHistoryResult,
    ClientResult,
)
from officeflow.application.dtos.maintenance import GuestPurgeResult, SweepResult
from officeflow.application.dtos.notification import (
    NotificationRequest,
    NotificationResult,
)
from officeflow.application.dtos.task import (
    AssignmentDelta,
    BillingApprovalResult,
    TaskAssignmentResult,
    TaskCommentResult,
    TaskCreate,
    TaskResult,
)
from officeflow.application.dtos.user import UserResult

__all__ = [
    "ActivityFeedQuery",
    "ActivityResult",
    "AssignmentDelta",
    "BillingApprovalResult",
    "ClientHistoryCreate",
    "ClientHistoryResult",
    "ClientResult",
    "GuestPurgeResult",
    "NotificationRequest",
    "NotificationResult",
    "SweepResult",
    "TaskAssignmentResult",
    "TaskCommentResult",
    "TaskCreate",
    "TaskResult",
    "UserResult",
]
