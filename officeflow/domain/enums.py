"""Domain enumerations for officeflow.

Enums represent fixed sets of domain values (roles, task lifecycle,
billing lifecycle, history and activity kinds). Stored as their string
values in the database.
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class UserRole(_ValuesMixin, str, Enum):
    """User role hierarchy (most to least privileged)."""

    ADMIN = "ADMIN"
    PARTNER = "PARTNER"
    BUSINESS_EXECUTIVE = "BUSINESS_EXECUTIVE"
    BUSINESS_CONSULTANT = "BUSINESS_CONSULTANT"
    CLIENT = "CLIENT"


class TaskStatus(_ValuesMixin, str, Enum):
    """Work status of a task."""

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    REVIEW = "review"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class TaskPriority(_ValuesMixin, str, Enum):
    """Task priority."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class BillingStatus(_ValuesMixin, str, Enum):
    """Billing lifecycle: not billable ("none") -> pending_billing -> billed (terminal).

    Only completing a task that has a non-guest client enters pending_billing.
    """

    NONE = "none"
    # Alias of NONE: the not-billable initial state.
    NOT_BILLABLE = "none"
    PENDING_BILLING = "pending_billing"
    BILLED = "billed"


class ClientHistoryType(_ValuesMixin, str, Enum):
    """Kind of client history record."""

    GENERAL = "general"
    TASK_COMPLETED = "task_completed"


class ActivityType(_ValuesMixin, str, Enum):
    """Entity area an activity entry belongs to."""

    TASK = "task"
    CLIENT = "client"
    USER = "user"
    DOCUMENT = "document"
    MESSAGE = "message"
    SYSTEM = "system"


class ActivityAction(_ValuesMixin, str, Enum):
    """Action recorded in the activity feed."""

    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"
    ASSIGNED = "assigned"
    REASSIGNED = "reassigned"
    STATUS_CHANGED = "status_changed"
    COMPLETED = "completed"
    COMMENTED = "commented"
    BILLING_APPROVED = "billing_approved"
    AUTO_DELETED = "auto_deleted"
    ROLE_CHANGED = "role_changed"
    LOGIN = "login"
    LOGOUT = "logout"


# Never persisted in the activity feed.
EXCLUDED_USER_ACTIONS: frozenset[str] = frozenset(
    {ActivityAction.LOGIN.value, ActivityAction.LOGOUT.value}
)
