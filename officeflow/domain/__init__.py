"""Domain layer: enums, exceptions, role policies, and value objects.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from officeflow.domain.enums import (
    ActivityAction,
    ActivityType,
    BillingStatus,
    ClientHistoryType,
    TaskPriority,
    TaskStatus,
    UserRole,
)
from officeflow.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    InvalidStateException,
    OfficeFlowException,
    ResourceNotFoundException,
    ValidationException,
)

__all__ = [
    # Enums
    "ActivityAction",
    "ActivityType",
    "BillingStatus",
    "ClientHistoryType",
    "TaskPriority",
    "TaskStatus",
    "UserRole",
    # Exceptions
    "AuthenticationException",
    "AuthorizationException",
    "InvalidStateException",
    "OfficeFlowException",
    "ResourceNotFoundException",
    "ValidationException",
]
