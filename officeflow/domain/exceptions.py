"""Business rule violations raised by use cases and repositories.

Each exception carries a stable ``error_code`` and a ``details`` dict;
core.exception_handlers turns the code into an HTTP status.
"""

from typing import Any


class OfficeFlowException(Exception):
    """Base for every officeflow error.

    ``error_code`` defaults to the class name; ``to_dict()`` is the API body.
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.error_code = error_code or type(self).__name__
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.error_code, "message": self.message, "details": self.details}


class ValidationException(OfficeFlowException):
    """Bad input the schema layer cannot catch, e.g. assignee ids with no user.

    ``invalid_ids`` lists every id that failed, not just the first.
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        invalid_ids: list[str] | None = None,
    ) -> None:
        details: dict[str, Any] = {}
        if field:
            details["field"] = field
        if invalid_ids:
            details["invalid_ids"] = invalid_ids
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(OfficeFlowException):
    """Missing, expired or unverifiable bearer token, or an inactive user."""

    def __init__(self, message: str = "Not authenticated") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class AuthorizationException(OfficeFlowException):
    """The actor's role (or, for Partners, task ownership) forbids the action."""

    def __init__(
        self,
        resource: str | None = None,
        action: str | None = None,
        message: str = "Permission denied",
    ) -> None:
        details = {
            key: value
            for key, value in (("resource", resource), ("action", action))
            if value
        }
        if resource and action:
            message = f"Permission denied: {action} on {resource}"
        super().__init__(message, "PERMISSION_DENIED", details)


class ResourceNotFoundException(OfficeFlowException):
    def __init__(self, resource_type: str, resource_id: str) -> None:
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class InvalidStateException(OfficeFlowException):
    """The entity is not in the state the action requires.

    Raised after the row lock is taken, so of two concurrent billing
    approvals exactly one sees pending_billing.
    """

    def __init__(
        self,
        message: str,
        resource_id: str,
        current_state: str | None = None,
        expected_state: str | None = None,
    ) -> None:
        details: dict[str, Any] = {"resource_id": resource_id}
        if current_state is not None:
            details["current_state"] = current_state
        if expected_state is not None:
            details["expected_state"] = expected_state
        super().__init__(message, "INVALID_STATE", details)


class SqlNotConfiguredException(OfficeFlowException):
    """No DATABASE_URL, so the engine cannot be created."""

    def __init__(self) -> None:
        super().__init__(
            "Database is not configured (set DATABASE_URL).",
            "SERVICE_UNAVAILABLE",
        )
