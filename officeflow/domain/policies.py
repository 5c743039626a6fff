"""Role policies for task workflows.

Pure functions over roles and ids; use cases call them before any mutation
and raise AuthorizationException when they return False.
"""

from collections.abc import Iterable

from officeflow.domain.enums import UserRole

_TASK_MANAGER_ROLES = frozenset({UserRole.ADMIN.value, UserRole.PARTNER.value})


def _role_value(role: UserRole | str) -> str:
    return role.value if isinstance(role, UserRole) else role


def is_admin(role: UserRole | str) -> bool:
    """Return whether the role is Admin-tier."""
    return _role_value(role) == UserRole.ADMIN.value


def can_create_task(role: UserRole | str) -> bool:
    """Admins and partners create tasks."""
    return _role_value(role) in _TASK_MANAGER_ROLES


def can_reassign_task(
    role: UserRole | str, actor_id: str, primary_assignee_id: str | None
) -> bool:
    """Admins reassign any task; partners only tasks where they are the primary assignee."""
    value = _role_value(role)
    if value == UserRole.ADMIN.value:
        return True
    if value == UserRole.PARTNER.value:
        return primary_assignee_id is not None and primary_assignee_id == actor_id
    return False


def can_edit_task(role: UserRole | str, actor_id: str, creator_id: str) -> bool:
    """Admins and the task creator edit title, description, priority, due date, client."""
    return is_admin(role) or actor_id == creator_id


def can_delete_task(role: UserRole | str, actor_id: str, creator_id: str) -> bool:
    """Admins and partners delete any task; others only tasks they created."""
    return _role_value(role) in _TASK_MANAGER_ROLES or actor_id == creator_id


def can_approve_billing(role: UserRole | str) -> bool:
    """Only admins approve billing."""
    return is_admin(role)


def can_update_task_status(
    role: UserRole | str,
    actor_id: str,
    creator_id: str,
    assignee_ids: Iterable[str],
) -> bool:
    """Admins, the task creator, and current assignees may change task status."""
    if is_admin(role):
        return True
    return actor_id == creator_id or actor_id in set(assignee_ids)


def can_manage_client_history(role: UserRole | str) -> bool:
    """Staff roles read and annotate client history; client accounts do not."""
    return _role_value(role) != UserRole.CLIENT.value


def can_view_all_tasks(role: UserRole | str) -> bool:
    """Admins see every task; other roles see their own."""
    return is_admin(role)


def can_view_task(
    role: UserRole | str,
    actor_id: str,
    creator_id: str,
    assignee_ids: Iterable[str],
) -> bool:
    """Same audience as status updates: admins, the creator and assignees."""
    return can_update_task_status(role, actor_id, creator_id, assignee_ids)
