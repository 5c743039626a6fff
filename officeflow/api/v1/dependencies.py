"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for DB sessions, the current user and the use
cases. Routes depend only on these functions, never on infrastructure.

Use cases open their own transaction with ``session.begin()``, so each one
gets a fresh session (``use_cache=False``) instead of the request-scoped
session that authentication has already used.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from officeflow.application.dtos.user import UserResult
from officeflow.application.interfaces.services import INotificationDispatcher
from officeflow.application.use_cases.activities import ActivityFeed
from officeflow.application.use_cases.clients import ClientHistoryService
from officeflow.application.use_cases.notifications import NotificationInbox
from officeflow.application.use_cases.tasks import (
    BillingApprovalService,
    TaskAssignmentService,
    TaskCommentService,
    TaskEditService,
)
from officeflow.core.config import get_settings
from officeflow.domain.exceptions import AuthenticationException
from officeflow.infrastructure.notifications import (
    InlineNotificationDispatcher,
    NotificationDeliveryService,
    build_email_sender,
)
from officeflow.infrastructure.persistence.database import get_db, get_session_factory
from officeflow.infrastructure.persistence.repositories import (
    ActivityRepository,
    ClientHistoryRepository,
    ClientRepository,
    NotificationRepository,
    TaskCommentRepository,
    TaskRepository,
    UserRepository,
)
from officeflow.infrastructure.security.jwt import verify_token
from officeflow.infrastructure.services import ActivityRecorder

_http_bearer = HTTPBearer(auto_error=False)

# Fresh session per use case (see module docstring).
UseCaseSession = Annotated[AsyncSession, Depends(get_db, use_cache=False)]


def get_sessionmaker() -> async_sessionmaker[AsyncSession]:
    """Session factory for side effects that run in their own transaction."""
    return get_session_factory()


SessionMaker = Annotated[async_sessionmaker[AsyncSession], Depends(get_sessionmaker)]


# ---- Auth ----


async def get_current_user_optional(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> UserResult | None:
    """Return current user from JWT if present and active; else None."""
    if not credentials:
        return None
    try:
        payload = verify_token(credentials.credentials)
    except ValueError:
        return None
    user = await UserRepository(db).get_by_id(payload["sub"])
    if user is None or not user.is_active:
        return None
    return user


async def get_current_user(
    current_user: Annotated[UserResult | None, Depends(get_current_user_optional)],
) -> UserResult:
    """Return current user from JWT; 401 (AuthenticationException) otherwise."""
    if current_user is None:
        raise AuthenticationException()
    return current_user


CurrentUser = Annotated[UserResult, Depends(get_current_user)]


# ---- Side-effect collaborators ----


def get_notification_dispatcher(
    request: Request,
    session_factory: SessionMaker,
) -> INotificationDispatcher:
    """Queue to the lifespan worker when it runs; otherwise deliver inline."""
    worker = getattr(request.app.state, "notification_worker", None)
    if worker is not None and worker.running:
        return worker.dispatcher()
    return InlineNotificationDispatcher(
        NotificationDeliveryService(session_factory, build_email_sender(get_settings()))
    )


def _activity_recorder(
    session_factory: async_sessionmaker[AsyncSession], db: AsyncSession
) -> ActivityRecorder:
    return ActivityRecorder(
        session_factory,
        db=db,
        retention_limit=get_settings().activity_retention_limit,
    )


# ---- Use cases ----


def get_task_assignment_service(
    db: UseCaseSession,
    session_factory: SessionMaker,
    dispatcher: Annotated[
        INotificationDispatcher, Depends(get_notification_dispatcher)
    ],
) -> TaskAssignmentService:
    """Task create/reassign/read (composition root)."""
    return TaskAssignmentService(
        db=db,
        task_repo=TaskRepository(db),
        user_repo=UserRepository(db),
        client_repo=ClientRepository(db),
        activity_recorder=_activity_recorder(session_factory, db),
        notification_dispatcher=dispatcher,
    )


def get_billing_approval_service(
    db: UseCaseSession,
    session_factory: SessionMaker,
) -> BillingApprovalService:
    """Billing approval and status updates (composition root)."""
    return BillingApprovalService(
        db=db,
        task_repo=TaskRepository(db),
        history_repo=ClientHistoryRepository(db),
        client_repo=ClientRepository(db),
        activity_recorder=_activity_recorder(session_factory, db),
        deletion_grace_hours=get_settings().billing_deletion_grace_hours,
    )


def get_task_edit_service(
    db: UseCaseSession,
    session_factory: SessionMaker,
) -> TaskEditService:
    """Task update/delete (composition root)."""
    return TaskEditService(
        db=db,
        task_repo=TaskRepository(db),
        client_repo=ClientRepository(db),
        comment_repo=TaskCommentRepository(db),
        activity_recorder=_activity_recorder(session_factory, db),
    )


def get_task_comment_service(
    db: UseCaseSession,
    session_factory: SessionMaker,
    dispatcher: Annotated[
        INotificationDispatcher, Depends(get_notification_dispatcher)
    ],
) -> TaskCommentService:
    """Task comments (composition root)."""
    return TaskCommentService(
        db=db,
        task_repo=TaskRepository(db),
        comment_repo=TaskCommentRepository(db),
        activity_recorder=_activity_recorder(session_factory, db),
        notification_dispatcher=dispatcher,
    )


def get_client_history_service(
    db: UseCaseSession,
    session_factory: SessionMaker,
) -> ClientHistoryService:
    """Client history (composition root)."""
    return ClientHistoryService(
        db=db,
        client_repo=ClientRepository(db),
        history_repo=ClientHistoryRepository(db),
        activity_recorder=_activity_recorder(session_factory, db),
    )


def get_notification_inbox(db: UseCaseSession) -> NotificationInbox:
    """Notification inbox (composition root)."""
    return NotificationInbox(db=db, notification_repo=NotificationRepository(db))


def get_activity_feed(db: UseCaseSession) -> ActivityFeed:
    """Activity feed (composition root)."""
    return ActivityFeed(
        db=db,
        activity_repo=ActivityRepository(db),
        max_limit=get_settings().activity_feed_max_limit,
    )
