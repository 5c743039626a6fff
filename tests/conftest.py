"""Pytest configuration and fixtures for officeflow.

Repository, workflow and API tests run against a per-test aiosqlite file
database whose schema is created from Base.metadata. Settings come from the
environment defaults below; they are set before anything calls get_settings().
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./officeflow-test.db")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-officeflow-tests")
os.environ.setdefault("NOTIFICATION_WORKER_ENABLED", "false")

from collections.abc import AsyncIterator, Awaitable, Callable  # noqa: E402
from typing import Any  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import event  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

import officeflow.infrastructure.persistence.models  # noqa: E402,F401
from officeflow.api.v1.dependencies import get_sessionmaker  # noqa: E402
from officeflow.application.dtos.notification import NotificationRequest  # noqa: E402
from officeflow.application.dtos.user import UserResult  # noqa: E402
from officeflow.application.use_cases.clients import ClientHistoryService  # noqa: E402
from officeflow.application.use_cases.tasks import (  # noqa: E402
    BillingApprovalService,
    TaskAssignmentService,
    TaskCommentService,
    TaskEditService,
)
from officeflow.core.limiter import limiter  # noqa: E402
from officeflow.infrastructure.persistence.database import Base, get_db  # noqa: E402
from officeflow.infrastructure.persistence.models import User  # noqa: E402
from officeflow.infrastructure.persistence.repositories import (  # noqa: E402
    ClientHistoryRepository,
    ClientRepository,
    TaskCommentRepository,
    TaskRepository,
    UserRepository,
)
from officeflow.infrastructure.services import ActivityRecorder  # noqa: E402


class RecordingDispatcher:
    """INotificationDispatcher test double that keeps every request."""

    def __init__(self) -> None:
        self.requests: list[NotificationRequest] = []

    async def dispatch(self, request: NotificationRequest) -> None:
        self.requests.append(request)

    def recipients(self, title: str | None = None) -> list[str]:
        return [
            r.sent_to_id for r in self.requests if title is None or r.title == title
        ]


@pytest.fixture
async def engine(tmp_path) -> AsyncIterator[AsyncEngine]:
    """File-backed SQLite engine with foreign keys enforced and all tables created."""
    eng = create_async_engine(f"sqlite+aiosqlite:///{tmp_path}/test.db")

    @event.listens_for(eng.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, _record) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )


@pytest.fixture
async def db_session(session_factory) -> AsyncIterator[AsyncSession]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def seed(session_factory) -> Callable[..., Awaitable[None]]:
    """Insert ORM rows in their own committed transaction."""

    async def _seed(*rows: Any) -> None:
        async with session_factory() as session:
            async with session.begin():
                session.add_all(rows)

    return _seed


@pytest.fixture
def fetch(session_factory) -> Callable[[Any], Awaitable[list[Any]]]:
    """Run a select in a fresh session and return all scalars."""

    async def _fetch(stmt: Any) -> list[Any]:
        async with session_factory() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    return _fetch


def _user_result(user: User) -> UserResult:
    return UserResult(
        id=user.id,
        name=user.name,
        email=user.email,
        role=user.role,
        is_active=user.is_active,
    )


@pytest.fixture
async def users(seed) -> dict[str, UserResult]:
    """One user per role plus spare consultants, keyed by a short label."""
    rows = {
        "admin": User(name="Ada Admin", email="admin@example.com", role="ADMIN"),
        "partner": User(name="Pat Partner", email="partner@example.com", role="PARTNER"),
        "partner2": User(name="Pia Partner", email="partner2@example.com", role="PARTNER"),
        "a": User(name="Alan", email="alan@example.com", role="BUSINESS_CONSULTANT"),
        "b": User(name="Beth", email="beth@example.com", role="BUSINESS_CONSULTANT"),
        "d": User(name="Dina", email="dina@example.com", role="BUSINESS_EXECUTIVE"),
        "client_user": User(name="Cleo", email="cleo@example.com", role="CLIENT"),
    }
    for row in rows.values():
        row.is_active = True
    await seed(*rows.values())
    return {key: _user_result(row) for key, row in rows.items()}


@pytest.fixture
def dispatcher() -> RecordingDispatcher:
    return RecordingDispatcher()


@pytest.fixture
async def open_session(session_factory) -> AsyncIterator[Callable[[], AsyncSession]]:
    """Hand out sessions that are closed at teardown."""
    sessions: list[AsyncSession] = []

    def _open() -> AsyncSession:
        session = session_factory()
        sessions.append(session)
        return session

    yield _open
    for session in sessions:
        await session.close()


@pytest.fixture
def assignment_service(open_session, session_factory, dispatcher):
    """Factory: TaskAssignmentService on a fresh session."""

    def _make() -> TaskAssignmentService:
        session = open_session()
        return TaskAssignmentService(
            db=session,
            task_repo=TaskRepository(session),
            user_repo=UserRepository(session),
            client_repo=ClientRepository(session),
            activity_recorder=ActivityRecorder(session_factory, db=session),
            notification_dispatcher=dispatcher,
        )

    return _make


@pytest.fixture
def billing_service(open_session, session_factory):
    """Factory: BillingApprovalService on a fresh session."""

    def _make() -> BillingApprovalService:
        session = open_session()
        return BillingApprovalService(
            db=session,
            task_repo=TaskRepository(session),
            history_repo=ClientHistoryRepository(session),
            client_repo=ClientRepository(session),
            activity_recorder=ActivityRecorder(session_factory, db=session),
        )

    return _make


@pytest.fixture
def edit_service(open_session, session_factory):
    def _make() -> TaskEditService:
        session = open_session()
        return TaskEditService(
            db=session,
            task_repo=TaskRepository(session),
            client_repo=ClientRepository(session),
            comment_repo=TaskCommentRepository(session),
            activity_recorder=ActivityRecorder(session_factory, db=session),
        )

    return _make


@pytest.fixture
def comment_service(open_session, session_factory, dispatcher):
    def _make() -> TaskCommentService:
        session = open_session()
        return TaskCommentService(
            db=session,
            task_repo=TaskRepository(session),
            comment_repo=TaskCommentRepository(session),
            activity_recorder=ActivityRecorder(session_factory, db=session),
            notification_dispatcher=dispatcher,
        )

    return _make


@pytest.fixture
def client_history_service(open_session, session_factory):
    def _make() -> ClientHistoryService:
        session = open_session()
        return ClientHistoryService(
            db=session,
            client_repo=ClientRepository(session),
            history_repo=ClientHistoryRepository(session),
            activity_recorder=ActivityRecorder(session_factory, db=session),
        )

    return _make


@pytest.fixture
async def client(session_factory) -> AsyncIterator[AsyncClient]:
    """Async HTTP client against a fresh app wired to the test database."""
    from officeflow.main import create_app

    app = create_app()
    limiter.reset()

    async def _get_db() -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_sessionmaker] = lambda: session_factory
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def auth_headers() -> Callable[[UserResult], dict[str, str]]:
    """Bearer headers for a seeded user."""
    from officeflow.infrastructure.security.jwt import create_access_token

    def _headers(user: UserResult) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(user.id)}"}

    return _headers

