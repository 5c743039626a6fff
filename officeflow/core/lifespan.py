"""Application lifespan: startup and shutdown.

Wires logging and the notification worker; disposes the SQL engine on exit.
No business logic here.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from officeflow.core.config import get_settings
from officeflow.infrastructure.notifications import (
    NotificationDeliveryService,
    NotificationWorker,
    build_email_sender,
)
from officeflow.infrastructure.persistence.database import (
    dispose_engine,
    get_session_factory,
)
from officeflow.shared.logging import get_logger, setup_logging

logger = get_logger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup: logging, notification worker (if enabled).
    Shutdown: drain and stop the worker, dispose the SQL engine.
    """
    settings = get_settings()
    setup_logging()
    logger.info("Starting %s %s", settings.app_name, settings.app_version)

    # ---- Startup ----
    app.state.notification_worker = None
    if settings.notification_worker_enabled:
        worker = NotificationWorker(
            NotificationDeliveryService(
                get_session_factory(), build_email_sender(settings)
            ),
            queue_size=settings.notification_queue_size,
            max_attempts=settings.notification_max_attempts,
            retry_delay_seconds=settings.notification_retry_delay_seconds,
        )
        worker.start()
        app.state.notification_worker = worker

    yield

    # ---- Shutdown ----
    worker = getattr(app.state, "notification_worker", None)
    if worker is not None:
        await worker.stop()
        app.state.notification_worker = None

    await dispose_engine()
