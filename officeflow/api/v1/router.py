"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. All routes
use dependencies from officeflow.api.v1.dependencies.
"""

from fastapi import APIRouter

from officeflow.api.v1.endpoints import (
    activities,
    clients,
    health,
    notifications,
    tasks,
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(tasks.router, prefix="/tasks", tags=["tasks"])
api_router.include_router(clients.router, prefix="/clients", tags=["clients"])
api_router.include_router(
    notifications.router, prefix="/notifications", tags=["notifications"]
)
api_router.include_router(activities.router, prefix="/activities", tags=["activities"])
