"""Activity feed API."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from officeflow.api.v1.dependencies import CurrentUser, get_activity_feed
from officeflow.application.dtos.activity import ActivityFeedQuery
from officeflow.application.use_cases.activities import ActivityFeed
from officeflow.domain.enums import ActivityAction, ActivityType
from officeflow.schemas.activity import ActivityResponse

router = APIRouter()


@router.get("", response_model=list[ActivityResponse])
async def list_activities(
    current_user: CurrentUser,
    feed: Annotated[ActivityFeed, Depends(get_activity_feed)],
    limit: int = Query(20, ge=1),
    type: ActivityType | None = None,
    action: ActivityAction | None = None,
    user_id: str | None = None,
    include_login_logout: bool = False,
):
    """Newest-first feed. Limit is capped at 100; login/logout hidden unless requested."""
    activities = await feed.list(
        ActivityFeedQuery(
            limit=limit,
            type=type.value if type else None,
            action=action.value if action else None,
            user_id=user_id,
            include_login_logout=include_login_logout,
        )
    )
    return [ActivityResponse.model_validate(a) for a in activities]
