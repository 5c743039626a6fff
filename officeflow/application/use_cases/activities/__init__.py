from officeflow.application.use_cases.activities.activity_feed import ActivityFeed

__all__ = ["ActivityFeed"]
