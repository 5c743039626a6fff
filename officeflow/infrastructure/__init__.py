"""Infrastructure: SQLAlchemy persistence, notification delivery, security."""
