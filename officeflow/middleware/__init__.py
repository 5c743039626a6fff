"""HTTP middleware applied in create_app."""

from officeflow.middleware.request_context import RequestContextMiddleware

__all__ = ["RequestContextMiddleware"]
