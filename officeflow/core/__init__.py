"""Core: config, lifespan, exception handlers, and rate limiter.

Single place for settings and application bootstrap.
"""

from officeflow.core.config import Settings, get_settings

__all__ = ["Settings", "get_settings"]
