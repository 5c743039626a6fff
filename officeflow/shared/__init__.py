"""Helpers used by every layer: logging, request context, UTC time and ids."""
