"""Application services: pure helpers used by the use cases."""
