"""Persistence: async engine, session factory, ORM models, and repositories."""
