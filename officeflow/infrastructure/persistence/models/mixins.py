"""Column mixins shared by the models.

Timestamps get a Python-side UTC default as well as a server default. The
Python value has microsecond precision on every backend, so rows written in
one transaction (assignment edges, notifications) keep their insertion order
when sorted by created_at.
"""

from datetime import datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, declared_attr, mapped_column
from sqlalchemy.sql import func

from officeflow.shared.utils.datetime import utc_now
from officeflow.shared.utils.generators import generate_cuid


class CuidMixin:
    """String primary key generated with CUID2."""

    @declared_attr
    def id(cls) -> Mapped[str]:
        return mapped_column(String, primary_key=True, default=generate_cuid)


class CreatedAtMixin:
    """created_at only, for rows that are never updated."""

    @declared_attr
    def created_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True),
            default=utc_now,
            server_default=func.now(),
            nullable=False,
        )


class TimestampMixin(CreatedAtMixin):
    """created_at plus updated_at, refreshed on every ORM update."""

    @declared_attr
    def updated_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True),
            default=utc_now,
            onupdate=utc_now,
            server_default=func.now(),
            nullable=False,
        )


class Model(CuidMixin, TimestampMixin):
    """CUID key plus created_at/updated_at, for mutable entities."""

    __abstract__ = True
