"""ClientHistory ORM model. Append-only; rows are never updated.

task_id is a plain column (no foreign key) so billing history keeps its
reference after the task row is deleted.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from officeflow.domain.enums import ClientHistoryType
from officeflow.infrastructure.persistence.database import Base
from officeflow.infrastructure.persistence.models.mixins import CuidMixin
from officeflow.shared.utils.datetime import utc_now


class ClientHistory(CuidMixin, Base):
    """Client history entry (general note or task completion/billing). Table: client_history."""

    __tablename__ = "client_history"

    client_id: Mapped[str] = mapped_column(
        String, ForeignKey("client.id", ondelete="CASCADE"), nullable=False, index=True
    )
    type: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default=ClientHistoryType.GENERAL.value,
        server_default=ClientHistoryType.GENERAL.value,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_by_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("app_user.id", ondelete="SET NULL"), nullable=True
    )
    task_id: Mapped[str | None] = mapped_column(String, nullable=True, index=True)
    task_title: Mapped[str | None] = mapped_column(String(500), nullable=True)
    task_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    task_status: Mapped[str | None] = mapped_column(String(32), nullable=True)
    task_completed_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    task_billed_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    billing_details: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now
    )

    __table_args__ = (
        Index("ix_client_history_client_created", "client_id", "created_at"),
    )
