"""User ORM model. Identity lives in the external provider; this row carries role and contact data."""

from sqlalchemy import Boolean, String, true
from sqlalchemy.orm import Mapped, mapped_column

from officeflow.domain.enums import UserRole
from officeflow.infrastructure.persistence.database import Base
from officeflow.infrastructure.persistence.models.mixins import Model


class User(Model, Base):
    """Application user. Table: app_user (avoids the reserved word 'user')."""

    __tablename__ = "app_user"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True)
    role: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default=UserRole.BUSINESS_CONSULTANT.value,
        server_default=UserRole.BUSINESS_CONSULTANT.value,
    )
    phone: Mapped[str | None] = mapped_column(String(32), nullable=True)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=true()
    )
