"""User ORM model. The engine only reads it (eligibility and load balancing)."""

from sqlalchemy import Boolean, CheckConstraint, String, text
from sqlalchemy.orm import Mapped, mapped_column

from lifecycle.domain.enums import UserRole
from lifecycle.infrastructure.persistence.database import Base
from lifecycle.infrastructure.persistence.models.mixins import EntityModel, enum_check


class User(EntityModel, Base):
    """User model. Table: app_user. Unique email."""

    __tablename__ = "app_user"

    email: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    full_name: Mapped[str | None] = mapped_column(String, nullable=True)
    role: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=text("true")
    )

    __table_args__ = (
        CheckConstraint(enum_check("role", UserRole.values()), name="app_user_role_check"),
    )
