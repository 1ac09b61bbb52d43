"""SQLAlchemy mixins for common model patterns.

Provides: CuidMixin, TimestampMixin, ActorAuditMixin, and the combined
EntityModel and AuditedEntityModel.
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, declared_attr, mapped_column
from sqlalchemy.sql import func

from lifecycle.shared.utils.generators import generate_cuid


def enum_check(column: str, values: list[str]) -> str:
    """Return a CHECK expression restricting column to values."""
    quoted = ", ".join("'{}'".format(v.replace("'", "''")) for v in values)
    return f"{column} IN ({quoted})"


class CuidMixin:
    """Mixin for models using CUID as primary key. Provides id with default generate_cuid."""

    @declared_attr
    def id(cls) -> Mapped[str]:
        return mapped_column(String, primary_key=True, default=generate_cuid)


class TimestampMixin:
    """Mixin for created_at and updated_at (server defaults, timezone-aware)."""

    @declared_attr
    def created_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True), server_default=func.now(), nullable=False
        )

    @declared_attr
    def updated_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True),
            server_default=func.now(),
            onupdate=func.now(),
            nullable=False,
        )


class ActorAuditMixin(TimestampMixin):
    """Mixin for actor audit: created_by, updated_by (FK to app_user.id)."""

    @declared_attr
    def created_by(cls) -> Mapped[str | None]:
        return mapped_column(
            String,
            ForeignKey("app_user.id", ondelete="SET NULL"),
            nullable=True,
            index=True,
        )

    @declared_attr
    def updated_by(cls) -> Mapped[str | None]:
        return mapped_column(
            String, ForeignKey("app_user.id", ondelete="SET NULL"), nullable=True
        )


class EntityModel(CuidMixin, TimestampMixin):
    """Combined mixin: CUID + created_at/updated_at."""

    __abstract__ = True


class AuditedEntityModel(CuidMixin, ActorAuditMixin):
    """Combined mixin: CUID + timestamps + created_by/updated_by."""

    __abstract__ = True
