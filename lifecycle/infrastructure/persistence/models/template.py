"""WorkflowTemplate and TemplateTask ORM models.

No ORM cascade: the template repository deletes task rows explicitly before
the template row.
"""

import sqlalchemy as sa
from sqlalchemy import (
    Boolean,
    CheckConstraint,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from lifecycle.domain.enums import UserRole, WorkflowKind
from lifecycle.infrastructure.persistence.database import Base
from lifecycle.infrastructure.persistence.models.mixins import (
    AuditedEntityModel,
    enum_check,
)


class WorkflowTemplate(AuditedEntityModel, Base):
    """Workflow template header. Table: workflow_template. Unique name."""

    __tablename__ = "workflow_template"

    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    kind: Mapped[str] = mapped_column(String(32), nullable=False)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=sa.text("true")
    )

    __table_args__ = (
        CheckConstraint(
            enum_check("kind", WorkflowKind.values()), name="workflow_template_kind_check"
        ),
    )


class TemplateTask(AuditedEntityModel, Base):
    """Task of a template. Table: template_task."""

    __tablename__ = "template_task"

    template_id: Mapped[str] = mapped_column(
        String, ForeignKey("workflow_template.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    assigned_role: Mapped[str] = mapped_column(String(32), nullable=False)
    sequence_order: Mapped[int] = mapped_column(Integer, nullable=False)
    is_parallel: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=sa.text("false")
    )
    depends_on_task_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("template_task.id", ondelete="SET NULL"), nullable=True
    )

    __table_args__ = (
        Index("ix_template_task_template_sequence", "template_id", "sequence_order"),
        CheckConstraint("sequence_order >= 1", name="template_task_sequence_positive"),
        CheckConstraint(
            enum_check("assigned_role", UserRole.values()),
            name="template_task_role_check",
        ),
    )
