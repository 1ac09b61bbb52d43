"""WorkflowInstance, TaskInstance and WorkflowStateHistory ORM models."""

from datetime import datetime
from typing import Any

import sqlalchemy as sa
from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from lifecycle.domain.enums import TaskStatus, UserRole, WorkflowKind, WorkflowStatus
from lifecycle.infrastructure.persistence.database import Base
from lifecycle.infrastructure.persistence.models.mixins import (
    CuidMixin,
    EntityModel,
    enum_check,
)


class WorkflowInstance(EntityModel, Base):
    """One employee's run of a template. Table: workflow_instance."""

    __tablename__ = "workflow_instance"

    template_id: Mapped[str] = mapped_column(
        String, ForeignKey("workflow_template.id"), nullable=False, index=True
    )
    employee_name: Mapped[str] = mapped_column(String(255), nullable=False)
    employee_email: Mapped[str] = mapped_column(String(255), nullable=False)
    employee_role: Mapped[str] = mapped_column(String(255), nullable=False)
    kind: Mapped[str] = mapped_column(String(32), nullable=False)
    status: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default=WorkflowStatus.INITIATED.value,
        index=True,
    )
    initiated_by: Mapped[str] = mapped_column(
        String, ForeignKey("app_user.id"), nullable=False
    )
    initiated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    custom_fields: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    __table_args__ = (
        Index("ix_workflow_instance_initiated_at", "initiated_at"),
        CheckConstraint(
            enum_check("status", WorkflowStatus.values()),
            name="workflow_instance_status_check",
        ),
        CheckConstraint(
            enum_check("kind", WorkflowKind.values()), name="workflow_instance_kind_check"
        ),
    )


class TaskInstance(EntityModel, Base):
    """Task of a workflow instance. Table: task_instance."""

    __tablename__ = "task_instance"

    workflow_id: Mapped[str] = mapped_column(
        String, ForeignKey("workflow_instance.id"), nullable=False
    )
    template_task_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("template_task.id", ondelete="SET NULL"), nullable=True
    )
    task_name: Mapped[str] = mapped_column(String(255), nullable=False)
    assigned_role: Mapped[str] = mapped_column(String(32), nullable=False)
    assigned_user_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("app_user.id", ondelete="SET NULL"), nullable=True
    )
    status: Mapped[str] = mapped_column(
        String(32), nullable=False, default=TaskStatus.NOT_STARTED.value
    )
    is_visible: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=sa.text("true")
    )
    sequence_order: Mapped[int] = mapped_column(Integer, nullable=False)
    depends_on_task_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("task_instance.id", ondelete="SET NULL"), nullable=True
    )
    due_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    completed_by: Mapped[str | None] = mapped_column(
        String, ForeignKey("app_user.id", ondelete="SET NULL"), nullable=True
    )
    checklist: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)

    __table_args__ = (
        Index("ix_task_instance_workflow_sequence", "workflow_id", "sequence_order"),
        Index("ix_task_instance_assignee_status", "assigned_user_id", "status"),
        CheckConstraint(
            enum_check("status", TaskStatus.values()), name="task_instance_status_check"
        ),
        CheckConstraint(
            enum_check("assigned_role", UserRole.values()),
            name="task_instance_role_check",
        ),
    )


class WorkflowStateHistory(CuidMixin, Base):
    """Append-only workflow status history. Table: workflow_state_history.

    position orders entries within a workflow (1, 2, ...).
    """

    __tablename__ = "workflow_state_history"

    workflow_id: Mapped[str] = mapped_column(
        String, ForeignKey("workflow_instance.id"), nullable=False
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    previous_status: Mapped[str] = mapped_column(String(32), nullable=False)
    new_status: Mapped[str] = mapped_column(String(32), nullable=False)
    changed_by: Mapped[str] = mapped_column(String, ForeignKey("app_user.id"), nullable=False)
    changed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        UniqueConstraint("workflow_id", "position", name="uq_workflow_history_position"),
    )
