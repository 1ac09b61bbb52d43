"""Workflow instance domain entities.

A workflow instance is one employee's concrete execution of a template.
Status changes go through transition_to, which enforces the transition
tables in lifecycle.domain.transitions.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from lifecycle.domain.enums import TaskStatus, UserRole, WorkflowKind, WorkflowStatus
from lifecycle.domain.transitions import (
    ensure_task_transition,
    ensure_workflow_transition,
)


@dataclass
class WorkflowInstanceEntity:
    """Domain entity for a workflow instance."""

    id: str
    template_id: str
    employee_name: str
    employee_email: str
    employee_role: str
    kind: WorkflowKind
    status: WorkflowStatus
    initiated_by: str
    initiated_at: datetime
    completed_at: datetime | None = None
    custom_fields: dict[str, Any] = field(default_factory=dict)

    def transition_to(self, new_status: WorkflowStatus, at: datetime) -> WorkflowStatus:
        """Move to new_status; return the previous status.

        Sets completed_at when moving to COMPLETED; other transitions leave it.

        Raises:
            InvalidTransitionException: If the transition is not allowed.
        """
        ensure_workflow_transition(self.status, new_status)
        previous = self.status
        self.status = new_status
        if new_status == WorkflowStatus.COMPLETED:
            self.completed_at = at
        return previous


@dataclass
class TaskInstanceEntity:
    """Domain entity for a task instance within a workflow.

    sequence_order is copied from the template task and depends_on_task_id
    points at the sibling task instance created for the template dependency;
    readiness uses only these, never the template.
    """

    id: str
    workflow_id: str
    template_task_id: str | None
    task_name: str
    assigned_role: UserRole
    sequence_order: int
    status: TaskStatus = TaskStatus.NOT_STARTED
    is_visible: bool = True
    assigned_user_id: str | None = None
    depends_on_task_id: str | None = None
    due_date: datetime | None = None
    completed_at: datetime | None = None
    completed_by: str | None = None
    checklist: dict[str, Any] | None = None

    @property
    def is_assigned(self) -> bool:
        return self.assigned_user_id is not None

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED

    def transition_to(
        self, new_status: TaskStatus, actor_id: str, at: datetime
    ) -> TaskStatus:
        """Move to new_status; return the previous status.

        Sets completed_at and completed_by when moving to COMPLETED.

        Raises:
            InvalidTransitionException: If the transition is not allowed.
        """
        ensure_task_transition(self.status, new_status)
        previous = self.status
        self.status = new_status
        if new_status == TaskStatus.COMPLETED:
            self.completed_at = at
            self.completed_by = actor_id
        return previous

    def assign(self, user_id: str, due_date: datetime, at: datetime) -> None:
        """Assign to user_id and start the task (NOT_STARTED -> IN_PROGRESS)."""
        self.transition_to(TaskStatus.IN_PROGRESS, user_id, at)
        self.assigned_user_id = user_id
        self.due_date = due_date


@dataclass(frozen=True)
class WorkflowStateHistoryEntity:
    """Append-only record of one workflow status change."""

    id: str
    workflow_id: str
    previous_status: WorkflowStatus
    new_status: WorkflowStatus
    changed_by: str
    changed_at: datetime
    note: str | None = None
