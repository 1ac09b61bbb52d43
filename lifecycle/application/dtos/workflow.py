"""DTOs for workflow, task and assignment use cases (no dependency on ORM)."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from lifecycle.domain.enums import TaskStatus, UserRole, WorkflowKind, WorkflowStatus


@dataclass(frozen=True)
class EmployeeDetails:
    """Employee the workflow is run for."""

    name: str
    email: str
    role: str


@dataclass(frozen=True)
class WorkflowCreationResult:
    """Summary of one instantiation."""

    workflow_id: str
    total_tasks: int
    visible_tasks: int


@dataclass(frozen=True)
class TaskAssignmentResult:
    """One task newly assigned in an assignment pass."""

    task_id: str
    task_name: str
    assigned_user_id: str
    assigned_user_email: str
    due_date: datetime


@dataclass(frozen=True)
class UnassignedTask:
    """A ready task no eligible user could take."""

    task_id: str
    task_name: str
    assigned_role: UserRole


@dataclass(frozen=True)
class AssignmentPass:
    """Full outcome of one assignment pass."""

    workflow_id: str
    assigned: list[TaskAssignmentResult] = field(default_factory=list)
    unassigned: list[UnassignedTask] = field(default_factory=list)


@dataclass(frozen=True)
class WorkflowInitiationResult:
    """Instantiation plus initial assignment pass."""

    creation: WorkflowCreationResult
    assignments: list[TaskAssignmentResult]
    status: WorkflowStatus
    unassigned: list[UnassignedTask] = field(default_factory=list)


@dataclass(frozen=True)
class WorkflowStateSummary:
    """Workflow status with task counts by status."""

    workflow_id: str
    status: WorkflowStatus
    total_tasks: int
    tasks_completed: int
    tasks_in_progress: int
    tasks_blocked: int
    tasks_not_started: int


@dataclass(frozen=True)
class TaskStatusUpdate:
    """Result of a task transition."""

    task_id: str
    task_name: str
    status: TaskStatus
    completed_at: datetime | None
    completed_by: str | None
    newly_assigned: list[TaskAssignmentResult] = field(default_factory=list)
    workflow_status: WorkflowStatus | None = None
    unassigned: list[UnassignedTask] = field(default_factory=list)


@dataclass(frozen=True)
class TaskInstanceResult:
    """Task instance read-model."""

    id: str
    workflow_id: str
    task_name: str
    assigned_role: UserRole
    assigned_user_id: str | None
    status: TaskStatus
    is_visible: bool
    sequence_order: int
    due_date: datetime | None
    completed_at: datetime | None
    completed_by: str | None
    checklist: dict[str, Any] | None


@dataclass(frozen=True)
class StateHistoryResult:
    """Workflow state history entry read-model."""

    id: str
    previous_status: WorkflowStatus
    new_status: WorkflowStatus
    changed_by: str
    changed_at: datetime
    note: str | None


@dataclass(frozen=True)
class WorkflowSummary:
    """Workflow list item."""

    id: str
    template_id: str
    employee_name: str
    employee_email: str
    kind: WorkflowKind
    status: WorkflowStatus
    initiated_by: str
    initiated_at: datetime
    completed_at: datetime | None


@dataclass(frozen=True)
class WorkflowDetail:
    """Workflow read-model with tasks and history."""

    id: str
    template_id: str
    employee_name: str
    employee_email: str
    employee_role: str
    kind: WorkflowKind
    status: WorkflowStatus
    initiated_by: str
    initiated_at: datetime
    completed_at: datetime | None
    custom_fields: dict[str, Any]
    tasks: list[TaskInstanceResult]
    history: list[StateHistoryResult]
