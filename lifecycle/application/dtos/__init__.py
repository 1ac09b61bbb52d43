"""Application DTOs (no ORM dependency)."""

from lifecycle.application.dtos.template import (
    NormalizedTask,
    ProposedTask,
    TemplateDetail,
    TemplateSummary,
    TemplateTaskDetail,
)
from lifecycle.application.dtos.workflow import (
    AssignmentPass,
    EmployeeDetails,
    StateHistoryResult,
    TaskAssignmentResult,
    TaskInstanceResult,
    TaskStatusUpdate,
    UnassignedTask,
    WorkflowCreationResult,
    WorkflowDetail,
    WorkflowInitiationResult,
    WorkflowStateSummary,
    WorkflowSummary,
)

__all__ = [
    "AssignmentPass",
    "EmployeeDetails",
    "NormalizedTask",
    "ProposedTask",
    "StateHistoryResult",
    "TaskAssignmentResult",
    "TaskInstanceResult",
    "TaskStatusUpdate",
    "TemplateDetail",
    "TemplateSummary",
    "TemplateTaskDetail",
    "UnassignedTask",
    "WorkflowCreationResult",
    "WorkflowDetail",
    "WorkflowInitiationResult",
    "WorkflowStateSummary",
    "WorkflowSummary",
]
