"""Workflow use cases: instantiate, transition, checklist, queries."""

from lifecycle.application.use_cases.workflows.instantiate_workflow import (
    InitiateWorkflowUseCase,
    InstantiateWorkflowUseCase,
)
from lifecycle.application.use_cases.workflows.task_checklist import (
    UpdateTaskChecklistUseCase,
)
from lifecycle.application.use_cases.workflows.transitions import (
    TransitionTaskUseCase,
    TransitionWorkflowUseCase,
)
from lifecycle.application.use_cases.workflows.workflow_queries import (
    WorkflowQueryService,
)

__all__ = [
    "InitiateWorkflowUseCase",
    "InstantiateWorkflowUseCase",
    "TransitionTaskUseCase",
    "TransitionWorkflowUseCase",
    "UpdateTaskChecklistUseCase",
    "WorkflowQueryService",
]
