"""Application layer: interfaces, services, use cases.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (repositories).
"""

from lifecycle.application.interfaces import (
    IStateHistoryRepository,
    ITaskInstanceRepository,
    ITemplateRepository,
    IUserRepository,
    IWorkflowRepository,
)
from lifecycle.application.services import (
    AssignmentEngine,
    WorkflowStateMachine,
    validate_and_normalize,
)
from lifecycle.application.use_cases.templates import TemplateService
from lifecycle.application.use_cases.workflows import (
    InitiateWorkflowUseCase,
    InstantiateWorkflowUseCase,
    TransitionTaskUseCase,
    TransitionWorkflowUseCase,
    UpdateTaskChecklistUseCase,
    WorkflowQueryService,
)

__all__ = [
    "AssignmentEngine",
    "IStateHistoryRepository",
    "ITaskInstanceRepository",
    "ITemplateRepository",
    "IUserRepository",
    "IWorkflowRepository",
    "InitiateWorkflowUseCase",
    "InstantiateWorkflowUseCase",
    "TemplateService",
    "TransitionTaskUseCase",
    "TransitionWorkflowUseCase",
    "UpdateTaskChecklistUseCase",
    "WorkflowQueryService",
    "WorkflowStateMachine",
    "validate_and_normalize",
]
