"""Application interfaces (ports): repository protocols."""

from lifecycle.application.interfaces.repositories import (
    IStateHistoryRepository,
    ITaskInstanceRepository,
    ITemplateRepository,
    IUserRepository,
    IWorkflowRepository,
)

__all__ = [
    "IStateHistoryRepository",
    "ITaskInstanceRepository",
    "ITemplateRepository",
    "IUserRepository",
    "IWorkflowRepository",
]
