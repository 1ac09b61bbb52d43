"""Repository implementations of the application ports."""

from lifecycle.infrastructure.persistence.repositories.base import BaseRepository
from lifecycle.infrastructure.persistence.repositories.state_history_repo import (
    StateHistoryRepository,
)
from lifecycle.infrastructure.persistence.repositories.task_instance_repo import (
    TaskInstanceRepository,
)
from lifecycle.infrastructure.persistence.repositories.template_repo import (
    TemplateRepository,
)
from lifecycle.infrastructure.persistence.repositories.user_repo import UserRepository
from lifecycle.infrastructure.persistence.repositories.workflow_repo import (
    WorkflowRepository,
)

__all__ = [
    "BaseRepository",
    "StateHistoryRepository",
    "TaskInstanceRepository",
    "TemplateRepository",
    "UserRepository",
    "WorkflowRepository",
]
