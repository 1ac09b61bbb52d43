"""Domain entities and aggregates.

Pure domain models; no ORM or persistence concerns.
"""

from lifecycle.domain.entities.template import (
    TemplateTaskEntity,
    WorkflowTemplateEntity,
)
from lifecycle.domain.entities.user import UserEntity
from lifecycle.domain.entities.workflow import (
    TaskInstanceEntity,
    WorkflowInstanceEntity,
    WorkflowStateHistoryEntity,
)

__all__ = [
    "TaskInstanceEntity",
    "TemplateTaskEntity",
    "UserEntity",
    "WorkflowInstanceEntity",
    "WorkflowStateHistoryEntity",
    "WorkflowTemplateEntity",
]
