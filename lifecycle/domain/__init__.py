"""Domain layer: entities, enums, transition tables, and exceptions.

No dependencies on infrastructure. Used by application and
infrastructure layers.
"""

from lifecycle.domain.entities import (
    TaskInstanceEntity,
    TemplateTaskEntity,
    UserEntity,
    WorkflowInstanceEntity,
    WorkflowStateHistoryEntity,
    WorkflowTemplateEntity,
)
from lifecycle.domain.enums import TaskStatus, UserRole, WorkflowKind, WorkflowStatus
from lifecycle.domain.exceptions import (
    AuthorizationException,
    ConflictException,
    InvalidTransitionException,
    LifecycleException,
    ResourceNotFoundException,
    ValidationException,
)

__all__ = [
    "AuthorizationException",
    "ConflictException",
    "InvalidTransitionException",
    "LifecycleException",
    "ResourceNotFoundException",
    "TaskInstanceEntity",
    "TaskStatus",
    "TemplateTaskEntity",
    "UserEntity",
    "UserRole",
    "ValidationException",
    "WorkflowInstanceEntity",
    "WorkflowKind",
    "WorkflowStateHistoryEntity",
    "WorkflowStatus",
    "WorkflowTemplateEntity",
]
