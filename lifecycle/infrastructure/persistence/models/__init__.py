"""Persistence models: ORM entities and mixins."""

from lifecycle.infrastructure.persistence.models.mixins import (
    ActorAuditMixin,
    AuditedEntityModel,
    CuidMixin,
    EntityModel,
    TimestampMixin,
)
from lifecycle.infrastructure.persistence.models.template import (
    TemplateTask,
    WorkflowTemplate,
)
from lifecycle.infrastructure.persistence.models.user import User
from lifecycle.infrastructure.persistence.models.workflow import (
    TaskInstance,
    WorkflowInstance,
    WorkflowStateHistory,
)

__all__ = [
    "User",
    "WorkflowTemplate",
    "TemplateTask",
    "WorkflowInstance",
    "TaskInstance",
    "WorkflowStateHistory",
    "CuidMixin",
    "TimestampMixin",
    "ActorAuditMixin",
    "EntityModel",
    "AuditedEntityModel",
]
