"""Workflow template domain entities.

A template is a reusable blueprint of ordered (and possibly parallel) tasks
for one workflow kind. Templates own their tasks.
"""

from dataclasses import dataclass, field
from datetime import datetime

from lifecycle.domain.enums import UserRole, WorkflowKind


@dataclass
class TemplateTaskEntity:
    """Domain entity for one task of a template."""

    id: str
    template_id: str
    name: str
    assigned_role: UserRole
    sequence_order: int
    is_parallel: bool = False
    depends_on_task_id: str | None = None
    description: str | None = None


@dataclass
class WorkflowTemplateEntity:
    """Domain entity for a workflow template (header + tasks)."""

    id: str
    name: str
    kind: WorkflowKind
    is_active: bool
    tasks: list[TemplateTaskEntity] = field(default_factory=list)
    description: str | None = None
    created_by: str | None = None
    updated_by: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def ordered_tasks(self) -> list[TemplateTaskEntity]:
        """Return tasks sorted by sequence order (stable for parallel groups)."""
        return sorted(self.tasks, key=lambda t: t.sequence_order)

    def can_instantiate(self) -> bool:
        """Return whether new workflows may be created from this template."""
        return self.is_active
