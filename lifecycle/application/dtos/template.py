"""DTOs for template use cases (no dependency on ORM)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from lifecycle.domain.enums import UserRole, WorkflowKind


@dataclass(frozen=True)
class ProposedTask:
    """One task of a create/update template request.

    ref is a request-scoped identifier (no persisted ids exist yet on
    creation); defaults to name. Names need not be unique, but depends_on
    must name exactly one task: an explicit ref, or an unshared name.
    """

    name: str
    assigned_role: UserRole
    sequence_order: int
    is_parallel: bool = False
    depends_on: str | None = None
    ref: str | None = None
    description: str | None = None

    @property
    def key(self) -> str:
        return self.ref if self.ref is not None else self.name


@dataclass(frozen=True)
class NormalizedTask:
    """Validated task with gap-free sequence order.

    depends_on is an index into the normalized list (not a persisted id).
    """

    ref: str
    name: str
    assigned_role: UserRole
    sequence_order: int
    is_parallel: bool
    depends_on: int | None
    description: str | None = None


@dataclass(frozen=True)
class TemplateTaskDetail:
    """Template task read-model."""

    id: str
    name: str
    description: str | None
    assigned_role: UserRole
    sequence_order: int
    is_parallel: bool
    depends_on_task_id: str | None


@dataclass(frozen=True)
class TemplateDetail:
    """Template read-model with tasks (result of create, update, get)."""

    id: str
    name: str
    description: str | None
    kind: WorkflowKind
    is_active: bool
    tasks: list[TemplateTaskDetail]
    created_by: str | None
    updated_by: str | None
    created_at: datetime | None
    updated_at: datetime | None


@dataclass(frozen=True)
class TemplateSummary:
    """Template list item."""

    id: str
    name: str
    kind: WorkflowKind
    is_active: bool
    task_count: int
    created_at: datetime | None
    updated_at: datetime | None
