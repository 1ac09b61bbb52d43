"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference domain entities or application DTOs; no infrastructure imports.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from lifecycle.application.dtos.template import NormalizedTask
    from lifecycle.domain.entities import (
        TaskInstanceEntity,
        TemplateTaskEntity,
        UserEntity,
        WorkflowInstanceEntity,
        WorkflowStateHistoryEntity,
        WorkflowTemplateEntity,
    )
    from lifecycle.domain.enums import TaskStatus, UserRole, WorkflowKind, WorkflowStatus


# Template store interface
class ITemplateRepository(Protocol):
    """Protocol for the template store (templates own their tasks)."""

    async def get_by_id(self, template_id: str) -> WorkflowTemplateEntity | None:
        """Return template with its tasks, or None."""

    async def get_by_name(self, name: str) -> WorkflowTemplateEntity | None:
        """Return template by unique name, or None."""

    async def get_all(self, include_inactive: bool = True) -> list[WorkflowTemplateEntity]:
        """Return all templates with their tasks, ordered by name."""

    async def create_template(
        self,
        name: str,
        kind: WorkflowKind,
        tasks: list[NormalizedTask],
        actor_id: str,
        description: str | None = None,
    ) -> WorkflowTemplateEntity:
        """Persist template and tasks; resolve task dependency indices to ids after save."""

    async def update_template(
        self,
        template_id: str,
        name: str,
        kind: WorkflowKind,
        is_active: bool,
        actor_id: str,
        description: str | None = None,
    ) -> WorkflowTemplateEntity | None:
        """Update header fields; return updated template or None if not found."""

    async def replace_tasks(
        self, template_id: str, tasks: list[NormalizedTask], actor_id: str
    ) -> list[TemplateTaskEntity]:
        """Delete the template's task rows, then insert tasks (dependencies resolved after save)."""

    async def set_active(self, template_id: str, is_active: bool, actor_id: str) -> bool:
        """Flip the active flag (soft delete); return False if not found."""

    async def delete_template(self, template_id: str) -> bool:
        """Hard delete: task rows first, then the template row. False if not found."""

    async def count_referencing_workflows(
        self, template_id: str, *, exclude_completed: bool = False
    ) -> int:
        """Return number of workflows created from template."""


# Workflow instance repository interface
class IWorkflowRepository(Protocol):
    """Protocol for workflow instance repository."""

    async def get_by_id(self, workflow_id: str) -> WorkflowInstanceEntity | None:
        """Return workflow by ID."""

    async def get_by_id_for_update(self, workflow_id: str) -> WorkflowInstanceEntity | None:
        """Return workflow by ID, locking its row until the transaction ends."""

    async def create(self, workflow: WorkflowInstanceEntity) -> WorkflowInstanceEntity:
        """Persist a new workflow instance."""

    async def update(self, workflow: WorkflowInstanceEntity) -> None:
        """Write back status and completed_at."""

    async def list_workflows(
        self,
        *,
        status: WorkflowStatus | None = None,
        kind: WorkflowKind | None = None,
        employee_name: str | None = None,
        assigned_user_id: str | None = None,
        skip: int = 0,
        limit: int = 50,
    ) -> list[WorkflowInstanceEntity]:
        """Return workflows, newest first.

        employee_name is a case-insensitive partial match. When
        assigned_user_id is set, only workflows where that user holds a task.
        """


# Task instance repository interface
class ITaskInstanceRepository(Protocol):
    """Protocol for task instance repository."""

    async def get_by_id(self, task_id: str) -> TaskInstanceEntity | None:
        """Return task instance by ID."""

    async def create_many(self, tasks: list[TaskInstanceEntity]) -> list[TaskInstanceEntity]:
        """Persist new task instances (bulk)."""

    async def list_by_workflow(
        self, workflow_id: str, *, for_update: bool = False
    ) -> list[TaskInstanceEntity]:
        """Return workflow's tasks ordered by sequence order. for_update locks the rows."""

    async def update(self, task: TaskInstanceEntity) -> None:
        """Write back status, assignment, due date, completion and checklist."""

    async def list_by_assignee(
        self, user_id: str, status: TaskStatus | None = None
    ) -> list[TaskInstanceEntity]:
        """Return tasks assigned to user, optionally filtered by status."""

    async def count_open_by_users(self, user_ids: list[str]) -> dict[str, int]:
        """Return open (NOT_STARTED/IN_PROGRESS) task counts per user across all workflows.

        Users with no open tasks map to 0.
        """

    async def count_by_status(self, workflow_id: str) -> dict[TaskStatus, int]:
        """Return task counts per status for workflow (statuses with no tasks map to 0)."""


# State history repository interface
class IStateHistoryRepository(Protocol):
    """Protocol for the append-only workflow state history."""

    async def append(self, entry: WorkflowStateHistoryEntity) -> WorkflowStateHistoryEntity:
        """Persist a history entry."""

    async def list_by_workflow(self, workflow_id: str) -> list[WorkflowStateHistoryEntity]:
        """Return entries for workflow in append order."""


# User directory interface
class IUserRepository(Protocol):
    """Protocol for the user directory (read-only to the engine)."""

    async def get_by_id(self, user_id: str) -> UserEntity | None:
        """Return user by ID."""

    async def get_active_by_role(self, role: UserRole) -> list[UserEntity]:
        """Return active users holding role, ordered by id ascending."""
