"""Workflow read operations: detail, list, tasks per user, history."""

from __future__ import annotations

from typing import TYPE_CHECKING

from lifecycle.application.dtos.workflow import (
    StateHistoryResult,
    TaskInstanceResult,
    WorkflowDetail,
    WorkflowStateSummary,
    WorkflowSummary,
)
from lifecycle.domain.entities import (
    TaskInstanceEntity,
    WorkflowInstanceEntity,
    WorkflowStateHistoryEntity,
)
from lifecycle.domain.enums import TaskStatus, UserRole, WorkflowKind, WorkflowStatus
from lifecycle.domain.exceptions import AuthorizationException, ResourceNotFoundException

if TYPE_CHECKING:
    from lifecycle.application.interfaces.repositories import (
        IStateHistoryRepository,
        ITaskInstanceRepository,
        IWorkflowRepository,
    )
    from lifecycle.application.services.state_machine import WorkflowStateMachine


def to_task_result(t: TaskInstanceEntity) -> TaskInstanceResult:
    """Map task entity to TaskInstanceResult DTO."""
    return TaskInstanceResult(
        id=t.id,
        workflow_id=t.workflow_id,
        task_name=t.task_name,
        assigned_role=t.assigned_role,
        assigned_user_id=t.assigned_user_id,
        status=t.status,
        is_visible=t.is_visible,
        sequence_order=t.sequence_order,
        due_date=t.due_date,
        completed_at=t.completed_at,
        completed_by=t.completed_by,
        checklist=t.checklist,
    )


def to_history_result(h: WorkflowStateHistoryEntity) -> StateHistoryResult:
    """Map history entity to StateHistoryResult DTO."""
    return StateHistoryResult(
        id=h.id,
        previous_status=h.previous_status,
        new_status=h.new_status,
        changed_by=h.changed_by,
        changed_at=h.changed_at,
        note=h.note,
    )


def to_workflow_summary(w: WorkflowInstanceEntity) -> WorkflowSummary:
    """Map workflow entity to WorkflowSummary DTO."""
    return WorkflowSummary(
        id=w.id,
        template_id=w.template_id,
        employee_name=w.employee_name,
        employee_email=w.employee_email,
        kind=w.kind,
        status=w.status,
        initiated_by=w.initiated_by,
        initiated_at=w.initiated_at,
        completed_at=w.completed_at,
    )


class WorkflowQueryService:
    """Read workflows, their tasks and history.

    HR admins and administrators see every workflow; other viewers only
    workflows in which they hold a task.
    """

    def __init__(
        self,
        workflow_repo: IWorkflowRepository,
        task_repo: ITaskInstanceRepository,
        history_repo: IStateHistoryRepository,
        state_machine: WorkflowStateMachine,
    ) -> None:
        self.workflow_repo = workflow_repo
        self.task_repo = task_repo
        self.history_repo = history_repo
        self.state_machine = state_machine

    async def _get_or_raise(self, workflow_id: str) -> WorkflowInstanceEntity:
        workflow = await self.workflow_repo.get_by_id(workflow_id)
        if workflow is None:
            raise ResourceNotFoundException("workflow", workflow_id)
        return workflow

    async def get_workflow(
        self, workflow_id: str, viewer_id: str, viewer_role: UserRole
    ) -> WorkflowDetail:
        """Return workflow with tasks and history.

        Raises:
            ResourceNotFoundException: If the workflow does not exist.
            AuthorizationException: If the viewer may not see this workflow.
        """
        workflow = await self._get_or_raise(workflow_id)
        tasks = await self.task_repo.list_by_workflow(workflow_id)
        if viewer_role not in UserRole.workflow_admins() and not any(
            t.assigned_user_id == viewer_id for t in tasks
        ):
            raise AuthorizationException(resource="workflow", action="read")
        history = await self.history_repo.list_by_workflow(workflow_id)
        return WorkflowDetail(
            id=workflow.id,
            template_id=workflow.template_id,
            employee_name=workflow.employee_name,
            employee_email=workflow.employee_email,
            employee_role=workflow.employee_role,
            kind=workflow.kind,
            status=workflow.status,
            initiated_by=workflow.initiated_by,
            initiated_at=workflow.initiated_at,
            completed_at=workflow.completed_at,
            custom_fields=dict(workflow.custom_fields),
            tasks=[to_task_result(t) for t in tasks],
            history=[to_history_result(h) for h in history],
        )

    async def list_workflows(
        self,
        viewer_id: str,
        viewer_role: UserRole,
        *,
        status: WorkflowStatus | None = None,
        kind: WorkflowKind | None = None,
        employee_name: str | None = None,
        skip: int = 0,
        limit: int = 50,
    ) -> list[WorkflowSummary]:
        """Return workflows visible to the viewer, newest first."""
        assigned_user_id = (
            None if viewer_role in UserRole.workflow_admins() else viewer_id
        )
        workflows = await self.workflow_repo.list_workflows(
            status=status,
            kind=kind,
            employee_name=employee_name.strip() if employee_name else None,
            assigned_user_id=assigned_user_id,
            skip=max(skip, 0),
            limit=max(min(limit, 200), 1),
        )
        return [to_workflow_summary(w) for w in workflows]

    async def list_tasks_for_user(
        self, user_id: str, status: TaskStatus | None = None
    ) -> list[TaskInstanceResult]:
        """Return tasks assigned to user_id, optionally filtered by status."""
        tasks = await self.task_repo.list_by_assignee(user_id, status)
        return [to_task_result(t) for t in tasks]

    async def get_history(self, workflow_id: str) -> list[StateHistoryResult]:
        """Return state history of workflow_id in append order."""
        await self._get_or_raise(workflow_id)
        history = await self.history_repo.list_by_workflow(workflow_id)
        return [to_history_result(h) for h in history]

    async def get_state_summary(self, workflow_id: str) -> WorkflowStateSummary:
        """Return status and task counts of workflow_id."""
        workflow = await self._get_or_raise(workflow_id)
        return await self.state_machine.state_summary(workflow)
