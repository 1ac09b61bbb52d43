"""Workflow state machine: validated transitions, history, and completion derivation."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from lifecycle.application.dtos.workflow import WorkflowStateSummary
from lifecycle.domain.entities import WorkflowInstanceEntity, WorkflowStateHistoryEntity
from lifecycle.domain.enums import TaskStatus, WorkflowStatus
from lifecycle.domain.exceptions import ResourceNotFoundException
from lifecycle.shared.utils import generate_cuid, utc_now

if TYPE_CHECKING:
    from lifecycle.application.interfaces.repositories import (
        IStateHistoryRepository,
        ITaskInstanceRepository,
        IWorkflowRepository,
    )

logger = logging.getLogger(__name__)

INITIATED_NOTE = "Workflow initiated."
DEFAULT_NOTE = "Status updated"
FIRST_ASSIGNMENT_NOTE = "First task assigned"
ALL_TASKS_DONE_NOTE = "All visible tasks completed"


class WorkflowStateMachine:
    """Applies workflow status transitions and appends state history.

    Every transition writes the workflow and one history entry in the
    caller's transaction; nothing here commits.
    """

    def __init__(
        self,
        workflow_repo: IWorkflowRepository,
        task_repo: ITaskInstanceRepository,
        history_repo: IStateHistoryRepository,
    ) -> None:
        self._workflow_repo = workflow_repo
        self._task_repo = task_repo
        self._history_repo = history_repo

    async def record_initiated(
        self, workflow: WorkflowInstanceEntity, actor_id: str
    ) -> WorkflowStateHistoryEntity:
        """Append the INITIATED -> INITIATED entry written at instantiation."""
        entry = WorkflowStateHistoryEntity(
            id=generate_cuid(),
            workflow_id=workflow.id,
            previous_status=WorkflowStatus.INITIATED,
            new_status=WorkflowStatus.INITIATED,
            changed_by=actor_id,
            changed_at=workflow.initiated_at,
            note=INITIATED_NOTE,
        )
        return await self._history_repo.append(entry)

    async def apply(
        self,
        workflow: WorkflowInstanceEntity,
        new_status: WorkflowStatus,
        actor_id: str,
        note: str | None = None,
    ) -> WorkflowStateHistoryEntity:
        """Transition a loaded workflow, persist it and append history.

        Raises:
            InvalidTransitionException: If the transition is not allowed.
        """
        now = utc_now()
        previous = workflow.transition_to(new_status, now)
        await self._workflow_repo.update(workflow)
        entry = await self._history_repo.append(
            WorkflowStateHistoryEntity(
                id=generate_cuid(),
                workflow_id=workflow.id,
                previous_status=previous,
                new_status=new_status,
                changed_by=actor_id,
                changed_at=now,
                note=note,
            )
        )
        logger.info(
            "Workflow %s status updated from %s to %s",
            workflow.id,
            previous.value,
            new_status.value,
        )
        return entry

    async def transition_workflow(
        self,
        workflow_id: str,
        new_status: WorkflowStatus,
        actor_id: str,
        note: str | None = None,
    ) -> WorkflowStateSummary:
        """Transition workflow_id to new_status and return its state summary.

        Unblocking a workflow whose visible tasks are all COMPLETED also
        completes it, with a second history entry.

        Raises:
            ResourceNotFoundException: If the workflow does not exist.
            InvalidTransitionException: If the transition is not allowed.
        """
        workflow = await self._workflow_repo.get_by_id_for_update(workflow_id)
        if workflow is None:
            raise ResourceNotFoundException("workflow", workflow_id)
        entry = await self.apply(workflow, new_status, actor_id, note or DEFAULT_NOTE)
        if entry.previous_status == WorkflowStatus.BLOCKED:
            await self.complete_if_all_visible_done(workflow, actor_id)
        return await self.state_summary(workflow)

    async def complete_if_all_visible_done(
        self, workflow: WorkflowInstanceEntity, actor_id: str
    ) -> bool:
        """Complete an IN_PROGRESS workflow whose visible tasks are all COMPLETED.

        Returns True when the workflow was completed by this call.
        """
        if workflow.status != WorkflowStatus.IN_PROGRESS:
            return False
        tasks = await self._task_repo.list_by_workflow(workflow.id)
        visible = [t for t in tasks if t.is_visible]
        if not visible or not all(t.is_completed for t in visible):
            return False
        await self.apply(workflow, WorkflowStatus.COMPLETED, actor_id, ALL_TASKS_DONE_NOTE)
        return True

    async def state_summary(self, workflow: WorkflowInstanceEntity) -> WorkflowStateSummary:
        """Return workflow status with task counts by status."""
        counts = await self._task_repo.count_by_status(workflow.id)
        return WorkflowStateSummary(
            workflow_id=workflow.id,
            status=workflow.status,
            total_tasks=sum(counts.values()),
            tasks_completed=counts.get(TaskStatus.COMPLETED, 0),
            tasks_in_progress=counts.get(TaskStatus.IN_PROGRESS, 0),
            tasks_blocked=counts.get(TaskStatus.BLOCKED, 0),
            tasks_not_started=counts.get(TaskStatus.NOT_STARTED, 0),
        )
