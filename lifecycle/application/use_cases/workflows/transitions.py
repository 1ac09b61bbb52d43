"""Task and workflow transition use cases.

Completing a task re-evaluates readiness and workflow completion in the
same unit of work as the task update itself.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from lifecycle.application.dtos.workflow import (
    AssignmentPass,
    TaskStatusUpdate,
    WorkflowStateSummary,
)
from lifecycle.domain.enums import TaskStatus, WorkflowStatus
from lifecycle.domain.exceptions import ResourceNotFoundException
from lifecycle.shared.utils import utc_now

if TYPE_CHECKING:
    from lifecycle.application.interfaces.repositories import (
        ITaskInstanceRepository,
        IWorkflowRepository,
    )
    from lifecycle.application.services.assignment_engine import AssignmentEngine
    from lifecycle.application.services.state_machine import WorkflowStateMachine

logger = logging.getLogger(__name__)


class TransitionTaskUseCase:
    """Moves a task to a new status; on COMPLETED assigns successors and checks completion."""

    def __init__(
        self,
        workflow_repo: IWorkflowRepository,
        task_repo: ITaskInstanceRepository,
        state_machine: WorkflowStateMachine,
        assignment_engine: AssignmentEngine,
    ) -> None:
        self._workflow_repo = workflow_repo
        self._task_repo = task_repo
        self._state_machine = state_machine
        self._assignment_engine = assignment_engine

    async def execute(
        self, task_id: str, new_status: TaskStatus, actor_id: str
    ) -> TaskStatusUpdate:
        """Transition task_id to new_status.

        The workflow row is locked before the task rows are read, the same
        order the assignment pass uses.

        Raises:
            ResourceNotFoundException: If the task (or its workflow) does not exist.
            InvalidTransitionException: If the transition is not allowed.
        """
        found = await self._task_repo.get_by_id(task_id)
        if found is None:
            raise ResourceNotFoundException("task", task_id)
        workflow = await self._workflow_repo.get_by_id_for_update(found.workflow_id)
        if workflow is None:
            raise ResourceNotFoundException("workflow", found.workflow_id)
        tasks = await self._task_repo.list_by_workflow(workflow.id, for_update=True)
        task = next((t for t in tasks if t.id == task_id), found)

        previous = task.transition_to(new_status, actor_id, utc_now())
        await self._task_repo.update(task)
        logger.info(
            "Task %s status updated from %s to %s", task_id, previous.value, new_status.value
        )

        assignment_pass = AssignmentPass(workflow_id=workflow.id)
        if new_status == TaskStatus.COMPLETED:
            assignment_pass = await self._assignment_engine.run_pass(workflow.id)
            workflow = await self._workflow_repo.get_by_id_for_update(workflow.id) or workflow
            await self._state_machine.complete_if_all_visible_done(workflow, actor_id)

        return TaskStatusUpdate(
            task_id=task.id,
            task_name=task.task_name,
            status=task.status,
            completed_at=task.completed_at,
            completed_by=task.completed_by,
            newly_assigned=assignment_pass.assigned,
            workflow_status=workflow.status,
            unassigned=assignment_pass.unassigned,
        )


class TransitionWorkflowUseCase:
    """Manual workflow transition (e.g. block or unblock) with history note."""

    def __init__(self, state_machine: WorkflowStateMachine) -> None:
        self._state_machine = state_machine

    async def execute(
        self,
        workflow_id: str,
        new_status: WorkflowStatus,
        actor_id: str,
        note: str | None = None,
    ) -> WorkflowStateSummary:
        """Transition workflow_id; return state summary with task counts."""
        return await self._state_machine.transition_workflow(
            workflow_id, new_status, actor_id, note
        )
