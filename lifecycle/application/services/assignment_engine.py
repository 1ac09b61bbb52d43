"""Dependency-aware task readiness and role-based, load-balanced assignment."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Sequence
from typing import TYPE_CHECKING

from lifecycle.application.dtos.workflow import (
    AssignmentPass,
    TaskAssignmentResult,
    UnassignedTask,
)
from lifecycle.application.services.state_machine import (
    FIRST_ASSIGNMENT_NOTE,
    WorkflowStateMachine,
)
from lifecycle.domain.entities import TaskInstanceEntity, UserEntity
from lifecycle.domain.enums import TaskStatus, UserRole, WorkflowStatus
from lifecycle.domain.exceptions import ResourceNotFoundException
from lifecycle.shared.utils import utc_days_from_now, utc_now

if TYPE_CHECKING:
    from lifecycle.application.interfaces.repositories import (
        ITaskInstanceRepository,
        IUserRepository,
        IWorkflowRepository,
    )

logger = logging.getLogger(__name__)

DEFAULT_DUE_DAYS = 2


def is_ready(task: TaskInstanceEntity, siblings: Sequence[TaskInstanceEntity]) -> bool:
    """Return whether task may be assigned now.

    A task is ready when it is NOT_STARTED, unassigned and visible, and its
    gate is satisfied: the recorded predecessor is COMPLETED, or (without a
    recorded dependency) every visible sibling with a strictly lower
    sequence order is COMPLETED.
    """
    if task.is_assigned or task.status != TaskStatus.NOT_STARTED or not task.is_visible:
        return False
    if task.depends_on_task_id is not None:
        predecessor = next(
            (t for t in siblings if t.id == task.depends_on_task_id), None
        )
        if predecessor is None:
            logger.warning(
                "Dependency %s not found for task instance %s",
                task.depends_on_task_id,
                task.id,
            )
            return False
        return predecessor.is_completed
    return all(
        t.is_completed
        for t in siblings
        if t.is_visible and t.sequence_order < task.sequence_order
    )


def find_ready_tasks(tasks: Sequence[TaskInstanceEntity]) -> list[TaskInstanceEntity]:
    """Return ready tasks in sequence order (parallel groups become ready together)."""
    return [t for t in tasks if is_ready(t, tasks)]


def pick_least_loaded(users: Sequence[UserEntity], loads: dict[str, int]) -> UserEntity:
    """Return the user with the fewest open tasks; ties go to the lowest id."""
    return min(users, key=lambda u: (loads.get(u.id, 0), u.id))


class AssignmentEngine:
    """Assigns ready tasks of a workflow to the least-loaded eligible users."""

    def __init__(
        self,
        workflow_repo: IWorkflowRepository,
        task_repo: ITaskInstanceRepository,
        user_repo: IUserRepository,
        state_machine: WorkflowStateMachine,
        *,
        due_days: int = DEFAULT_DUE_DAYS,
    ) -> None:
        self._workflow_repo = workflow_repo
        self._task_repo = task_repo
        self._user_repo = user_repo
        self._state_machine = state_machine
        self._due_days = due_days

    async def assign_ready_tasks(self, workflow_id: str) -> list[TaskAssignmentResult]:
        """Assign every ready, unassigned task; return the new assignments.

        Idempotent: a second call without intervening completions returns [].

        Raises:
            ResourceNotFoundException: If the workflow does not exist.
        """
        result = await self.run_pass(workflow_id)
        return result.assigned

    async def run_pass(self, workflow_id: str) -> AssignmentPass:
        """Run one assignment pass and report assigned and unmatched tasks.

        Locks the workflow row, then its task rows, so concurrent passes for
        the same workflow run one after the other and the later pass sees
        the earlier pass's assignments.
        """
        workflow = await self._workflow_repo.get_by_id_for_update(workflow_id)
        if workflow is None:
            raise ResourceNotFoundException("workflow", workflow_id)
        tasks = await self._task_repo.list_by_workflow(workflow_id, for_update=True)
        ready = find_ready_tasks(tasks)
        logger.debug("Found %d tasks ready to assign in workflow %s", len(ready), workflow_id)

        by_role: dict[UserRole, list[TaskInstanceEntity]] = defaultdict(list)
        for task in ready:
            by_role[task.assigned_role].append(task)

        assigned: list[TaskAssignmentResult] = []
        unassigned: list[UnassignedTask] = []
        for role, role_tasks in by_role.items():
            users = await self._user_repo.get_active_by_role(role)
            if not users:
                logger.warning(
                    "No active users found for role %s; %d task(s) left unassigned in workflow %s",
                    role.value,
                    len(role_tasks),
                    workflow_id,
                )
                unassigned.extend(
                    UnassignedTask(task_id=t.id, task_name=t.task_name, assigned_role=role)
                    for t in role_tasks
                )
                continue
            loads = await self._task_repo.count_open_by_users([u.id for u in users])
            for task in role_tasks:
                user = pick_least_loaded(users, loads)
                assigned.append(await self._assign(task, user))
                loads[user.id] = loads.get(user.id, 0) + 1

        if assigned and workflow.status == WorkflowStatus.INITIATED:
            await self._state_machine.apply(
                workflow,
                WorkflowStatus.IN_PROGRESS,
                workflow.initiated_by,
                FIRST_ASSIGNMENT_NOTE,
            )

        logger.info("Assigned %d tasks for workflow %s", len(assigned), workflow_id)
        return AssignmentPass(workflow_id=workflow_id, assigned=assigned, unassigned=unassigned)

    async def _assign(self, task: TaskInstanceEntity, user: UserEntity) -> TaskAssignmentResult:
        due_date = utc_days_from_now(self._due_days)
        task.assign(user.id, due_date, utc_now())
        await self._task_repo.update(task)
        logger.debug("Assigned task %s (%s) to user %s", task.id, task.task_name, user.id)
        return TaskAssignmentResult(
            task_id=task.id,
            task_name=task.task_name,
            assigned_user_id=user.id,
            assigned_user_email=user.email,
            due_date=due_date,
        )
