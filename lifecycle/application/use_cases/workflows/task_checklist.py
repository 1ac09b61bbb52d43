"""Update task checklist use case: store partial progress on an open task."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from lifecycle.application.dtos.workflow import TaskInstanceResult
from lifecycle.application.use_cases.workflows.workflow_queries import to_task_result
from lifecycle.domain.exceptions import (
    AuthorizationException,
    ResourceNotFoundException,
    ValidationException,
)

if TYPE_CHECKING:
    from lifecycle.application.interfaces.repositories import ITaskInstanceRepository


class UpdateTaskChecklistUseCase:
    """Replaces the checklist payload of a task held by the acting user."""

    def __init__(self, task_repo: ITaskInstanceRepository) -> None:
        self._task_repo = task_repo

    async def execute(
        self, task_id: str, checklist: dict[str, Any], actor_id: str
    ) -> TaskInstanceResult:
        """Store checklist on task_id.

        Raises:
            ResourceNotFoundException: If the task does not exist.
            AuthorizationException: If actor_id is not the assignee.
            ValidationException: If the task is already COMPLETED.
        """
        task = await self._task_repo.get_by_id(task_id)
        if task is None:
            raise ResourceNotFoundException("task", task_id)
        if task.assigned_user_id != actor_id:
            raise AuthorizationException(resource="task", action="update")
        if task.is_completed:
            raise ValidationException(
                "Checklist of a completed task cannot be changed", field="checklist"
            )
        task.checklist = dict(checklist)
        await self._task_repo.update(task)
        return to_task_result(task)
