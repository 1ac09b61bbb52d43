"""Task instance repository: per-workflow task rows and assignee load counts."""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from lifecycle.domain.entities import TaskInstanceEntity
from lifecycle.domain.enums import TaskStatus, UserRole
from lifecycle.infrastructure.persistence.models.workflow import TaskInstance
from lifecycle.infrastructure.persistence.repositories.base import BaseRepository
from lifecycle.shared.utils import ensure_utc


def _task_to_entity(t: TaskInstance) -> TaskInstanceEntity:
    """Map ORM TaskInstance to domain entity."""
    return TaskInstanceEntity(
        id=t.id,
        workflow_id=t.workflow_id,
        template_task_id=t.template_task_id,
        task_name=t.task_name,
        assigned_role=UserRole(t.assigned_role),
        sequence_order=t.sequence_order,
        status=TaskStatus(t.status),
        is_visible=t.is_visible,
        assigned_user_id=t.assigned_user_id,
        depends_on_task_id=t.depends_on_task_id,
        due_date=ensure_utc(t.due_date),
        completed_at=ensure_utc(t.completed_at),
        completed_by=t.completed_by,
        checklist=dict(t.checklist) if t.checklist is not None else None,
    )


class TaskInstanceRepository(BaseRepository[TaskInstance]):
    """Task instance repository. Implements ITaskInstanceRepository."""

    resource_type = "task"

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, TaskInstance)

    async def get_by_id(self, task_id: str) -> TaskInstanceEntity | None:
        t = await self._get_model(task_id)
        return _task_to_entity(t) if t else None

    async def create_many(self, tasks: list[TaskInstanceEntity]) -> list[TaskInstanceEntity]:
        """Insert task rows; dependency links are written after all rows exist."""
        rows = [
            TaskInstance(
                id=t.id,
                workflow_id=t.workflow_id,
                template_task_id=t.template_task_id,
                task_name=t.task_name,
                assigned_role=t.assigned_role.value,
                sequence_order=t.sequence_order,
                status=t.status.value,
                is_visible=t.is_visible,
                assigned_user_id=t.assigned_user_id,
                due_date=t.due_date,
                checklist=t.checklist,
            )
            for t in tasks
        ]
        await self._add_all(rows)
        linked = False
        for row, task in zip(rows, tasks, strict=True):
            if task.depends_on_task_id is not None:
                row.depends_on_task_id = task.depends_on_task_id
                linked = True
        if linked:
            await self.db.flush()
        return [_task_to_entity(r) for r in rows]

    async def list_by_workflow(
        self, workflow_id: str, *, for_update: bool = False
    ) -> list[TaskInstanceEntity]:
        stmt = (
            select(TaskInstance)
            .where(TaskInstance.workflow_id == workflow_id)
            .order_by(TaskInstance.sequence_order, TaskInstance.id)
        )
        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        result = await self.db.execute(stmt)
        return [_task_to_entity(t) for t in result.scalars().all()]

    async def update(self, task: TaskInstanceEntity) -> None:
        """Write back status, assignment, due date, completion and checklist."""
        t = await self._require_model(task.id)
        t.status = task.status.value
        t.assigned_user_id = task.assigned_user_id
        t.due_date = task.due_date
        t.completed_at = task.completed_at
        t.completed_by = task.completed_by
        t.is_visible = task.is_visible
        t.checklist = dict(task.checklist) if task.checklist is not None else None
        await self.db.flush()

    async def list_by_assignee(
        self, user_id: str, status: TaskStatus | None = None
    ) -> list[TaskInstanceEntity]:
        stmt = select(TaskInstance).where(TaskInstance.assigned_user_id == user_id)
        if status is not None:
            stmt = stmt.where(TaskInstance.status == status.value)
        stmt = stmt.order_by(TaskInstance.due_date.asc().nulls_last(), TaskInstance.id)
        result = await self.db.execute(stmt)
        return [_task_to_entity(t) for t in result.scalars().all()]

    async def count_open_by_users(self, user_ids: list[str]) -> dict[str, int]:
        """Count NOT_STARTED/IN_PROGRESS tasks per user in one grouped query."""
        counts = dict.fromkeys(user_ids, 0)
        if not user_ids:
            return counts
        open_values = [s.value for s in TaskStatus.open_statuses()]
        result = await self.db.execute(
            select(TaskInstance.assigned_user_id, func.count(TaskInstance.id))
            .where(
                TaskInstance.assigned_user_id.in_(user_ids),
                TaskInstance.status.in_(open_values),
            )
            .group_by(TaskInstance.assigned_user_id)
        )
        for user_id, count in result.all():
            counts[user_id] = int(count)
        return counts

    async def count_by_status(self, workflow_id: str) -> dict[TaskStatus, int]:
        counts = dict.fromkeys(TaskStatus, 0)
        result = await self.db.execute(
            select(TaskInstance.status, func.count(TaskInstance.id))
            .where(TaskInstance.workflow_id == workflow_id)
            .group_by(TaskInstance.status)
        )
        for status, count in result.all():
            counts[TaskStatus(status)] = int(count)
        return counts
