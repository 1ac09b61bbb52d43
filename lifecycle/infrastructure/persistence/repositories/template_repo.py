"""Template repository: templates and their tasks as one aggregate."""

from __future__ import annotations

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from lifecycle.application.dtos.template import NormalizedTask
from lifecycle.domain.entities import TemplateTaskEntity, WorkflowTemplateEntity
from lifecycle.domain.enums import UserRole, WorkflowKind, WorkflowStatus
from lifecycle.infrastructure.persistence.models.template import (
    TemplateTask,
    WorkflowTemplate,
)
from lifecycle.infrastructure.persistence.models.workflow import WorkflowInstance
from lifecycle.infrastructure.persistence.repositories.base import BaseRepository
from lifecycle.shared.utils import ensure_utc


def _task_to_entity(t: TemplateTask) -> TemplateTaskEntity:
    """Map ORM TemplateTask to domain TemplateTaskEntity."""
    return TemplateTaskEntity(
        id=t.id,
        template_id=t.template_id,
        name=t.name,
        assigned_role=UserRole(t.assigned_role),
        sequence_order=t.sequence_order,
        is_parallel=t.is_parallel,
        depends_on_task_id=t.depends_on_task_id,
        description=t.description,
    )


def _template_to_entity(
    tpl: WorkflowTemplate, tasks: list[TemplateTask]
) -> WorkflowTemplateEntity:
    """Map ORM WorkflowTemplate plus task rows to WorkflowTemplateEntity."""
    return WorkflowTemplateEntity(
        id=tpl.id,
        name=tpl.name,
        kind=WorkflowKind(tpl.kind),
        is_active=tpl.is_active,
        tasks=[_task_to_entity(t) for t in tasks],
        description=tpl.description,
        created_by=tpl.created_by,
        updated_by=tpl.updated_by,
        created_at=ensure_utc(tpl.created_at),
        updated_at=ensure_utc(tpl.updated_at),
    )


class TemplateRepository(BaseRepository[WorkflowTemplate]):
    """Template store. Implements ITemplateRepository.

    Task rows are written and deleted explicitly; there is no ORM cascade
    between template and tasks.
    """

    resource_type = "template"

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, WorkflowTemplate)

    async def _task_rows(self, template_ids: list[str]) -> dict[str, list[TemplateTask]]:
        """Return task rows per template id, each list in sequence order."""
        rows: dict[str, list[TemplateTask]] = {tid: [] for tid in template_ids}
        if not template_ids:
            return rows
        result = await self.db.execute(
            select(TemplateTask)
            .where(TemplateTask.template_id.in_(template_ids))
            .order_by(TemplateTask.sequence_order, TemplateTask.name, TemplateTask.id)
        )
        for t in result.scalars().all():
            rows[t.template_id].append(t)
        return rows

    async def _with_tasks(self, tpl: WorkflowTemplate) -> WorkflowTemplateEntity:
        rows = await self._task_rows([tpl.id])
        return _template_to_entity(tpl, rows[tpl.id])

    async def get_by_id(self, template_id: str) -> WorkflowTemplateEntity | None:
        tpl = await self._get_model(template_id)
        return await self._with_tasks(tpl) if tpl else None

    async def get_by_name(self, name: str) -> WorkflowTemplateEntity | None:
        result = await self.db.execute(
            select(WorkflowTemplate).where(WorkflowTemplate.name == name)
        )
        tpl = result.scalar_one_or_none()
        return await self._with_tasks(tpl) if tpl else None

    async def get_all(self, include_inactive: bool = True) -> list[WorkflowTemplateEntity]:
        stmt = select(WorkflowTemplate).order_by(WorkflowTemplate.name)
        if not include_inactive:
            stmt = stmt.where(WorkflowTemplate.is_active.is_(True))
        result = await self.db.execute(stmt)
        templates = list(result.scalars().all())
        rows = await self._task_rows([t.id for t in templates])
        return [_template_to_entity(t, rows[t.id]) for t in templates]

    async def _insert_tasks(
        self, template_id: str, tasks: list[NormalizedTask], actor_id: str
    ) -> list[TemplateTask]:
        """Insert task rows, then resolve dependency indices to the saved ids."""
        rows = [
            TemplateTask(
                template_id=template_id,
                name=t.name,
                description=t.description,
                assigned_role=t.assigned_role.value,
                sequence_order=t.sequence_order,
                is_parallel=t.is_parallel,
                created_by=actor_id,
                updated_by=actor_id,
            )
            for t in tasks
        ]
        await self._add_all(rows)
        linked = False
        for row, task in zip(rows, tasks, strict=True):
            if task.depends_on is not None:
                row.depends_on_task_id = rows[task.depends_on].id
                linked = True
        if linked:
            await self.db.flush()
        return rows

    async def create_template(
        self,
        name: str,
        kind: WorkflowKind,
        tasks: list[NormalizedTask],
        actor_id: str,
        description: str | None = None,
    ) -> WorkflowTemplateEntity:
        tpl = await self._add(
            WorkflowTemplate(
                name=name,
                kind=kind.value,
                description=description,
                is_active=True,
                created_by=actor_id,
                updated_by=actor_id,
            )
        )
        await self._insert_tasks(tpl.id, tasks, actor_id)
        return await self._with_tasks(tpl)

    async def update_template(
        self,
        template_id: str,
        name: str,
        kind: WorkflowKind,
        is_active: bool,
        actor_id: str,
        description: str | None = None,
    ) -> WorkflowTemplateEntity | None:
        tpl = await self._get_model(template_id)
        if tpl is None:
            return None
        tpl.name = name
        tpl.kind = kind.value
        tpl.is_active = is_active
        tpl.description = description
        tpl.updated_by = actor_id
        await self.db.flush()
        await self.db.refresh(tpl)
        return await self._with_tasks(tpl)

    async def replace_tasks(
        self, template_id: str, tasks: list[NormalizedTask], actor_id: str
    ) -> list[TemplateTaskEntity]:
        await self.db.execute(
            delete(TemplateTask).where(TemplateTask.template_id == template_id)
        )
        rows = await self._insert_tasks(template_id, tasks, actor_id)
        return [_task_to_entity(r) for r in rows]

    async def set_active(self, template_id: str, is_active: bool, actor_id: str) -> bool:
        tpl = await self._get_model(template_id)
        if tpl is None:
            return False
        tpl.is_active = is_active
        tpl.updated_by = actor_id
        await self.db.flush()
        return True

    async def delete_template(self, template_id: str) -> bool:
        tpl = await self._get_model(template_id)
        if tpl is None:
            return False
        await self.db.execute(
            delete(TemplateTask).where(TemplateTask.template_id == template_id)
        )
        await self._delete(tpl)
        return True

    async def count_referencing_workflows(
        self, template_id: str, *, exclude_completed: bool = False
    ) -> int:
        stmt = select(func.count(WorkflowInstance.id)).where(
            WorkflowInstance.template_id == template_id
        )
        if exclude_completed:
            stmt = stmt.where(WorkflowInstance.status != WorkflowStatus.COMPLETED.value)
        result = await self.db.execute(stmt)
        return int(result.scalar_one())
