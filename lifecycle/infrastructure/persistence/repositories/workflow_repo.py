"""Workflow instance repository."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from lifecycle.domain.entities import WorkflowInstanceEntity
from lifecycle.domain.enums import WorkflowKind, WorkflowStatus
from lifecycle.infrastructure.persistence.models.workflow import (
    TaskInstance,
    WorkflowInstance,
)
from lifecycle.infrastructure.persistence.repositories.base import BaseRepository
from lifecycle.shared.utils import ensure_utc


def _workflow_to_entity(w: WorkflowInstance) -> WorkflowInstanceEntity:
    """Map ORM WorkflowInstance to domain entity."""
    initiated_at = ensure_utc(w.initiated_at)
    assert initiated_at is not None
    return WorkflowInstanceEntity(
        id=w.id,
        template_id=w.template_id,
        employee_name=w.employee_name,
        employee_email=w.employee_email,
        employee_role=w.employee_role,
        kind=WorkflowKind(w.kind),
        status=WorkflowStatus(w.status),
        initiated_by=w.initiated_by,
        initiated_at=initiated_at,
        completed_at=ensure_utc(w.completed_at),
        custom_fields=dict(w.custom_fields or {}),
    )


class WorkflowRepository(BaseRepository[WorkflowInstance]):
    """Workflow instance repository. Implements IWorkflowRepository."""

    resource_type = "workflow"

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, WorkflowInstance)

    async def get_by_id(self, workflow_id: str) -> WorkflowInstanceEntity | None:
        w = await self._get_model(workflow_id)
        return _workflow_to_entity(w) if w else None

    async def get_by_id_for_update(self, workflow_id: str) -> WorkflowInstanceEntity | None:
        """Return workflow and hold its row lock until the transaction ends.

        The row is re-read so a lock acquired after another writer commits
        sees that writer's status.
        """
        stmt = (
            select(WorkflowInstance)
            .where(WorkflowInstance.id == workflow_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        w = result.scalar_one_or_none()
        return _workflow_to_entity(w) if w else None

    async def create(self, workflow: WorkflowInstanceEntity) -> WorkflowInstanceEntity:
        w = await self._add(
            WorkflowInstance(
                id=workflow.id,
                template_id=workflow.template_id,
                employee_name=workflow.employee_name,
                employee_email=workflow.employee_email,
                employee_role=workflow.employee_role,
                kind=workflow.kind.value,
                status=workflow.status.value,
                initiated_by=workflow.initiated_by,
                initiated_at=workflow.initiated_at,
                completed_at=workflow.completed_at,
                custom_fields=dict(workflow.custom_fields),
            )
        )
        return _workflow_to_entity(w)

    async def update(self, workflow: WorkflowInstanceEntity) -> None:
        """Write back status and completed_at."""
        w = await self._require_model(workflow.id)
        w.status = workflow.status.value
        w.completed_at = workflow.completed_at
        await self.db.flush()

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
        stmt = select(WorkflowInstance)
        if status is not None:
            stmt = stmt.where(WorkflowInstance.status == status.value)
        if kind is not None:
            stmt = stmt.where(WorkflowInstance.kind == kind.value)
        if employee_name:
            stmt = stmt.where(WorkflowInstance.employee_name.ilike(f"%{employee_name}%"))
        if assigned_user_id is not None:
            held = (
                select(TaskInstance.workflow_id)
                .where(TaskInstance.assigned_user_id == assigned_user_id)
                .distinct()
            )
            stmt = stmt.where(WorkflowInstance.id.in_(held))
        stmt = (
            stmt.order_by(WorkflowInstance.initiated_at.desc(), WorkflowInstance.id)
            .offset(skip)
            .limit(limit)
        )
        result = await self.db.execute(stmt)
        return [_workflow_to_entity(w) for w in result.scalars().all()]
