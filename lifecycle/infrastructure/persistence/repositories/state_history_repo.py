"""Append-only workflow state history repository."""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from lifecycle.domain.entities import WorkflowStateHistoryEntity
from lifecycle.domain.enums import WorkflowStatus
from lifecycle.infrastructure.persistence.models.workflow import WorkflowStateHistory
from lifecycle.infrastructure.persistence.repositories.base import BaseRepository
from lifecycle.shared.utils import ensure_utc


def _history_to_entity(h: WorkflowStateHistory) -> WorkflowStateHistoryEntity:
    changed_at = ensure_utc(h.changed_at)
    assert changed_at is not None
    return WorkflowStateHistoryEntity(
        id=h.id,
        workflow_id=h.workflow_id,
        previous_status=WorkflowStatus(h.previous_status),
        new_status=WorkflowStatus(h.new_status),
        changed_by=h.changed_by,
        changed_at=changed_at,
        note=h.note,
    )


class StateHistoryRepository(BaseRepository[WorkflowStateHistory]):
    """State history repository. Implements IStateHistoryRepository.

    Entries are never updated or deleted. position gives append order per
    workflow; writers hold the workflow row lock, so max + 1 is race free.
    """

    resource_type = "workflow_state_history"

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, WorkflowStateHistory)

    async def append(self, entry: WorkflowStateHistoryEntity) -> WorkflowStateHistoryEntity:
        result = await self.db.execute(
            select(func.coalesce(func.max(WorkflowStateHistory.position), 0)).where(
                WorkflowStateHistory.workflow_id == entry.workflow_id
            )
        )
        position = int(result.scalar_one()) + 1
        row = await self._add(
            WorkflowStateHistory(
                id=entry.id,
                workflow_id=entry.workflow_id,
                position=position,
                previous_status=entry.previous_status.value,
                new_status=entry.new_status.value,
                changed_by=entry.changed_by,
                changed_at=entry.changed_at,
                note=entry.note,
            )
        )
        return _history_to_entity(row)

    async def list_by_workflow(self, workflow_id: str) -> list[WorkflowStateHistoryEntity]:
        result = await self.db.execute(
            select(WorkflowStateHistory)
            .where(WorkflowStateHistory.workflow_id == workflow_id)
            .order_by(WorkflowStateHistory.position)
        )
        return [_history_to_entity(h) for h in result.scalars().all()]
