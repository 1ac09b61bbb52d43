"""Composition root: builds repositories, services and use cases on one session.

Callers (an HTTP layer, a CLI, a job) open a transactional session, build a
LifecycleServices on it and call the use cases; the session commits when the
block exits cleanly and rolls back otherwise.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from lifecycle.application.services import AssignmentEngine, WorkflowStateMachine
from lifecycle.application.use_cases.templates import TemplateService
from lifecycle.application.use_cases.workflows import (
    InitiateWorkflowUseCase,
    InstantiateWorkflowUseCase,
    TransitionTaskUseCase,
    TransitionWorkflowUseCase,
    UpdateTaskChecklistUseCase,
    WorkflowQueryService,
)
from lifecycle.core.config import get_settings
from lifecycle.infrastructure.persistence.database import get_db, get_db_transactional
from lifecycle.infrastructure.persistence.repositories import (
    StateHistoryRepository,
    TaskInstanceRepository,
    TemplateRepository,
    UserRepository,
    WorkflowRepository,
)


@dataclass
class LifecycleServices:
    """Every repository and use case, wired to the same session."""

    template_repo: TemplateRepository
    workflow_repo: WorkflowRepository
    task_repo: TaskInstanceRepository
    history_repo: StateHistoryRepository
    user_repo: UserRepository
    state_machine: WorkflowStateMachine
    assignment_engine: AssignmentEngine
    templates: TemplateService
    instantiate_workflow: InstantiateWorkflowUseCase
    initiate_workflow: InitiateWorkflowUseCase
    transition_task: TransitionTaskUseCase
    transition_workflow: TransitionWorkflowUseCase
    update_checklist: UpdateTaskChecklistUseCase
    queries: WorkflowQueryService

    @classmethod
    def build(cls, db: AsyncSession, *, due_days: int | None = None) -> LifecycleServices:
        """Wire everything on db. due_days defaults to Settings.task_due_days."""
        if due_days is None:
            due_days = get_settings().task_due_days
        template_repo = TemplateRepository(db)
        workflow_repo = WorkflowRepository(db)
        task_repo = TaskInstanceRepository(db)
        history_repo = StateHistoryRepository(db)
        user_repo = UserRepository(db)
        state_machine = WorkflowStateMachine(workflow_repo, task_repo, history_repo)
        assignment_engine = AssignmentEngine(
            workflow_repo, task_repo, user_repo, state_machine, due_days=due_days
        )
        instantiate = InstantiateWorkflowUseCase(
            template_repo=template_repo,
            user_repo=user_repo,
            workflow_repo=workflow_repo,
            task_repo=task_repo,
            state_machine=state_machine,
        )
        return cls(
            template_repo=template_repo,
            workflow_repo=workflow_repo,
            task_repo=task_repo,
            history_repo=history_repo,
            user_repo=user_repo,
            state_machine=state_machine,
            assignment_engine=assignment_engine,
            templates=TemplateService(template_repo),
            instantiate_workflow=instantiate,
            initiate_workflow=InitiateWorkflowUseCase(
                instantiate=instantiate,
                assignment_engine=assignment_engine,
                workflow_repo=workflow_repo,
            ),
            transition_task=TransitionTaskUseCase(
                workflow_repo=workflow_repo,
                task_repo=task_repo,
                state_machine=state_machine,
                assignment_engine=assignment_engine,
            ),
            transition_workflow=TransitionWorkflowUseCase(state_machine),
            update_checklist=UpdateTaskChecklistUseCase(task_repo),
            queries=WorkflowQueryService(
                workflow_repo=workflow_repo,
                task_repo=task_repo,
                history_repo=history_repo,
                state_machine=state_machine,
            ),
        )


@asynccontextmanager
async def lifecycle_transaction() -> AsyncIterator[LifecycleServices]:
    """Services on a transactional session (commit on success, rollback on error)."""
    async with get_db_transactional() as db:
        yield LifecycleServices.build(db)


@asynccontextmanager
async def lifecycle_reader() -> AsyncIterator[LifecycleServices]:
    """Services on a read session; writes made through it are not committed."""
    async with get_db() as db:
        yield LifecycleServices.build(db)
