"""Pytest configuration and fixtures for the lifecycle engine.

Unit tests run against in-memory repositories that implement the application
ports. DB-dependent fixtures use lifecycle.infrastructure.persistence.database
and skip when no database is configured.
"""

import os
from collections import defaultdict
from dataclasses import replace
from datetime import UTC, datetime

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from lifecycle.application.dtos.template import NormalizedTask
from lifecycle.application.services import AssignmentEngine, WorkflowStateMachine
from lifecycle.application.use_cases.templates import TemplateService
from lifecycle.application.use_cases.workflows import (
    InitiateWorkflowUseCase,
    InstantiateWorkflowUseCase,
    TransitionTaskUseCase,
    UpdateTaskChecklistUseCase,
    WorkflowQueryService,
)
from lifecycle.domain.entities import (
    TaskInstanceEntity,
    TemplateTaskEntity,
    UserEntity,
    WorkflowInstanceEntity,
    WorkflowStateHistoryEntity,
    WorkflowTemplateEntity,
)
from lifecycle.domain.enums import TaskStatus, UserRole, WorkflowKind, WorkflowStatus
from lifecycle.shared.utils import generate_cuid

FIXED_NOW = datetime(2025, 3, 1, 9, 0, 0, tzinfo=UTC)


class InMemoryTemplateRepository:
    """ITemplateRepository over a dict; entities are copied in and out."""

    def __init__(self) -> None:
        self.templates: dict[str, WorkflowTemplateEntity] = {}
        self.workflow_repo: "InMemoryWorkflowRepository | None" = None
        self.calls: list[str] = []

    def _copy(self, t: WorkflowTemplateEntity) -> WorkflowTemplateEntity:
        return replace(t, tasks=[replace(task) for task in t.tasks])

    def add(self, template: WorkflowTemplateEntity) -> WorkflowTemplateEntity:
        self.templates[template.id] = self._copy(template)
        return template

    async def get_by_id(self, template_id):
        t = self.templates.get(template_id)
        return self._copy(t) if t else None

    async def get_by_name(self, name):
        for t in self.templates.values():
            if t.name == name:
                return self._copy(t)
        return None

    async def get_all(self, include_inactive=True):
        items = sorted(self.templates.values(), key=lambda t: t.name)
        return [self._copy(t) for t in items if include_inactive or t.is_active]

    def _build_tasks(self, template_id: str, tasks: list[NormalizedTask]):
        ids = [generate_cuid() for _ in tasks]
        return [
            TemplateTaskEntity(
                id=ids[i],
                template_id=template_id,
                name=t.name,
                assigned_role=t.assigned_role,
                sequence_order=t.sequence_order,
                is_parallel=t.is_parallel,
                depends_on_task_id=ids[t.depends_on] if t.depends_on is not None else None,
                description=t.description,
            )
            for i, t in enumerate(tasks)
        ]

    async def create_template(self, name, kind, tasks, actor_id, description=None):
        self.calls.append("create_template")
        template_id = generate_cuid()
        template = WorkflowTemplateEntity(
            id=template_id,
            name=name,
            kind=kind,
            is_active=True,
            tasks=self._build_tasks(template_id, tasks),
            description=description,
            created_by=actor_id,
            updated_by=actor_id,
            created_at=FIXED_NOW,
            updated_at=FIXED_NOW,
        )
        self.templates[template_id] = template
        return self._copy(template)

    async def update_template(
        self, template_id, name, kind, is_active, actor_id, description=None
    ):
        self.calls.append("update_template")
        t = self.templates.get(template_id)
        if t is None:
            return None
        t.name, t.kind, t.is_active = name, kind, is_active
        t.description, t.updated_by = description, actor_id
        return self._copy(t)

    async def replace_tasks(self, template_id, tasks, actor_id):
        self.calls.append("replace_tasks")
        t = self.templates[template_id]
        t.tasks = self._build_tasks(template_id, tasks)
        return [replace(task) for task in t.tasks]

    async def set_active(self, template_id, is_active, actor_id):
        self.calls.append("set_active")
        t = self.templates.get(template_id)
        if t is None:
            return False
        t.is_active = is_active
        t.updated_by = actor_id
        return True

    async def delete_template(self, template_id):
        self.calls.append("delete_template")
        return self.templates.pop(template_id, None) is not None

    async def count_referencing_workflows(self, template_id, *, exclude_completed=False):
        if self.workflow_repo is None:
            return 0
        return sum(
            1
            for w in self.workflow_repo.workflows.values()
            if w.template_id == template_id
            and not (exclude_completed and w.status == WorkflowStatus.COMPLETED)
        )


class InMemoryWorkflowRepository:
    def __init__(self, task_repo: "InMemoryTaskInstanceRepository") -> None:
        self.workflows: dict[str, WorkflowInstanceEntity] = {}
        self.task_repo = task_repo
        self.locked: list[str] = []

    async def get_by_id(self, workflow_id):
        w = self.workflows.get(workflow_id)
        return replace(w, custom_fields=dict(w.custom_fields)) if w else None

    async def get_by_id_for_update(self, workflow_id):
        self.locked.append(workflow_id)
        return await self.get_by_id(workflow_id)

    async def create(self, workflow):
        self.workflows[workflow.id] = replace(workflow)
        return replace(workflow)

    async def update(self, workflow):
        stored = self.workflows[workflow.id]
        stored.status = workflow.status
        stored.completed_at = workflow.completed_at

    async def list_workflows(
        self,
        *,
        status=None,
        kind=None,
        employee_name=None,
        assigned_user_id=None,
        skip=0,
        limit=50,
    ):
        items = list(self.workflows.values())
        if status is not None:
            items = [w for w in items if w.status == status]
        if kind is not None:
            items = [w for w in items if w.kind == kind]
        if employee_name:
            items = [w for w in items if employee_name.lower() in w.employee_name.lower()]
        if assigned_user_id is not None:
            held = {
                t.workflow_id
                for t in self.task_repo.tasks.values()
                if t.assigned_user_id == assigned_user_id
            }
            items = [w for w in items if w.id in held]
        items.sort(key=lambda w: (w.initiated_at, w.id), reverse=True)
        return [replace(w) for w in items[skip : skip + limit]]


class InMemoryTaskInstanceRepository:
    def __init__(self) -> None:
        self.tasks: dict[str, TaskInstanceEntity] = {}
        self.extra_open_counts: dict[str, int] = {}

    async def get_by_id(self, task_id):
        t = self.tasks.get(task_id)
        return replace(t) if t else None

    async def create_many(self, tasks):
        for t in tasks:
            self.tasks[t.id] = replace(t)
        return [replace(t) for t in tasks]

    async def list_by_workflow(self, workflow_id, *, for_update=False):
        items = [t for t in self.tasks.values() if t.workflow_id == workflow_id]
        items.sort(key=lambda t: (t.sequence_order, t.id))
        return [replace(t) for t in items]

    async def update(self, task):
        self.tasks[task.id] = replace(task)

    async def list_by_assignee(self, user_id, status=None):
        return [
            replace(t)
            for t in self.tasks.values()
            if t.assigned_user_id == user_id and (status is None or t.status == status)
        ]

    async def count_open_by_users(self, user_ids):
        counts = {uid: self.extra_open_counts.get(uid, 0) for uid in user_ids}
        open_statuses = TaskStatus.open_statuses()
        for t in self.tasks.values():
            if t.assigned_user_id in counts and t.status in open_statuses:
                counts[t.assigned_user_id] += 1
        return counts

    async def count_by_status(self, workflow_id):
        counts = dict.fromkeys(TaskStatus, 0)
        for t in self.tasks.values():
            if t.workflow_id == workflow_id:
                counts[t.status] += 1
        return counts


class InMemoryStateHistoryRepository:
    def __init__(self) -> None:
        self.entries: dict[str, list[WorkflowStateHistoryEntity]] = defaultdict(list)

    async def append(self, entry):
        self.entries[entry.workflow_id].append(entry)
        return entry

    async def list_by_workflow(self, workflow_id):
        return list(self.entries.get(workflow_id, []))


class InMemoryUserRepository:
    def __init__(self) -> None:
        self.users: dict[str, UserEntity] = {}

    def add(self, user_id: str, role: UserRole, *, is_active: bool = True) -> UserEntity:
        user = UserEntity(
            id=user_id, email=f"{user_id}@example.com", role=role, is_active=is_active
        )
        self.users[user_id] = user
        return user

    async def get_by_id(self, user_id):
        return self.users.get(user_id)

    async def get_active_by_role(self, role):
        return sorted(
            (u for u in self.users.values() if u.is_active and u.role == role),
            key=lambda u: u.id,
        )


class Engine:
    """All in-memory repositories with services and use cases wired on them."""

    def __init__(self) -> None:
        self.template_repo = InMemoryTemplateRepository()
        self.task_repo = InMemoryTaskInstanceRepository()
        self.workflow_repo = InMemoryWorkflowRepository(self.task_repo)
        self.template_repo.workflow_repo = self.workflow_repo
        self.history_repo = InMemoryStateHistoryRepository()
        self.user_repo = InMemoryUserRepository()
        self.state_machine = WorkflowStateMachine(
            self.workflow_repo, self.task_repo, self.history_repo
        )
        self.assignment_engine = AssignmentEngine(
            self.workflow_repo, self.task_repo, self.user_repo, self.state_machine
        )
        self.templates = TemplateService(self.template_repo)
        self.instantiate = InstantiateWorkflowUseCase(
            template_repo=self.template_repo,
            user_repo=self.user_repo,
            workflow_repo=self.workflow_repo,
            task_repo=self.task_repo,
            state_machine=self.state_machine,
        )
        self.initiate = InitiateWorkflowUseCase(
            instantiate=self.instantiate,
            assignment_engine=self.assignment_engine,
            workflow_repo=self.workflow_repo,
        )
        self.transition_task = TransitionTaskUseCase(
            workflow_repo=self.workflow_repo,
            task_repo=self.task_repo,
            state_machine=self.state_machine,
            assignment_engine=self.assignment_engine,
        )
        self.update_checklist = UpdateTaskChecklistUseCase(self.task_repo)
        self.queries = WorkflowQueryService(
            workflow_repo=self.workflow_repo,
            task_repo=self.task_repo,
            history_repo=self.history_repo,
            state_machine=self.state_machine,
        )

    def add_template(
        self,
        tasks: list[tuple[str, UserRole, int, bool, str | None]],
        *,
        is_active: bool = True,
        kind: WorkflowKind = WorkflowKind.ONBOARDING,
        name: str = "Standard Onboarding",
    ) -> WorkflowTemplateEntity:
        """Store a template built from (name, role, order, parallel, depends_on_name) tuples."""
        template_id = generate_cuid()
        ids = {t[0]: generate_cuid() for t in tasks}
        template = WorkflowTemplateEntity(
            id=template_id,
            name=name,
            kind=kind,
            is_active=is_active,
            tasks=[
                TemplateTaskEntity(
                    id=ids[task_name],
                    template_id=template_id,
                    name=task_name,
                    assigned_role=role,
                    sequence_order=order,
                    is_parallel=parallel,
                    depends_on_task_id=ids[dep] if dep else None,
                )
                for task_name, role, order, parallel, dep in tasks
            ],
        )
        return self.template_repo.add(template)

    def tasks_of(self, workflow_id: str) -> dict[str, TaskInstanceEntity]:
        """Stored tasks of workflow_id keyed by task name."""
        return {
            t.task_name: t for t in self.task_repo.tasks.values() if t.workflow_id == workflow_id
        }


@pytest.fixture
def engine() -> Engine:
    """In-memory engine with an HR admin 'hr1' who initiates workflows."""
    e = Engine()
    e.user_repo.add("hr1", UserRole.HR_ADMIN)
    return e


@pytest.fixture
async def db_session() -> AsyncSession:
    """Database session for repository/integration tests. Rolls back after test.

    Requires DATABASE_URL. Skips (pytest.skip) when no database is configured.
    Use @pytest.mark.requires_db to mark tests that need this fixture; run
    without DB via: pytest -m 'not requires_db'.
    """
    if not os.environ.get("DATABASE_URL"):
        pytest.skip("Database not configured: set DATABASE_URL to a Postgres test database")
    from lifecycle.infrastructure.persistence import database

    await database.create_tables()
    session_factory = database._ensure_engine()
    async with session_factory() as session:
        yield session
        await session.rollback()
    await database.dispose_engine()
