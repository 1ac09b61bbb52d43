"""Tests for domain entities, enums and status transition tables."""

from datetime import UTC, datetime

import pytest

from lifecycle.domain.entities import (
    TaskInstanceEntity,
    TemplateTaskEntity,
    UserEntity,
    WorkflowInstanceEntity,
    WorkflowTemplateEntity,
)
from lifecycle.domain.enums import TaskStatus, UserRole, WorkflowKind, WorkflowStatus
from lifecycle.domain.exceptions import InvalidTransitionException, ValidationException
from lifecycle.domain.transitions import (
    TASK_TRANSITIONS,
    WORKFLOW_TRANSITIONS,
    can_transition_task,
    can_transition_workflow,
)

NOW = datetime(2025, 1, 15, 12, 0, 0, tzinfo=UTC)


def _workflow(status: WorkflowStatus = WorkflowStatus.INITIATED) -> WorkflowInstanceEntity:
    return WorkflowInstanceEntity(
        id="wf1",
        template_id="tpl1",
        employee_name="Jane Doe",
        employee_email="jane.doe@acme.com",
        employee_role="Engineer",
        kind=WorkflowKind.ONBOARDING,
        status=status,
        initiated_by="hr1",
        initiated_at=NOW,
    )


def _task(status: TaskStatus = TaskStatus.NOT_STARTED) -> TaskInstanceEntity:
    return TaskInstanceEntity(
        id="t1",
        workflow_id="wf1",
        template_task_id="tt1",
        task_name="Create email account",
        assigned_role=UserRole.TECH_SUPPORT,
        sequence_order=1,
        status=status,
    )


def test_enum_values_match_names() -> None:
    assert WorkflowStatus.values() == ["INITIATED", "IN_PROGRESS", "BLOCKED", "COMPLETED"]
    assert WorkflowKind.values() == ["ONBOARDING", "OFFBOARDING"]
    assert set(UserRole.values()) == {
        "HR_ADMIN",
        "LINE_MANAGER",
        "TECH_SUPPORT",
        "ADMINISTRATOR",
    }


def test_open_statuses_and_admin_roles() -> None:
    assert TaskStatus.open_statuses() == (TaskStatus.NOT_STARTED, TaskStatus.IN_PROGRESS)
    assert UserRole.workflow_admins() == {UserRole.HR_ADMIN, UserRole.ADMINISTRATOR}


@pytest.mark.parametrize(
    ("current", "new", "allowed"),
    [
        (WorkflowStatus.INITIATED, WorkflowStatus.IN_PROGRESS, True),
        (WorkflowStatus.INITIATED, WorkflowStatus.COMPLETED, False),
        (WorkflowStatus.IN_PROGRESS, WorkflowStatus.BLOCKED, True),
        (WorkflowStatus.IN_PROGRESS, WorkflowStatus.COMPLETED, True),
        (WorkflowStatus.BLOCKED, WorkflowStatus.IN_PROGRESS, True),
        (WorkflowStatus.BLOCKED, WorkflowStatus.COMPLETED, False),
        (WorkflowStatus.COMPLETED, WorkflowStatus.IN_PROGRESS, False),
    ],
)
def test_workflow_transition_table(current, new, allowed) -> None:
    assert can_transition_workflow(current, new) is allowed


@pytest.mark.parametrize(
    ("current", "new", "allowed"),
    [
        (TaskStatus.NOT_STARTED, TaskStatus.IN_PROGRESS, True),
        (TaskStatus.NOT_STARTED, TaskStatus.COMPLETED, False),
        (TaskStatus.IN_PROGRESS, TaskStatus.BLOCKED, True),
        (TaskStatus.BLOCKED, TaskStatus.IN_PROGRESS, True),
        (TaskStatus.BLOCKED, TaskStatus.COMPLETED, False),
        (TaskStatus.COMPLETED, TaskStatus.IN_PROGRESS, False),
    ],
)
def test_task_transition_table(current, new, allowed) -> None:
    assert can_transition_task(current, new) is allowed


def test_completed_is_terminal_in_both_tables() -> None:
    assert WORKFLOW_TRANSITIONS[WorkflowStatus.COMPLETED] == frozenset()
    assert TASK_TRANSITIONS[TaskStatus.COMPLETED] == frozenset()


def test_workflow_transition_sets_completed_at() -> None:
    wf = _workflow(WorkflowStatus.IN_PROGRESS)
    previous = wf.transition_to(WorkflowStatus.COMPLETED, NOW)
    assert previous == WorkflowStatus.IN_PROGRESS
    assert wf.status == WorkflowStatus.COMPLETED
    assert wf.completed_at == NOW


def test_workflow_invalid_transition_leaves_state() -> None:
    wf = _workflow()
    with pytest.raises(InvalidTransitionException) as exc_info:
        wf.transition_to(WorkflowStatus.COMPLETED, NOW)
    assert isinstance(exc_info.value, ValidationException)
    assert exc_info.value.message == (
        "Invalid workflow state transition from INITIATED to COMPLETED"
    )
    assert wf.status == WorkflowStatus.INITIATED
    assert wf.completed_at is None


def test_task_completion_records_actor() -> None:
    task = _task(TaskStatus.IN_PROGRESS)
    task.transition_to(TaskStatus.COMPLETED, "u1", NOW)
    assert task.is_completed
    assert task.completed_at == NOW
    assert task.completed_by == "u1"


def test_task_assign_starts_task() -> None:
    task = _task()
    task.assign("u1", NOW, NOW)
    assert task.is_assigned
    assert task.status == TaskStatus.IN_PROGRESS
    assert task.due_date == NOW
    assert task.completed_by is None


def test_task_assign_rejected_when_not_started_required() -> None:
    task = _task(TaskStatus.COMPLETED)
    with pytest.raises(InvalidTransitionException):
        task.assign("u1", NOW, NOW)
    assert task.assigned_user_id is None


def test_template_ordered_tasks_and_active_flag() -> None:
    template = WorkflowTemplateEntity(
        id="tpl1",
        name="Onboarding",
        kind=WorkflowKind.ONBOARDING,
        is_active=False,
        tasks=[
            TemplateTaskEntity("b", "tpl1", "Second", UserRole.HR_ADMIN, 2),
            TemplateTaskEntity("a", "tpl1", "First", UserRole.HR_ADMIN, 1),
        ],
    )
    assert [t.name for t in template.ordered_tasks()] == ["First", "Second"]
    assert template.can_instantiate() is False


def test_user_can_take_requires_active_and_role() -> None:
    user = UserEntity(id="u1", email="u1@example.com", role=UserRole.TECH_SUPPORT)
    assert user.can_take(UserRole.TECH_SUPPORT)
    assert not user.can_take(UserRole.HR_ADMIN)
    inactive = UserEntity(
        id="u2", email="u2@example.com", role=UserRole.TECH_SUPPORT, is_active=False
    )
    assert not inactive.can_take(UserRole.TECH_SUPPORT)
