"""Status transition tables for workflows and tasks.

Both state machines share one shape: a map from current status to the set
of statuses it may move to. COMPLETED has no outgoing transitions.
"""

from lifecycle.domain.enums import TaskStatus, WorkflowStatus
from lifecycle.domain.exceptions import InvalidTransitionException

WORKFLOW_TRANSITIONS: dict[WorkflowStatus, frozenset[WorkflowStatus]] = {
    WorkflowStatus.INITIATED: frozenset({WorkflowStatus.IN_PROGRESS}),
    WorkflowStatus.IN_PROGRESS: frozenset(
        {WorkflowStatus.BLOCKED, WorkflowStatus.COMPLETED}
    ),
    WorkflowStatus.BLOCKED: frozenset({WorkflowStatus.IN_PROGRESS}),
    WorkflowStatus.COMPLETED: frozenset(),
}

TASK_TRANSITIONS: dict[TaskStatus, frozenset[TaskStatus]] = {
    TaskStatus.NOT_STARTED: frozenset({TaskStatus.IN_PROGRESS}),
    TaskStatus.IN_PROGRESS: frozenset({TaskStatus.BLOCKED, TaskStatus.COMPLETED}),
    TaskStatus.BLOCKED: frozenset({TaskStatus.IN_PROGRESS}),
    TaskStatus.COMPLETED: frozenset(),
}


def can_transition_workflow(current: WorkflowStatus, new: WorkflowStatus) -> bool:
    """Return whether a workflow may move from current to new."""
    return new in WORKFLOW_TRANSITIONS[current]


def can_transition_task(current: TaskStatus, new: TaskStatus) -> bool:
    """Return whether a task may move from current to new."""
    return new in TASK_TRANSITIONS[current]


def ensure_workflow_transition(current: WorkflowStatus, new: WorkflowStatus) -> None:
    """Raise InvalidTransitionException unless current -> new is allowed."""
    if not can_transition_workflow(current, new):
        raise InvalidTransitionException("workflow", current.value, new.value)


def ensure_task_transition(current: TaskStatus, new: TaskStatus) -> None:
    """Raise InvalidTransitionException unless current -> new is allowed."""
    if not can_transition_task(current, new):
        raise InvalidTransitionException("task", current.value, new.value)
