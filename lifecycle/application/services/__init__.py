"""Application services: sequencing, state machine, assignment."""

from lifecycle.application.services.assignment_engine import (
    AssignmentEngine,
    find_ready_tasks,
    is_ready,
    pick_least_loaded,
)
from lifecycle.application.services.sequencer import validate_and_normalize
from lifecycle.application.services.state_machine import WorkflowStateMachine

__all__ = [
    "AssignmentEngine",
    "WorkflowStateMachine",
    "find_ready_tasks",
    "is_ready",
    "pick_least_loaded",
    "validate_and_normalize",
]
