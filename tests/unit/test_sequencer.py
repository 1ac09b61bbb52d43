"""Sequencer tests: task list validation and sequence-order normalization."""

import pytest

from lifecycle.application.dtos.template import ProposedTask
from lifecycle.application.services.sequencer import (
    normalize_sequence,
    validate_and_normalize,
    validate_tasks,
)
from lifecycle.domain.enums import UserRole
from lifecycle.domain.exceptions import ValidationException

HR = UserRole.HR_ADMIN
TECH = UserRole.TECH_SUPPORT


def _task(name, order, *, parallel=False, depends_on=None, role=HR):
    return ProposedTask(
        name=name,
        assigned_role=role,
        sequence_order=order,
        is_parallel=parallel,
        depends_on=depends_on,
    )


def test_empty_task_list_rejected() -> None:
    with pytest.raises(ValidationException) as exc_info:
        validate_tasks([])
    assert exc_info.value.message == "at least one task required"
    assert exc_info.value.details["field"] == "tasks"


def test_shared_order_requires_all_parallel() -> None:
    """Two tasks sharing an order where one is not parallel are rejected."""
    with pytest.raises(ValidationException) as exc_info:
        validate_tasks([_task("A", 1, parallel=True), _task("B", 1)])
    assert "sequence order 1" in exc_info.value.message
    assert exc_info.value.details["sequence_order"] == 1


def test_shared_order_all_parallel_accepted() -> None:
    deps = validate_tasks([_task("A", 1, parallel=True), _task("B", 1, parallel=True)])
    assert deps == [None, None]


def test_non_positive_order_rejected() -> None:
    with pytest.raises(ValidationException):
        validate_tasks([_task("A", 0)])


def test_duplicate_explicit_refs_rejected() -> None:
    tasks = [
        ProposedTask(name="A", assigned_role=HR, sequence_order=1, ref="x"),
        ProposedTask(name="B", assigned_role=HR, sequence_order=2, ref="x"),
    ]
    with pytest.raises(ValidationException) as exc_info:
        validate_tasks(tasks)
    assert exc_info.value.details["ref"] == "x"


def test_same_name_sequential_tasks_accepted() -> None:
    tasks = [
        _task("Sign form", 1, role=HR),
        _task("Sign form", 2, role=UserRole.LINE_MANAGER),
    ]
    normalized = validate_and_normalize(tasks)
    assert [(t.name, t.assigned_role, t.sequence_order) for t in normalized] == [
        ("Sign form", HR, 1),
        ("Sign form", UserRole.LINE_MANAGER, 2),
    ]


def test_same_name_parallel_group_accepted() -> None:
    tasks = [
        _task("Provision laptop", 1, parallel=True, role=TECH),
        _task("Provision laptop", 1, parallel=True, role=TECH),
    ]
    assert [t.sequence_order for t in validate_and_normalize(tasks)] == [1, 1]


def test_dependency_on_shared_name_rejected() -> None:
    tasks = [
        _task("Sign form", 1, parallel=True),
        _task("Sign form", 1, parallel=True),
        _task("File form", 2, depends_on="Sign form"),
    ]
    with pytest.raises(ValidationException) as exc_info:
        validate_tasks(tasks)
    assert exc_info.value.details == {
        "field": "depends_on",
        "task": "File form",
        "depends_on": "Sign form",
    }


def test_explicit_ref_disambiguates_shared_name() -> None:
    tasks = [
        ProposedTask(name="Sign form", assigned_role=HR, sequence_order=1, ref="hr-sign"),
        _task("Sign form", 2, role=UserRole.LINE_MANAGER),
        _task("File form", 3, depends_on="hr-sign"),
    ]
    assert validate_tasks(tasks) == [None, None, 0]


def test_unknown_dependency_rejected() -> None:
    with pytest.raises(ValidationException) as exc_info:
        validate_tasks([_task("A", 1), _task("B", 2, depends_on="Z")])
    assert exc_info.value.message == "Task 'B' references non-existent dependency task 'Z'"


def test_cycle_rejected() -> None:
    """A -> B -> A is detected before the ordering rule is checked."""
    with pytest.raises(ValidationException) as exc_info:
        validate_tasks([_task("A", 1, depends_on="B"), _task("B", 2, depends_on="A")])
    assert "Circular dependency detected" in exc_info.value.message


def test_self_dependency_is_a_cycle() -> None:
    with pytest.raises(ValidationException) as exc_info:
        validate_tasks([_task("A", 1, depends_on="A")])
    assert exc_info.value.details["task"] == "A"


def test_dependency_on_later_task_rejected() -> None:
    with pytest.raises(ValidationException) as exc_info:
        validate_tasks([_task("A", 1, depends_on="B"), _task("B", 2)])
    assert "lower sequence order" in exc_info.value.message


def test_dependency_within_same_parallel_group_rejected() -> None:
    with pytest.raises(ValidationException):
        validate_tasks(
            [_task("A", 1, parallel=True), _task("B", 1, parallel=True, depends_on="A")]
        )


def test_ref_used_for_dependency_lookup() -> None:
    tasks = [
        ProposedTask(name="Setup", assigned_role=TECH, sequence_order=1, ref="t1"),
        ProposedTask(
            name="Setup", assigned_role=HR, sequence_order=2, ref="t2", depends_on="t1"
        ),
    ]
    assert validate_tasks(tasks) == [None, 0]


def test_normalize_closes_gaps() -> None:
    """[1, 5, 10] becomes [1, 2, 3]."""
    result = validate_and_normalize([_task("A", 1), _task("B", 5), _task("C", 10)])
    assert [t.sequence_order for t in result] == [1, 2, 3]
    assert [t.name for t in result] == ["A", "B", "C"]


def test_normalize_keeps_parallel_groups() -> None:
    """[(1, parallel), (1, parallel), 2] stays [1, 1, 2]."""
    result = validate_and_normalize(
        [_task("A", 1, parallel=True), _task("B", 1, parallel=True), _task("C", 2)]
    )
    assert [t.sequence_order for t in result] == [1, 1, 2]
    assert [t.is_parallel for t in result] == [True, True, False]


def test_normalize_sorts_and_remaps_dependencies() -> None:
    """Input order is irrelevant; dependency indices follow the sorted output."""
    tasks = [_task("C", 30, depends_on="A"), _task("A", 10), _task("B", 20)]
    deps = validate_tasks(tasks)
    result = normalize_sequence(tasks, deps)
    assert [t.name for t in result] == ["A", "B", "C"]
    assert [t.sequence_order for t in result] == [1, 2, 3]
    assert result[2].depends_on == 0
    assert result[0].depends_on is None


def test_normalize_is_idempotent() -> None:
    first = validate_and_normalize([_task("A", 2), _task("B", 7, depends_on="A")])
    again = validate_and_normalize(
        [
            ProposedTask(
                name=t.name,
                assigned_role=t.assigned_role,
                sequence_order=t.sequence_order,
                is_parallel=t.is_parallel,
                depends_on=first[t.depends_on].ref if t.depends_on is not None else None,
                ref=t.ref,
            )
            for t in first
        ]
    )
    assert again == first
