"""Template task sequencing: validation and sequence-order normalization.

Pure functions; no store access. Dependencies are resolved by request-scoped
ref (no persisted ids exist yet when a template is created), and the
normalized result refers to dependencies by index into the returned list.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Sequence

from lifecycle.application.dtos.template import NormalizedTask, ProposedTask
from lifecycle.domain.exceptions import ValidationException

logger = logging.getLogger(__name__)

_VISITING = 1
_DONE = 2


def _check_sequence_groups(tasks: Sequence[ProposedTask]) -> None:
    """Raise if a shared sequence order contains a non-parallel task."""
    groups: dict[int, list[ProposedTask]] = defaultdict(list)
    for task in tasks:
        groups[task.sequence_order].append(task)
    for order in sorted(groups):
        members = groups[order]
        if len(members) > 1 and not all(t.is_parallel for t in members):
            raise ValidationException(
                f"Tasks with sequence order {order} must be marked as parallel "
                "or have unique sequence orders",
                field="sequence_order",
                sequence_order=order,
            )


def _check_orders_and_refs(
    tasks: Sequence[ProposedTask],
) -> tuple[dict[str, int], dict[str, list[int]]]:
    """Raise on non-positive orders or duplicate explicit refs.

    Returns explicit ref -> index and, for tasks without a ref, name ->
    indices. Names may repeat; a repeated name only fails when a dependency
    points at it.
    """
    index_by_ref: dict[str, int] = {}
    indices_by_name: dict[str, list[int]] = defaultdict(list)
    for i, task in enumerate(tasks):
        if task.sequence_order < 1:
            raise ValidationException(
                f"Task '{task.name}' has sequence order {task.sequence_order}; "
                "sequence orders must be positive",
                field="sequence_order",
                sequence_order=task.sequence_order,
            )
        if task.ref is None:
            indices_by_name[task.name].append(i)
            continue
        if task.ref in index_by_ref:
            raise ValidationException(
                f"Duplicate task reference '{task.ref}'; give each task a unique ref",
                field="ref",
                ref=task.ref,
            )
        index_by_ref[task.ref] = i
    return index_by_ref, indices_by_name


def _resolve_dependencies(
    tasks: Sequence[ProposedTask],
    index_by_ref: dict[str, int],
    indices_by_name: dict[str, list[int]],
) -> list[int | None]:
    """Return dependency index per task.

    An explicit ref wins over a task name. Raises on references to unknown
    tasks and on names shared by more than one unreferenced task.
    """
    deps: list[int | None] = []
    for task in tasks:
        if task.depends_on is None:
            deps.append(None)
            continue
        target = index_by_ref.get(task.depends_on)
        if target is None:
            candidates = indices_by_name.get(task.depends_on, [])
            if len(candidates) > 1:
                raise ValidationException(
                    f"Task '{task.name}' depends on '{task.depends_on}', "
                    "which names more than one task; give the target a unique ref",
                    field="depends_on",
                    task=task.name,
                    depends_on=task.depends_on,
                )
            target = candidates[0] if candidates else None
        if target is None:
            raise ValidationException(
                f"Task '{task.name}' references non-existent dependency task "
                f"'{task.depends_on}'",
                field="depends_on",
                task=task.name,
                depends_on=task.depends_on,
            )
        deps.append(target)
    return deps


def _check_acyclic(tasks: Sequence[ProposedTask], deps: list[int | None]) -> None:
    """Depth-first walk along dependency edges; raise if a walk revisits its own path.

    Each task has at most one outgoing edge, so every walk is a chain.
    """
    state: dict[int, int] = {}
    for start in range(len(tasks)):
        path: list[int] = []
        node: int | None = start
        while node is not None and state.get(node) != _DONE:
            if state.get(node) == _VISITING:
                name = tasks[node].name
                raise ValidationException(
                    f"Circular dependency detected: task '{name}' has a "
                    "circular dependency chain",
                    field="depends_on",
                    task=name,
                )
            state[node] = _VISITING
            path.append(node)
            node = deps[node]
        for visited in path:
            state[visited] = _DONE


def _check_dependency_order(
    tasks: Sequence[ProposedTask], deps: list[int | None]
) -> None:
    """Raise when a task depends on a task that does not come strictly earlier."""
    for task, dep in zip(tasks, deps):
        if dep is None:
            continue
        target = tasks[dep]
        if target.sequence_order >= task.sequence_order:
            raise ValidationException(
                f"Task '{task.name}' (sequence order {task.sequence_order}) cannot "
                f"depend on '{target.name}' (sequence order {target.sequence_order}); "
                "dependencies must have a lower sequence order",
                field="depends_on",
                task=task.name,
                depends_on=target.key,
            )


def validate_tasks(tasks: Sequence[ProposedTask]) -> list[int | None]:
    """Validate a proposed task list; return dependency index per task.

    Checks run in order and the first failure wins: non-empty list, parallel
    rule for shared sequence orders, positive orders and unique explicit refs,
    dependency existence, acyclicity, dependency strictly earlier.

    Raises:
        ValidationException: On the first violated rule.
    """
    if not tasks:
        raise ValidationException("at least one task required", field="tasks")
    _check_sequence_groups(tasks)
    index_by_ref, indices_by_name = _check_orders_and_refs(tasks)
    deps = _resolve_dependencies(tasks, index_by_ref, indices_by_name)
    _check_acyclic(tasks, deps)
    _check_dependency_order(tasks, deps)
    return deps


def normalize_sequence(
    tasks: Sequence[ProposedTask], deps: list[int | None]
) -> list[NormalizedTask]:
    """Renumber sequence orders to 1..N without gaps, keeping parallel groups.

    Example: [1, 5, 10] -> [1, 2, 3]; [1, 1, 3] -> [1, 1, 2]. Output is
    ordered by sequence order (stable within a group); dependency indices
    are remapped to positions in the output.
    """
    order = sorted(range(len(tasks)), key=lambda i: tasks[i].sequence_order)
    new_position = {old: new for new, old in enumerate(order)}
    ranks = {
        seq: rank
        for rank, seq in enumerate(sorted({t.sequence_order for t in tasks}), start=1)
    }
    normalized: list[NormalizedTask] = []
    for old in order:
        task = tasks[old]
        dep = deps[old]
        normalized.append(
            NormalizedTask(
                ref=task.key,
                name=task.name,
                assigned_role=task.assigned_role,
                sequence_order=ranks[task.sequence_order],
                is_parallel=task.is_parallel,
                depends_on=new_position[dep] if dep is not None else None,
                description=task.description,
            )
        )
    return normalized


def validate_and_normalize(tasks: Sequence[ProposedTask]) -> list[NormalizedTask]:
    """Validate proposed tasks and return them normalized.

    Raises:
        ValidationException: If the task list violates a sequencing rule.
    """
    deps = validate_tasks(tasks)
    normalized = normalize_sequence(tasks, deps)
    logger.debug(
        "Normalized %d template tasks into %d sequence groups",
        len(normalized),
        normalized[-1].sequence_order,
    )
    return normalized
