"""Dependency graph over a scheduled task list."""

from __future__ import annotations

from collections import deque
from collections.abc import Sequence

from dotkit.tasks.base import Task, TaskId


def present_dependencies(task: Task, present: set[TaskId]) -> list[TaskId]:
    """Dependencies of ``task`` that are part of this run, in stable order.

    Edges to tasks that are not scheduled are treated as satisfied.
    """
    return sorted((dep for dep in task.dependencies if dep in present), key=lambda dep: dep.value)


def has_cycle(tasks: Sequence[Task]) -> bool:
    """Kahn's algorithm: a cycle exists iff not every task can be ordered."""
    present = {task.task_id for task in tasks}
    in_degree: dict[TaskId, int] = {task.task_id: 0 for task in tasks}
    dependents: dict[TaskId, list[TaskId]] = {task.task_id: [] for task in tasks}
    for task in tasks:
        for dep in present_dependencies(task, present):
            in_degree[task.task_id] += 1
            dependents[dep].append(task.task_id)

    ready = deque(task_id for task_id, degree in in_degree.items() if degree == 0)
    processed = 0
    while ready:
        current = ready.popleft()
        processed += 1
        for dependent in dependents[current]:
            in_degree[dependent] -= 1
            if in_degree[dependent] == 0:
                ready.append(dependent)
    return processed < len(in_degree)
