"""Unit tests for dependency cycle detection."""

from __future__ import annotations

from dotkit.tasks.base import Task, TaskId, TaskOk, TaskResult
from dotkit.tasks.context import Context
from dotkit.tasks.graph import has_cycle, present_dependencies


class _Node(Task):
    def __init__(self, task_id: TaskId, *deps: TaskId) -> None:
        self.task_id = task_id
        self.name = task_id.value
        self.dependencies = frozenset(deps)

    def run(self, ctx: Context) -> TaskResult:
        _ = ctx
        return TaskOk()


A = TaskId.INSTALL_PACKAGES
B = TaskId.INSTALL_SYMLINKS
C = TaskId.APPLY_FILE_PERMISSIONS
D = TaskId.INSTALL_VSCODE_EXTENSIONS


def test_empty_and_single_task_have_no_cycle() -> None:
    assert has_cycle([]) is False
    assert has_cycle([_Node(A)]) is False


def test_chain_and_diamond_are_acyclic() -> None:
    assert has_cycle([_Node(A), _Node(B, A), _Node(C, B)]) is False
    assert has_cycle([_Node(A), _Node(B, A), _Node(C, A), _Node(D, B, C)]) is False


def test_two_cycle_and_self_loop_detected() -> None:
    assert has_cycle([_Node(A, B), _Node(B, A)]) is True
    assert has_cycle([_Node(A, A)]) is True


def test_cycle_through_absent_task_is_ignored() -> None:
    # C depends on B, closing a loop, but C is not scheduled.
    assert has_cycle([_Node(A, C), _Node(B, A)]) is False
    assert has_cycle([_Node(A, C), _Node(B, C)]) is False


def test_present_dependencies_filters_and_orders() -> None:
    task = _Node(D, C, A, TaskId.RELOAD_CONFIG)
    assert present_dependencies(task, {A, C, D}) == [C, A]
