"""``dotkit install``: converge the system to the declarations."""

from __future__ import annotations

from collections.abc import Sequence

from rich.console import Console

from dotkit.commands.runner import CommandRunner, RunOptions
from dotkit.exec import Executor
from dotkit.platform import Platform
from dotkit.tasks.base import Task
from dotkit.tasks.registry import all_install_tasks


def filter_tasks(tasks: Sequence[Task], *, skip: Sequence[str] = (), only: Sequence[str] = ()) -> list[Task]:
    """Keep tasks matching ``only`` and drop those matching ``skip``.

    Matching is a case-insensitive substring test on the task name.
    """
    skip_terms = [term.strip().lower() for term in skip if term.strip()]
    only_terms = [term.strip().lower() for term in only if term.strip()]
    selected: list[Task] = []
    for task in tasks:
        name = task.name.lower()
        if only_terms and not any(term in name for term in only_terms):
            continue
        if any(term in name for term in skip_terms):
            continue
        selected.append(task)
    return selected


def run_install(
    options: RunOptions,
    *,
    skip: Sequence[str] = (),
    only: Sequence[str] = (),
    console: Console | None = None,
    executor: Executor | None = None,
    platform: Platform | None = None,
) -> None:
    runner = CommandRunner("install", options, console=console, executor=executor, platform=platform)
    runner.run(filter_tasks(all_install_tasks(), skip=skip, only=only))
