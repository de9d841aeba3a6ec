"""Dependency-driven task scheduling.

The parallel scheduler starts one thread per task. A thread blocks on the
completion signal of each dependency present in the run, executes its task
with a private ``BufferedLog`` and replays that output under the logger's
flush lock, so task output appears in completion order and never
interleaves. A task's signal is set however it finished, so a failed task
never blocks its dependents.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable, Sequence

from dotkit.log.buffered import BufferedLog
from dotkit.log.logger import Logger
from dotkit.tasks.base import Task, TaskId
from dotkit.tasks.context import Context
from dotkit.tasks.executor import execute
from dotkit.tasks.graph import present_dependencies


class CompletionSignals:
    """One ``threading.Event`` per scheduled task."""

    def __init__(self, task_ids: Iterable[TaskId]) -> None:
        self._events = {task_id: threading.Event() for task_id in task_ids}

    def wait_for(self, dependencies: Iterable[TaskId]) -> None:
        for dep in dependencies:
            self._events[dep].wait()

    def complete(self, task_id: TaskId) -> None:
        self._events[task_id].set()

    def is_complete(self, task_id: TaskId) -> bool:
        return self._events[task_id].is_set()


def run_tasks_parallel(tasks: Sequence[Task], ctx: Context, logger: Logger) -> None:
    """Run an acyclic task list, one thread per task."""
    present = {task.task_id for task in tasks}
    names = {task.task_id: task.name for task in tasks}
    signals = CompletionSignals(present)
    diagnostic = logger.diagnostic

    def worker(task: Task) -> None:
        deps = present_dependencies(task, present)
        try:
            if diagnostic is not None:
                diagnostic.task_wait(task.name, [names[dep] for dep in deps])
            signals.wait_for(deps)
            if diagnostic is not None:
                diagnostic.task_start(task.name)
            logger.notify_task_start(task.name)
            buffer = BufferedLog(logger, task.name)
            execute(task, ctx.with_log(buffer))
            if diagnostic is not None:
                diagnostic.task_done(task.name)
            buffer.flush_and_complete(task.name)
        finally:
            signals.complete(task.task_id)

    threads = [
        threading.Thread(target=worker, args=(task,), name=f"dotkit-{task.task_id.value}")
        for task in tasks
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()


def run_tasks_sequential(tasks: Sequence[Task], ctx: Context) -> None:
    """Run tasks one by one in declaration order."""
    diagnostic = ctx.log.diagnostic
    for task in tasks:
        if diagnostic is not None:
            diagnostic.task_start(task.name)
        execute(task, ctx)
        if diagnostic is not None:
            diagnostic.task_done(task.name)
