"""Run one task and record exactly one outcome for it."""

from __future__ import annotations

from dotkit.log.diagnostic import DiagEvent
from dotkit.log.types import TaskStatus
from dotkit.tasks.base import Task, TaskDryRun, TaskOk, TaskSkipped
from dotkit.tasks.context import Context


def execute(task: Task, ctx: Context) -> TaskStatus:
    """Gate, run and classify ``task``; never raises for task errors."""
    log = ctx.log
    try:
        applicable = task.should_run(ctx)
    except Exception as exc:
        log.error(f"{task.name}: {exc}")
        log.record_task(task.name, TaskStatus.FAILED, str(exc))
        return TaskStatus.FAILED

    if not applicable:
        log.debug(f"skipping task: {task.name} (not applicable)")
        if log.diagnostic is not None:
            log.diagnostic.emit(DiagEvent.TASK_SKIP, "not applicable", task=task.name)
        log.record_task(task.name, TaskStatus.NOT_APPLICABLE)
        return TaskStatus.NOT_APPLICABLE

    log.stage(task.name)
    try:
        result = task.run(ctx)
    except Exception as exc:
        log.error(f"{task.name}: {exc}")
        log.record_task(task.name, TaskStatus.FAILED, str(exc))
        return TaskStatus.FAILED

    if isinstance(result, TaskSkipped):
        log.info(f"skipped: {result.reason}")
        log.record_task(task.name, TaskStatus.SKIPPED, result.reason)
        return TaskStatus.SKIPPED
    if isinstance(result, TaskDryRun):
        log.record_task(task.name, TaskStatus.DRY_RUN)
        return TaskStatus.DRY_RUN
    if not isinstance(result, TaskOk):
        message = f"unexpected task result {result!r}"
        log.error(f"{task.name}: {message}")
        log.record_task(task.name, TaskStatus.FAILED, message)
        return TaskStatus.FAILED
    log.record_task(task.name, TaskStatus.OK)
    return TaskStatus.OK
