"""Apply declared permission modes."""

from __future__ import annotations

from dotkit.resources.chmod import ChmodResource
from dotkit.tasks.base import Task, TaskId, TaskResult, TaskSkipped
from dotkit.tasks.context import Context
from dotkit.tasks.processing import ProcessOpts, process_resources


class ApplyFilePermissions(Task):
    task_id = TaskId.APPLY_FILE_PERMISSIONS
    name = "Apply file permissions"
    # Targets usually live behind symlinks created by that task.
    dependencies = frozenset({TaskId.RELOAD_CONFIG, TaskId.INSTALL_SYMLINKS})

    def should_run(self, ctx: Context) -> bool:
        return not ctx.platform.is_windows

    def run(self, ctx: Context) -> TaskResult:
        config = ctx.config.snapshot()
        resources = [ChmodResource(entry.target_path(ctx.home), entry.mode) for entry in config.chmod]
        if not resources:
            return TaskSkipped("no permissions declared")
        return process_resources(ctx, resources, ProcessOpts.apply_all("chmod")).finish(ctx)
