"""Apply declared global git settings."""

from __future__ import annotations

from dotkit.resources.git_config import GitConfigResource
from dotkit.tasks.base import Task, TaskId, TaskResult, TaskSkipped
from dotkit.tasks.context import Context
from dotkit.tasks.processing import ProcessOpts, process_resources


class ConfigureGit(Task):
    task_id = TaskId.CONFIGURE_GIT
    name = "Configure git"
    dependencies = frozenset({TaskId.RELOAD_CONFIG})

    def should_run(self, ctx: Context) -> bool:
        return ctx.executor.which("git")

    def run(self, ctx: Context) -> TaskResult:
        config = ctx.config.snapshot()
        if not config.git_config:
            return TaskSkipped("no git settings declared")
        resources = [GitConfigResource(entry.key, entry.value, ctx.executor) for entry in config.git_config]
        return process_resources(ctx, resources, ProcessOpts.apply_all("set git config")).finish(ctx)
