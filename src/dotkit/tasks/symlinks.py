"""Link dotfiles into the home directory, or materialise them back."""

from __future__ import annotations

from dotkit.resources.symlink import SymlinkResource
from dotkit.tasks.base import Task, TaskId, TaskResult, TaskSkipped
from dotkit.tasks.context import Context
from dotkit.tasks.processing import ProcessOpts, process_resources, process_resources_remove


def symlink_resources(ctx: Context) -> list[SymlinkResource]:
    config = ctx.config.snapshot()
    return [
        SymlinkResource(entry.source_path(config.root), entry.target_path(ctx.home))
        for entry in config.symlinks
    ]


class InstallSymlinks(Task):
    task_id = TaskId.INSTALL_SYMLINKS
    name = "Install symlinks"
    dependencies = frozenset({TaskId.RELOAD_CONFIG})

    def run(self, ctx: Context) -> TaskResult:
        resources = symlink_resources(ctx)
        if not resources:
            return TaskSkipped("no symlinks declared")
        return process_resources(ctx, resources, ProcessOpts.apply_all("link")).finish(ctx)


class UninstallSymlinks(Task):
    task_id = TaskId.UNINSTALL_SYMLINKS
    name = "Remove symlinks"

    def run(self, ctx: Context) -> TaskResult:
        resources = symlink_resources(ctx)
        if not resources:
            return TaskSkipped("no symlinks declared")
        return process_resources_remove(ctx, resources, "unlink").finish(ctx)
