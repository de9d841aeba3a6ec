"""Link repository git hooks into ``.git/hooks``."""

from __future__ import annotations

from dotkit.resources.git_hook import GitHookResource, hook_sources
from dotkit.tasks.base import Task, TaskId, TaskResult, TaskSkipped
from dotkit.tasks.context import Context
from dotkit.tasks.processing import ProcessOpts, process_resources, process_resources_remove


def git_hook_resources(ctx: Context) -> list[GitHookResource]:
    root = ctx.root
    return [GitHookResource(source, root) for source in hook_sources(root)]


class InstallGitHooks(Task):
    task_id = TaskId.INSTALL_GIT_HOOKS
    name = "Install git hooks"
    dependencies = frozenset({TaskId.UPDATE_REPOSITORY})

    def should_run(self, ctx: Context) -> bool:
        return (ctx.root / ".git").is_dir()

    def run(self, ctx: Context) -> TaskResult:
        resources = git_hook_resources(ctx)
        if not resources:
            return TaskSkipped("no hooks directory")
        return process_resources(ctx, resources, ProcessOpts.apply_all("install hook")).finish(ctx)


class UninstallGitHooks(Task):
    task_id = TaskId.UNINSTALL_GIT_HOOKS
    name = "Remove git hooks"

    def should_run(self, ctx: Context) -> bool:
        return (ctx.root / ".git").is_dir()

    def run(self, ctx: Context) -> TaskResult:
        resources = git_hook_resources(ctx)
        if not resources:
            return TaskSkipped("no hooks directory")
        return process_resources_remove(ctx, resources, "remove hook").finish(ctx)
