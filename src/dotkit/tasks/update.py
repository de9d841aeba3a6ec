"""Pull the dotfiles repository and reload declarations when it moved."""

from __future__ import annotations

from dotkit.config.loader import load_config
from dotkit.tasks.base import Task, TaskDryRun, TaskId, TaskOk, TaskResult
from dotkit.tasks.context import Context


class UpdateRepository(Task):
    task_id = TaskId.UPDATE_REPOSITORY
    name = "Update repository"

    def should_run(self, ctx: Context) -> bool:
        return (ctx.root / ".git").exists() and ctx.executor.which("git")

    def run(self, ctx: Context) -> TaskResult:
        root = ctx.root
        if ctx.dry_run:
            ctx.log.dry_run(f"would pull: {root}")
            return TaskDryRun()

        before = self._head(ctx)
        ctx.executor.run("git", ["pull", "--ff-only"], cwd=root)
        after = self._head(ctx)
        if before == after:
            ctx.log.info("already up to date")
        else:
            ctx.log.info(f"updated {before[:7]}..{after[:7]}")
            ctx.repo_updated.set()
        return TaskOk()

    @staticmethod
    def _head(ctx: Context) -> str:
        return ctx.executor.run("git", ["rev-parse", "HEAD"], cwd=ctx.root).stdout.strip()


class ReloadConfig(Task):
    """Swap in freshly loaded declarations after the repository changed."""

    task_id = TaskId.RELOAD_CONFIG
    name = "Reload configuration"
    dependencies = frozenset({TaskId.UPDATE_REPOSITORY})

    def should_run(self, ctx: Context) -> bool:
        return ctx.repo_updated.is_set()

    def run(self, ctx: Context) -> TaskResult:
        with ctx.config.read() as current:
            fresh = load_config(current.root)
        ctx.config.replace(fresh)
        ctx.log.info(f"reloaded {fresh.path}")
        return TaskOk()
