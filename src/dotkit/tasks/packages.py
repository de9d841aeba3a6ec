"""Install declared system packages."""

from __future__ import annotations

from dotkit.errors import ResourceError
from dotkit.resources.base import Correct
from dotkit.resources.package import PackageResource, batch_install_packages, installed_packages
from dotkit.tasks.base import Task, TaskId, TaskResult, TaskSkipped
from dotkit.tasks.context import Context
from dotkit.tasks.stats import TaskStats


class InstallPackages(Task):
    task_id = TaskId.INSTALL_PACKAGES
    name = "Install packages"
    dependencies = frozenset({TaskId.RELOAD_CONFIG})

    def should_run(self, ctx: Context) -> bool:
        return ctx.platform.is_arch

    def run(self, ctx: Context) -> TaskResult:
        config = ctx.config.snapshot()
        if not config.packages:
            return TaskSkipped("no packages declared")
        if not ctx.executor.which("pacman"):
            return TaskSkipped("pacman not found")

        installed = installed_packages(ctx.executor)
        already_ok = 0
        missing: list[PackageResource] = []
        for name in dict.fromkeys(entry.name for entry in config.packages):
            resource = PackageResource(name, ctx.executor, installed)
            if isinstance(resource.current_state(), Correct):
                ctx.log.debug(f"ok: {resource.description()}")
                already_ok += 1
            else:
                missing.append(resource)

        if not missing:
            return TaskStats(already_ok=already_ok).finish(ctx)

        if ctx.dry_run:
            for resource in missing:
                ctx.log.dry_run(f"would install: {resource.description()}")
            return TaskStats(changed=len(missing), already_ok=already_ok).finish(ctx)

        ctx.log.debug(f"batch-installing {len(missing)} packages")
        try:
            batch_install_packages([resource.name for resource in missing], ctx.executor)
        except ResourceError as exc:
            ctx.log.warn(f"batch install failed: {exc}")
            return TaskStats(already_ok=already_ok, skipped=len(missing)).finish(ctx)
        return TaskStats(changed=len(missing), already_ok=already_ok).finish(ctx)
