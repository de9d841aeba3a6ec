"""Enable and start declared systemd user units."""

from __future__ import annotations

from dotkit.errors import ResourceError
from dotkit.platform import OS_LINUX
from dotkit.resources.systemd_unit import SystemdUnitResource
from dotkit.tasks.base import Task, TaskId, TaskResult, TaskSkipped
from dotkit.tasks.context import Context
from dotkit.tasks.processing import ProcessOpts, process_resources


class ConfigureSystemdUnits(Task):
    task_id = TaskId.CONFIGURE_SYSTEMD_UNITS
    name = "Configure systemd units"
    # Unit files are linked into ~/.config/systemd/user by the symlinks task.
    dependencies = frozenset({TaskId.RELOAD_CONFIG, TaskId.INSTALL_SYMLINKS})

    def should_run(self, ctx: Context) -> bool:
        return ctx.platform.os == OS_LINUX and ctx.executor.which("systemctl")

    def run(self, ctx: Context) -> TaskResult:
        config = ctx.config.snapshot()
        if not config.systemd_units:
            return TaskSkipped("no systemd units declared")
        if not ctx.dry_run:
            try:
                ctx.executor.run("systemctl", ["--user", "daemon-reload"])
            except ResourceError as exc:
                ctx.log.debug(f"daemon-reload failed: {exc}")

        resources = [SystemdUnitResource(entry.name, ctx.executor) for entry in config.systemd_units]
        return process_resources(ctx, resources, ProcessOpts.install_missing("enable")).finish(ctx)
