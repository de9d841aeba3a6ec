"""Install declared VS Code extensions."""

from __future__ import annotations

from dotkit.resources.vscode_extension import ExtensionResource, find_code_command, installed_extensions
from dotkit.tasks.base import Task, TaskId, TaskResult, TaskSkipped
from dotkit.tasks.context import Context
from dotkit.tasks.processing import ProcessOpts, process_resource_states


class InstallVsCodeExtensions(Task):
    task_id = TaskId.INSTALL_VSCODE_EXTENSIONS
    name = "Install VS Code extensions"
    dependencies = frozenset({TaskId.RELOAD_CONFIG, TaskId.INSTALL_PACKAGES})

    def should_run(self, ctx: Context) -> bool:
        return find_code_command(ctx.executor) is not None

    def run(self, ctx: Context) -> TaskResult:
        config = ctx.config.snapshot()
        if not config.vscode_extensions:
            return TaskSkipped("no extensions declared")
        code_cmd = find_code_command(ctx.executor)
        if code_cmd is None:
            return TaskSkipped("VS Code CLI not found")

        installed = installed_extensions(code_cmd, ctx.executor)
        resources = [
            ExtensionResource(entry.id, code_cmd, ctx.executor, installed) for entry in config.vscode_extensions
        ]
        states = [(resource, resource.current_state()) for resource in resources]
        return process_resource_states(ctx, states, ProcessOpts.install_missing("install extension")).finish(ctx)
