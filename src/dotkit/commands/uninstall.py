"""``dotkit uninstall``: replace links with real files and drop git hooks."""

from __future__ import annotations

from rich.console import Console

from dotkit.commands.runner import CommandRunner, RunOptions
from dotkit.exec import Executor
from dotkit.platform import Platform
from dotkit.tasks.registry import all_uninstall_tasks


def run_uninstall(
    options: RunOptions,
    *,
    console: Console | None = None,
    executor: Executor | None = None,
    platform: Platform | None = None,
) -> None:
    runner = CommandRunner("uninstall", options, console=console, executor=executor, platform=platform)
    runner.run(all_uninstall_tasks())
