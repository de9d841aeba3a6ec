"""Shared command setup and the run-to-completion driver."""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from rich.console import Console

from dotkit.commands.scheduler import run_tasks_parallel, run_tasks_sequential
from dotkit.config.loader import load_config, validate
from dotkit.config.store import ConfigStore
from dotkit.errors import CONFIG_REASON_MISSING, ConfigurationError, DotkitError, TaskFailuresError
from dotkit.exec import Executor, SystemExecutor
from dotkit.log.logger import Logger
from dotkit.platform import Platform
from dotkit.settings import env_root, home_dir
from dotkit.tasks.base import Task
from dotkit.tasks.context import Context
from dotkit.tasks.graph import has_cycle


@dataclass(frozen=True)
class RunOptions:
    """Options shared by every command."""

    root: Path | None = None
    dry_run: bool = False
    parallel: bool = True
    verbose: bool = False


def resolve_root(explicit: Path | None, cwd: Path | None = None) -> Path:
    """Pick the dotfiles root: ``--root``, then ``DOTKIT_ROOT``, then the cwd."""
    for candidate in (explicit, env_root()):
        if candidate is not None:
            if not candidate.is_dir():
                raise ConfigurationError(f"dotfiles root does not exist: {candidate}", CONFIG_REASON_MISSING)
            return candidate.resolve()
    here = (cwd or Path.cwd()).resolve()
    if (here / "conf").is_dir():
        return here
    raise ConfigurationError(
        "could not find the dotfiles root; pass --root or set DOTKIT_ROOT",
        CONFIG_REASON_MISSING,
    )


def run_tasks_to_completion(tasks: Sequence[Task], ctx: Context, logger: Logger) -> None:
    """Run every task, print the summary, and raise if any task failed."""
    duplicates = sorted(task_id.value for task_id, count in Counter(t.task_id for t in tasks).items() if count > 1)
    if duplicates:
        raise DotkitError(f"duplicate task ids: {', '.join(duplicates)}")

    if ctx.parallel and len(tasks) > 1:
        if has_cycle(tasks):
            logger.warn("dependency cycle detected; falling back to sequential execution")
            run_tasks_sequential(tasks, ctx)
        else:
            run_tasks_parallel(tasks, ctx, logger)
    else:
        run_tasks_sequential(tasks, ctx)

    logger.print_summary()
    failures = logger.failure_count()
    if failures > 0:
        raise TaskFailuresError(failures)


class CommandRunner:
    """Builds the logger and context for one command and runs its tasks."""

    def __init__(
        self,
        command: str,
        options: RunOptions,
        *,
        console: Console | None = None,
        executor: Executor | None = None,
        platform: Platform | None = None,
    ) -> None:
        root = resolve_root(options.root)
        config = load_config(root)
        self.logger = Logger(command, verbose=options.verbose, console=console)
        home = home_dir()
        for warning in validate(config, home):
            self.logger.warn(warning)
        if options.dry_run:
            self.logger.info("dry run: no changes will be made")
        self.ctx = Context(
            config=ConfigStore(config),
            platform=platform or Platform.detect(),
            log=self.logger,
            executor=executor or SystemExecutor(),
            home=home,
            dry_run=options.dry_run,
            parallel=options.parallel,
        )

    def run(self, tasks: Sequence[Task]) -> None:
        try:
            run_tasks_to_completion(tasks, self.ctx, self.logger)
        finally:
            self.logger.close()
