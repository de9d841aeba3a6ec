"""Execution context handed to every task."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field, replace
from pathlib import Path

from dotkit.config.store import ConfigStore
from dotkit.exec import Executor
from dotkit.log.types import Log
from dotkit.platform import Platform


@dataclass(frozen=True)
class Context:
    """Shared state for one command run.

    Everything except ``log`` is shared by reference between tasks; the
    parallel scheduler gives each task its own buffered log via
    ``with_log``.
    """

    config: ConfigStore
    platform: Platform
    log: Log
    executor: Executor
    home: Path
    dry_run: bool = False
    parallel: bool = True
    repo_updated: threading.Event = field(default_factory=threading.Event)

    def with_log(self, log: Log) -> Context:
        return replace(self, log=log)

    @property
    def root(self) -> Path:
        return self.config.snapshot().root
