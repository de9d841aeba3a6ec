"""Shared log types: task outcomes and the ``Log`` protocol."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from dotkit.log.diagnostic import DiagnosticLog


class TaskStatus(str, Enum):
    """Recorded outcome of one task in a run."""

    OK = "ok"
    NOT_APPLICABLE = "n/a"
    SKIPPED = "skipped"
    DRY_RUN = "dry-run"
    FAILED = "failed"


@dataclass(frozen=True)
class TaskEntry:
    """One recorded task outcome."""

    name: str
    status: TaskStatus
    message: str | None = None


class Log(Protocol):
    """Output sink handed to tasks through their context."""

    @property
    def task_name(self) -> str: ...

    @property
    def diagnostic(self) -> DiagnosticLog | None: ...

    def stage(self, msg: str) -> None: ...

    def info(self, msg: str) -> None: ...

    def debug(self, msg: str) -> None: ...

    def warn(self, msg: str) -> None: ...

    def error(self, msg: str) -> None: ...

    def dry_run(self, msg: str) -> None: ...

    def record_task(self, name: str, status: TaskStatus, message: str | None = None) -> None: ...
