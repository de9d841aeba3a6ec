"""High-resolution event trace written alongside the run log.

Each line carries the elapsed time since the trace was opened, the wall
clock time in UTC, the logical task the event belongs to, and an event
tag. The task label is passed explicitly by the caller, so events emitted
from resource worker threads still carry the name of the task that
spawned them.
"""

from __future__ import annotations

import logging
import time
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path

from dotkit.log.paths import diagnostic_log_path, strip_ansi


class DiagEvent(str, Enum):
    INFO = "INFO"
    DEBUG = "DEBUG"
    WARN = "WARN"
    ERROR = "ERROR"
    STAGE = "STAGE"
    DRYRUN = "DRYRUN"
    TASK_WAIT = "TASK_WAIT"
    TASK_START = "TASK_START"
    TASK_DONE = "TASK_DONE"
    TASK_SKIP = "TASK_SKIP"
    RES_CHECK = "RES_CHECK"
    RES_APPLY = "RES_APPLY"
    RES_RESULT = "RES_RESULT"
    RES_REMOVE = "RES_REMOVE"


class _DiagnosticFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        wall = datetime.fromtimestamp(record.created, UTC).strftime("%Y-%m-%dT%H:%M:%S.%fZ")
        elapsed_us: int = getattr(record, "elapsed_us", 0)
        task: str = getattr(record, "task", "main")
        event: str = getattr(record, "event", DiagEvent.INFO.value)
        return f"+{elapsed_us:>12} {wall} [{task}] {event:<12} {strip_ansi(record.getMessage())}"


class DiagnosticLog:
    """Append-only trace of scheduler and resource events."""

    def __init__(self, path: Path, *, command: str) -> None:
        self.path = path
        self._start = time.monotonic()
        path.parent.mkdir(parents=True, exist_ok=True)
        started = datetime.now(UTC).isoformat()
        path.write_text(
            f"# dotkit diagnostic log: command={command} started={started}\n"
            "# +elapsed_us wall_utc [task] EVENT message\n",
            encoding="utf-8",
        )
        self._handler = logging.FileHandler(path, mode="a", encoding="utf-8")
        self._handler.setFormatter(_DiagnosticFormatter())
        self._logger = logging.getLogger(f"dotkit.diag.{command}")
        self._logger.setLevel(logging.DEBUG)
        self._logger.propagate = False
        for handler in list(self._logger.handlers):
            self._logger.removeHandler(handler)
            handler.close()
        self._logger.addHandler(self._handler)

    @classmethod
    def create(cls, command: str, directory: Path | None = None) -> DiagnosticLog | None:
        """Open a trace for ``command``; returns None when the cache dir is unusable."""
        try:
            return cls(diagnostic_log_path(command, directory), command=command)
        except OSError:
            return None

    def emit(self, event: DiagEvent, message: str, *, task: str = "main") -> None:
        elapsed_us = int((time.monotonic() - self._start) * 1_000_000)
        self._logger.debug(
            message,
            extra={"elapsed_us": elapsed_us, "task": task, "event": event.value},
        )

    def task_wait(self, task: str, dependencies: list[str]) -> None:
        if dependencies:
            self.emit(DiagEvent.TASK_WAIT, f"waiting for: {', '.join(dependencies)}", task=task)
        else:
            self.emit(DiagEvent.TASK_WAIT, "no deps, ready", task=task)

    def task_start(self, task: str) -> None:
        self.emit(DiagEvent.TASK_START, "deps satisfied, executing", task=task)

    def task_done(self, task: str) -> None:
        self.emit(DiagEvent.TASK_DONE, "completed", task=task)

    def close(self) -> None:
        self._logger.removeHandler(self._handler)
        self._handler.close()
