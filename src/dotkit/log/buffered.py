"""Per-task output buffer used by the parallel scheduler."""

from __future__ import annotations

import threading

from dotkit.log.diagnostic import DiagnosticLog
from dotkit.log.logger import (
    DIAG_EVENTS,
    LEVEL_DEBUG,
    LEVEL_DRY_RUN,
    LEVEL_ERROR,
    LEVEL_INFO,
    LEVEL_STAGE,
    LEVEL_WARN,
    Logger,
)
from dotkit.log.types import TaskStatus


class BufferedLog:
    """Collects a task's display output and replays it in one block.

    Diagnostic events are forwarded immediately so the trace keeps the real
    timing; task outcomes go straight to the parent logger.
    """

    def __init__(self, parent: Logger, task_name: str) -> None:
        self._parent = parent
        self._task_name = task_name
        self._entries: list[tuple[str, str]] = []
        self._lock = threading.Lock()

    @property
    def task_name(self) -> str:
        return self._task_name

    @property
    def diagnostic(self) -> DiagnosticLog | None:
        return self._parent.diagnostic

    @property
    def pending(self) -> list[tuple[str, str]]:
        with self._lock:
            return list(self._entries)

    def _buffer(self, level: str, msg: str) -> None:
        diagnostic = self._parent.diagnostic
        if diagnostic is not None:
            diagnostic.emit(DIAG_EVENTS[level], msg, task=self._task_name)
        with self._lock:
            self._entries.append((level, msg))

    def stage(self, msg: str) -> None:
        self._buffer(LEVEL_STAGE, msg)

    def info(self, msg: str) -> None:
        self._buffer(LEVEL_INFO, msg)

    def debug(self, msg: str) -> None:
        self._buffer(LEVEL_DEBUG, msg)

    def warn(self, msg: str) -> None:
        self._buffer(LEVEL_WARN, msg)

    def error(self, msg: str) -> None:
        self._buffer(LEVEL_ERROR, msg)

    def dry_run(self, msg: str) -> None:
        self._buffer(LEVEL_DRY_RUN, msg)

    def record_task(self, name: str, status: TaskStatus, message: str | None = None) -> None:
        self._parent.record_task(name, status, message)

    def flush_and_complete(self, task_name: str) -> None:
        """Replay buffered output atomically and mark ``task_name`` finished."""
        with self._lock:
            entries = list(self._entries)
            self._entries.clear()
        with self._parent.flush_lock:
            self._parent.clear_progress()
            for level, msg in entries:
                self._parent.write_entry(level, msg)
            self._parent.complete_task(task_name)
