"""Console and file logger for a single command run."""

from __future__ import annotations

import logging
import threading
from pathlib import Path

from rich.console import Console
from rich.text import Text

from dotkit.log.diagnostic import DiagEvent, DiagnosticLog
from dotkit.log.paths import run_log_path, strip_ansi
from dotkit.log.types import TaskEntry, TaskStatus
from dotkit.settings import cache_dir, terminal_columns

LEVEL_STAGE = "stage"
LEVEL_INFO = "info"
LEVEL_DEBUG = "debug"
LEVEL_WARN = "warn"
LEVEL_ERROR = "error"
LEVEL_DRY_RUN = "dry_run"

_FILE_LEVELS: dict[str, int] = {
    LEVEL_STAGE: logging.INFO,
    LEVEL_INFO: logging.INFO,
    LEVEL_DEBUG: logging.DEBUG,
    LEVEL_WARN: logging.WARNING,
    LEVEL_ERROR: logging.ERROR,
    LEVEL_DRY_RUN: logging.INFO,
}

DIAG_EVENTS: dict[str, DiagEvent] = {
    LEVEL_STAGE: DiagEvent.STAGE,
    LEVEL_INFO: DiagEvent.INFO,
    LEVEL_DEBUG: DiagEvent.DEBUG,
    LEVEL_WARN: DiagEvent.WARN,
    LEVEL_ERROR: DiagEvent.ERROR,
    LEVEL_DRY_RUN: DiagEvent.DRYRUN,
}

_SUMMARY_ICONS: dict[TaskStatus, tuple[str, str]] = {
    TaskStatus.OK: ("✓", "green"),
    TaskStatus.NOT_APPLICABLE: ("·", "dim"),
    TaskStatus.SKIPPED: ("○", "yellow"),
    TaskStatus.DRY_RUN: ("~", "cyan"),
    TaskStatus.FAILED: ("✗", "red"),
}


def render_line(level: str, msg: str) -> Text:
    """Render one display message as styled text."""
    if level == LEVEL_STAGE:
        return Text.assemble(("==> ", "bold blue"), (msg, "bold"))
    if level == LEVEL_DEBUG:
        return Text(f"    {msg}", style="dim")
    if level == LEVEL_WARN:
        return Text.assemble(("warning: ", "bold yellow"), (msg, "yellow"))
    if level == LEVEL_ERROR:
        return Text.assemble(("error: ", "bold red"), (msg, "red"))
    if level == LEVEL_DRY_RUN:
        return Text.assemble(("    [dry-run] ", "cyan"), msg)
    return Text(f"    {msg}")


class Logger:
    """Run-level logger.

    Writes styled output to the console, mirrors every message to
    ``<cache>/<command>.log`` and records one ``TaskEntry`` per task for the
    closing summary. ``flush_lock`` serialises console writes so that
    buffered task output is replayed as one uninterrupted block.
    """

    def __init__(
        self,
        command: str,
        *,
        verbose: bool = False,
        console: Console | None = None,
        log_dir: Path | None = None,
        diagnostic: bool = True,
    ) -> None:
        self.command = command
        self.verbose = verbose
        self.console = console or Console(highlight=False)
        self.flush_lock = threading.RLock()
        self._entries: list[TaskEntry] = []
        self._entries_lock = threading.Lock()
        self._active: list[str] = []
        self._progress_drawn = False
        self._stage_name = "main"

        directory = log_dir or cache_dir()
        self.log_path: Path | None = None
        self._file_logger = logging.getLogger(f"dotkit.run.{command}")
        self._file_logger.setLevel(logging.DEBUG)
        self._file_logger.propagate = False
        for handler in list(self._file_logger.handlers):
            self._file_logger.removeHandler(handler)
            handler.close()
        try:
            directory.mkdir(parents=True, exist_ok=True)
            path = run_log_path(command, directory)
            handler = logging.FileHandler(path, mode="w", encoding="utf-8")
        except OSError:
            pass
        else:
            handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)-7s %(message)s"))
            self._file_logger.addHandler(handler)
            self.log_path = path

        self._diagnostic = DiagnosticLog.create(command, directory) if diagnostic else None

    @property
    def task_name(self) -> str:
        return self._stage_name

    @property
    def diagnostic(self) -> DiagnosticLog | None:
        return self._diagnostic

    def write_entry(self, level: str, msg: str) -> None:
        """Write one message to console and run log; caller holds ``flush_lock``."""
        prefix = {LEVEL_STAGE: "==> ", LEVEL_DRY_RUN: "[dry-run] "}.get(level, "")
        self._file_logger.log(_FILE_LEVELS[level], "%s%s", prefix, strip_ansi(msg))
        if level == LEVEL_DEBUG and not self.verbose:
            return
        self.console.print(render_line(level, msg))

    def _log(self, level: str, msg: str) -> None:
        if self._diagnostic is not None:
            self._diagnostic.emit(DIAG_EVENTS[level], msg, task=self._stage_name)
        with self.flush_lock:
            self.clear_progress()
            self.write_entry(level, msg)
            self.draw_progress()

    def stage(self, msg: str) -> None:
        self._stage_name = msg
        self._log(LEVEL_STAGE, msg)

    def info(self, msg: str) -> None:
        self._log(LEVEL_INFO, msg)

    def debug(self, msg: str) -> None:
        self._log(LEVEL_DEBUG, msg)

    def warn(self, msg: str) -> None:
        self._log(LEVEL_WARN, msg)

    def error(self, msg: str) -> None:
        self._log(LEVEL_ERROR, msg)

    def dry_run(self, msg: str) -> None:
        self._log(LEVEL_DRY_RUN, msg)

    def record_task(self, name: str, status: TaskStatus, message: str | None = None) -> None:
        with self._entries_lock:
            self._entries.append(TaskEntry(name=name, status=status, message=message))

    def task_entries(self) -> list[TaskEntry]:
        with self._entries_lock:
            return list(self._entries)

    def failure_count(self) -> int:
        return sum(1 for entry in self.task_entries() if entry.status is TaskStatus.FAILED)

    # Progress line for the parallel scheduler.

    def notify_task_start(self, name: str) -> None:
        with self.flush_lock:
            self._active.append(name)
            self.clear_progress()
            self.draw_progress()

    def complete_task(self, name: str) -> None:
        """Drop ``name`` from the active set and redraw; caller holds ``flush_lock``."""
        if name in self._active:
            self._active.remove(name)
        self.draw_progress()

    def active_tasks(self) -> list[str]:
        with self.flush_lock:
            return list(self._active)

    def clear_progress(self) -> None:
        if not self._progress_drawn:
            return
        self.console.file.write("\r\x1b[2K")
        self.console.file.flush()
        self._progress_drawn = False

    def draw_progress(self) -> None:
        if not self._active or not self.console.is_terminal:
            return
        line = "  ▹ " + ", ".join(self._active)
        width = terminal_columns()
        if len(line) > width:
            line = line[: width - 1] + "…"
        self.console.file.write(line)
        self.console.file.flush()
        self._progress_drawn = True

    def print_summary(self) -> None:
        entries = self.task_entries()
        with self.flush_lock:
            self.clear_progress()
            self.console.print()
            self.console.print(Text("Summary", style="bold"))
            counts = {status: 0 for status in TaskStatus}
            for entry in entries:
                counts[entry.status] += 1
                icon, style = _SUMMARY_ICONS[entry.status]
                line = Text.assemble(("  ", ""), (icon, style), (f" {entry.name}", ""))
                if entry.message:
                    line.append(f": {entry.message}", style="dim")
                self.console.print(line)
            totals = (
                f"{len(entries)} tasks: {counts[TaskStatus.OK]} ok, "
                f"{counts[TaskStatus.NOT_APPLICABLE]} n/a, {counts[TaskStatus.SKIPPED]} skipped, "
                f"{counts[TaskStatus.DRY_RUN]} dry-run, {counts[TaskStatus.FAILED]} failed"
            )
            self.console.print(Text(totals, style="bold"))
            self._file_logger.info("%s", totals)
            if self.log_path is not None:
                self.console.print(Text(f"log: {self.log_path}", style="dim"))

    def close(self) -> None:
        for handler in list(self._file_logger.handlers):
            self._file_logger.removeHandler(handler)
            handler.close()
        if self._diagnostic is not None:
            self._diagnostic.close()
