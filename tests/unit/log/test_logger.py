"""Unit tests for the run logger and buffered task output."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from dotkit.log.buffered import BufferedLog
from dotkit.log.diagnostic import DiagEvent, DiagnosticLog
from dotkit.log.logger import Logger
from dotkit.log.types import TaskEntry, TaskStatus


def test_messages_reach_console_and_run_log(logger: Logger, console_output: Callable[[], str]) -> None:
    logger.stage("Install symlinks")
    logger.info("linked 3 files")
    logger.warn("source missing")
    logger.error("boom")
    logger.dry_run("would link: ~/.bashrc")

    output = console_output()
    assert "==> Install symlinks" in output
    assert "linked 3 files" in output
    assert "warning: source missing" in output
    assert "error: boom" in output
    assert "[dry-run] would link: ~/.bashrc" in output

    assert logger.log_path is not None
    text = logger.log_path.read_text(encoding="utf-8")
    assert "==> Install symlinks" in text
    assert "[dry-run] would link: ~/.bashrc" in text


def test_debug_hidden_unless_verbose(tmp_path: Path, console) -> None:
    quiet = Logger("quiet", verbose=False, console=console, log_dir=tmp_path)
    try:
        quiet.debug("internal detail")
        assert "internal detail" not in console.file.getvalue()
        assert quiet.log_path is not None
        assert "internal detail" in quiet.log_path.read_text(encoding="utf-8")
    finally:
        quiet.close()


def test_summary_counts_each_status(logger: Logger, console_output: Callable[[], str]) -> None:
    logger.record_task("a", TaskStatus.OK)
    logger.record_task("b", TaskStatus.NOT_APPLICABLE)
    logger.record_task("c", TaskStatus.SKIPPED, "nothing declared")
    logger.record_task("d", TaskStatus.DRY_RUN)
    logger.record_task("e", TaskStatus.FAILED, "boom")
    logger.print_summary()

    output = console_output()
    assert "✓ a" in output
    assert "○ c: nothing declared" in output
    assert "✗ e: boom" in output
    assert "5 tasks: 1 ok, 1 n/a, 1 skipped, 1 dry-run, 1 failed" in output
    assert f"log: {logger.log_path}" in output
    assert logger.failure_count() == 1


def test_buffered_output_is_held_until_flush(logger: Logger, console_output: Callable[[], str]) -> None:
    buffer = BufferedLog(logger, "Install packages")
    logger.notify_task_start("Install packages")
    buffer.stage("Install packages")
    buffer.info("1 changed, 0 already ok")
    buffer.record_task("Install packages", TaskStatus.OK)

    assert "1 changed" not in console_output()
    assert len(buffer.pending) == 2
    assert logger.task_entries() == [TaskEntry("Install packages", TaskStatus.OK)]
    assert logger.active_tasks() == ["Install packages"]

    buffer.flush_and_complete("Install packages")
    output = console_output()
    assert output.index("==> Install packages") < output.index("1 changed, 0 already ok")
    assert buffer.pending == []
    assert logger.active_tasks() == []


def test_buffered_log_traces_immediately(logger: Logger) -> None:
    buffer = BufferedLog(logger, "Install packages")
    buffer.warn("pacman is slow")
    diagnostic = logger.diagnostic
    assert isinstance(diagnostic, DiagnosticLog)
    text = diagnostic.path.read_text(encoding="utf-8")
    assert "[Install packages]" in text
    assert DiagEvent.WARN.value in text
    assert "pacman is slow" in text
