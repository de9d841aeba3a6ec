"""Per-pass reconciliation counters."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from dotkit.tasks.base import TaskDryRun, TaskOk, TaskResult

if TYPE_CHECKING:
    from dotkit.tasks.context import Context


@dataclass(frozen=True)
class TaskStats:
    """Counts of changed, already-correct and skipped resources.

    ``TaskStats()`` is the identity for ``+``.
    """

    changed: int = 0
    already_ok: int = 0
    skipped: int = 0

    def __add__(self, other: TaskStats) -> TaskStats:
        if not isinstance(other, TaskStats):
            return NotImplemented
        return TaskStats(
            changed=self.changed + other.changed,
            already_ok=self.already_ok + other.already_ok,
            skipped=self.skipped + other.skipped,
        )

    @property
    def total(self) -> int:
        return self.changed + self.already_ok + self.skipped

    def summary(self, dry_run: bool) -> str:
        verb = "would change" if dry_run else "changed"
        text = f"{self.changed} {verb}, {self.already_ok} already ok"
        if self.skipped > 0:
            text += f", {self.skipped} skipped"
        return text

    def finish(self, ctx: Context) -> TaskResult:
        ctx.log.info(self.summary(ctx.dry_run))
        return TaskDryRun() if ctx.dry_run else TaskOk()
