"""Systemd user units enabled through ``systemctl --user``."""

from __future__ import annotations

from dotkit.exec import Executor
from dotkit.resources.base import (
    Applied,
    Correct,
    Missing,
    Resource,
    ResourceChange,
    ResourceState,
    Skipped,
)


class SystemdUnitResource(Resource):
    def __init__(self, name: str, executor: Executor) -> None:
        self.name = name
        self.executor = executor

    def description(self) -> str:
        return self.name

    def current_state(self) -> ResourceState:
        result = self.executor.run_unchecked("systemctl", ["--user", "is-enabled", self.name])
        return Correct() if result.success else Missing()

    def apply(self) -> ResourceChange:
        result = self.executor.run_unchecked("systemctl", ["--user", "enable", "--now", self.name])
        if not result.success:
            return Skipped(f"failed to enable: {result.stderr.strip()}")
        return Applied()
