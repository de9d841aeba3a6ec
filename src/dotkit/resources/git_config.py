"""Global git configuration values."""

from __future__ import annotations

from dotkit.exec import ExecError, Executor
from dotkit.resources.base import (
    Applied,
    Correct,
    Incorrect,
    Missing,
    Resource,
    ResourceChange,
    ResourceState,
)

# `git config --get` exits 1 when the key is unset.
GIT_CONFIG_KEY_MISSING = 1


class GitConfigResource(Resource):
    def __init__(self, key: str, value: str, executor: Executor) -> None:
        self.key = key
        self.value = value
        self.executor = executor

    def description(self) -> str:
        return f"{self.key} = {self.value}"

    def current_state(self) -> ResourceState:
        result = self.executor.run_unchecked("git", ["config", "--global", "--get", self.key])
        if result.returncode == GIT_CONFIG_KEY_MISSING:
            return Missing()
        if not result.success:
            raise ExecError(result)
        current = result.stdout.strip()
        if current == self.value:
            return Correct()
        return Incorrect(current)

    def apply(self) -> ResourceChange:
        self.executor.run("git", ["config", "--global", self.key, self.value])
        return Applied()
