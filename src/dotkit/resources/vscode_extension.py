"""VS Code extensions installed through the ``code`` CLI."""

from __future__ import annotations

from dotkit.exec import Executor
from dotkit.resources.base import (
    Applied,
    Resource,
    ResourceChange,
    ResourceState,
    Skipped,
)
from dotkit.resources.package import state_from_installed

CODE_COMMANDS: tuple[str, ...] = ("code-insiders", "code")


def find_code_command(executor: Executor) -> str | None:
    """Return the first available VS Code CLI, preferring insiders."""
    for command in CODE_COMMANDS:
        if executor.which(command):
            return command
    return None


def installed_extensions(code_cmd: str, executor: Executor) -> frozenset[str]:
    """Lowercased ids of every installed extension."""
    result = executor.run(code_cmd, ["--list-extensions"])
    return frozenset(line.strip().lower() for line in result.stdout.splitlines() if line.strip())


class ExtensionResource(Resource):
    def __init__(self, extension_id: str, code_cmd: str, executor: Executor, installed: frozenset[str]) -> None:
        self.extension_id = extension_id.lower()
        self.code_cmd = code_cmd
        self.executor = executor
        self.installed = installed

    def description(self) -> str:
        return self.extension_id

    def current_state(self) -> ResourceState:
        return state_from_installed(self.extension_id, self.installed)

    def apply(self) -> ResourceChange:
        result = self.executor.run_unchecked(
            self.code_cmd, ["--install-extension", self.extension_id, "--force"]
        )
        if not result.success:
            detail = (result.stderr or result.stdout).strip() or f"exit {result.returncode}"
            return Skipped(f"{self.code_cmd} --install-extension failed: {detail}")
        return Applied()
