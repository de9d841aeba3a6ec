"""System packages managed through pacman."""

from __future__ import annotations

from dotkit.exec import Executor
from dotkit.resources.base import (
    AlreadyCorrect,
    Applied,
    Correct,
    Missing,
    Resource,
    ResourceChange,
    ResourceState,
)


def installed_packages(executor: Executor) -> frozenset[str]:
    """Query every installed package name in one call."""
    result = executor.run("pacman", ["-Q"])
    names = (line.split(maxsplit=1)[0] for line in result.stdout.splitlines() if line.strip())
    return frozenset(names)


class PackageResource(Resource):
    def __init__(self, name: str, executor: Executor, installed: frozenset[str] | None = None) -> None:
        self.name = name
        self.executor = executor
        self.installed = installed

    def description(self) -> str:
        return self.name

    def current_state(self) -> ResourceState:
        if self.installed is not None:
            return state_from_installed(self.name, self.installed)
        result = self.executor.run_unchecked("pacman", ["-Q", self.name])
        return Correct() if result.success else Missing()

    def apply(self) -> ResourceChange:
        if self.installed is not None and self.name in self.installed:
            return AlreadyCorrect()
        self.executor.run("sudo", ["pacman", "-S", "--needed", "--noconfirm", self.name])
        return Applied()


def state_from_installed(name: str, installed: frozenset[str]) -> ResourceState:
    return Correct() if name in installed else Missing()


def batch_install_packages(names: list[str], executor: Executor) -> None:
    """Install every name in one pacman transaction.

    pacman holds an exclusive database lock, so installs cannot run
    side by side.
    """
    if not names:
        return
    executor.run("sudo", ["pacman", "-S", "--needed", "--noconfirm", *names])
