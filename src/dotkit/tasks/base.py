"""Task identity, contract and results."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dotkit.tasks.context import Context


class TaskId(str, Enum):
    """Registered task kinds; the vertex identity of the dependency graph."""

    UPDATE_REPOSITORY = "update-repository"
    RELOAD_CONFIG = "reload-config"
    INSTALL_PACKAGES = "install-packages"
    INSTALL_SYMLINKS = "install-symlinks"
    APPLY_FILE_PERMISSIONS = "apply-file-permissions"
    INSTALL_GIT_HOOKS = "install-git-hooks"
    INSTALL_VSCODE_EXTENSIONS = "install-vscode-extensions"
    CONFIGURE_SYSTEMD_UNITS = "configure-systemd-units"
    CONFIGURE_GIT = "configure-git"
    UNINSTALL_SYMLINKS = "uninstall-symlinks"
    UNINSTALL_GIT_HOOKS = "uninstall-git-hooks"


@dataclass(frozen=True)
class TaskOk:
    """Task completed and changed (or confirmed) system state."""


@dataclass(frozen=True)
class TaskSkipped:
    reason: str


@dataclass(frozen=True)
class TaskDryRun:
    """Task only previewed its changes."""


TaskResult = TaskOk | TaskSkipped | TaskDryRun


class Task(ABC):
    """A named unit of work with dependency edges on other task kinds."""

    task_id: TaskId
    name: str
    dependencies: frozenset[TaskId] = frozenset()

    def should_run(self, ctx: Context) -> bool:
        return True

    @abstractmethod
    def run(self, ctx: Context) -> TaskResult:
        """Do the work; raising marks the task failed."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.task_id.value}>"
