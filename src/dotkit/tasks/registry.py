"""Ordered task lists for each command."""

from __future__ import annotations

from dotkit.tasks.base import Task
from dotkit.tasks.chmod import ApplyFilePermissions
from dotkit.tasks.git_config import ConfigureGit
from dotkit.tasks.git_hooks import InstallGitHooks, UninstallGitHooks
from dotkit.tasks.packages import InstallPackages
from dotkit.tasks.symlinks import InstallSymlinks, UninstallSymlinks
from dotkit.tasks.systemd import ConfigureSystemdUnits
from dotkit.tasks.update import ReloadConfig, UpdateRepository
from dotkit.tasks.vscode import InstallVsCodeExtensions


def all_install_tasks() -> list[Task]:
    return [
        UpdateRepository(),
        ReloadConfig(),
        InstallGitHooks(),
        InstallPackages(),
        InstallSymlinks(),
        ApplyFilePermissions(),
        ConfigureSystemdUnits(),
        ConfigureGit(),
        InstallVsCodeExtensions(),
    ]


def all_uninstall_tasks() -> list[Task]:
    return [
        UninstallSymlinks(),
        UninstallGitHooks(),
    ]
