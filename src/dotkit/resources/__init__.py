"""Declared units of system state and their reconciliation contract."""

from dotkit.resources.base import (
    AlreadyCorrect,
    Applied,
    Correct,
    Incorrect,
    Invalid,
    Missing,
    Resource,
    ResourceChange,
    ResourceState,
    Skipped,
)
from dotkit.resources.chmod import ChmodResource
from dotkit.resources.git_config import GitConfigResource
from dotkit.resources.package import PackageResource, batch_install_packages, installed_packages
from dotkit.resources.symlink import SymlinkResource
from dotkit.resources.systemd_unit import SystemdUnitResource
from dotkit.resources.vscode_extension import ExtensionResource, find_code_command, installed_extensions

__all__ = [
    "AlreadyCorrect",
    "Applied",
    "ChmodResource",
    "Correct",
    "ExtensionResource",
    "GitConfigResource",
    "Incorrect",
    "Invalid",
    "Missing",
    "PackageResource",
    "Resource",
    "ResourceChange",
    "ResourceState",
    "Skipped",
    "SymlinkResource",
    "SystemdUnitResource",
    "find_code_command",
    "installed_extensions",
    "batch_install_packages",
    "installed_packages",
]
