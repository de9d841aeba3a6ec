"""Declarations: typed records, YAML loader and the shared store."""

from dotkit.config.loader import config_path_for_root, load_config, validate
from dotkit.config.store import ConfigStore
from dotkit.config.types import (
    ChmodEntry,
    Config,
    ExtensionEntry,
    GitSettingEntry,
    PackageEntry,
    SymlinkEntry,
    SystemdUnitEntry,
    compute_target,
)

__all__ = [
    "ChmodEntry",
    "Config",
    "ConfigStore",
    "ExtensionEntry",
    "GitSettingEntry",
    "PackageEntry",
    "SymlinkEntry",
    "SystemdUnitEntry",
    "compute_target",
    "config_path_for_root",
    "load_config",
    "validate",
]
