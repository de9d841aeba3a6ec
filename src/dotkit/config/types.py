"""Typed declaration records loaded from ``conf/dotkit.yaml``."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

SPECIAL_TARGET_PREFIXES: tuple[str, ...] = ("Documents/", "AppData/")


@dataclass(frozen=True)
class SymlinkEntry:
    """A file under ``<root>/symlinks`` linked into the home directory."""

    source: str
    target: str | None = None

    def source_path(self, root: Path) -> Path:
        return root / "symlinks" / self.source

    def target_path(self, home: Path) -> Path:
        if self.target:
            return Path(self.target).expanduser() if self.target.startswith("~") else home / self.target
        return compute_target(home, self.source)


@dataclass(frozen=True)
class ChmodEntry:
    """Permission mode for a path relative to the home directory."""

    path: str
    mode: int

    def target_path(self, home: Path) -> Path:
        return Path(self.path).expanduser() if self.path.startswith("~") else home / self.path


@dataclass(frozen=True)
class PackageEntry:
    name: str
    manager: str = "pacman"


@dataclass(frozen=True)
class ExtensionEntry:
    id: str


@dataclass(frozen=True)
class SystemdUnitEntry:
    """A systemd user unit to enable and start."""

    name: str


@dataclass(frozen=True)
class GitSettingEntry:
    key: str
    value: str


@dataclass(frozen=True)
class Config:
    """Immutable snapshot of every declaration."""

    root: Path
    symlinks: tuple[SymlinkEntry, ...] = ()
    chmod: tuple[ChmodEntry, ...] = ()
    packages: tuple[PackageEntry, ...] = ()
    vscode_extensions: tuple[ExtensionEntry, ...] = ()
    systemd_units: tuple[SystemdUnitEntry, ...] = ()
    git_config: tuple[GitSettingEntry, ...] = ()
    path: Path | None = field(default=None, compare=False)


def compute_target(home: Path, source: str) -> Path:
    """Map a symlink source name to its location under ``home``.

    ``bashrc`` becomes ``~/.bashrc``; sources under ``Documents/`` or
    ``AppData/`` keep their name.
    """
    normalized = source.replace("\\", "/")
    if normalized.startswith(SPECIAL_TARGET_PREFIXES):
        return home / normalized
    return home / f".{normalized}"
