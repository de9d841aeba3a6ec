"""Host platform facts."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path

OS_LINUX = "linux"
OS_MACOS = "macos"
OS_WINDOWS = "windows"


@dataclass(frozen=True)
class Platform:
    """Operating system and distribution flags for the current host."""

    os: str
    is_arch: bool = False

    @property
    def is_windows(self) -> bool:
        return self.os == OS_WINDOWS

    @classmethod
    def detect(cls, os_release: Path = Path("/etc/os-release")) -> Platform:
        if sys.platform.startswith("win"):
            return cls(os=OS_WINDOWS)
        if sys.platform == "darwin":
            return cls(os=OS_MACOS)
        return cls(os=OS_LINUX, is_arch=_is_arch(os_release))


def _is_arch(os_release: Path) -> bool:
    try:
        text = os_release.read_text(encoding="utf-8")
    except OSError:
        return False
    for line in text.splitlines():
        key, _, value = line.partition("=")
        if key in {"ID", "ID_LIKE"} and "arch" in value.strip().strip('"').split():
            return True
    return False
