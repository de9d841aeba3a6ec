"""Environment-driven runtime settings."""

from __future__ import annotations

import os
from pathlib import Path


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


def parallel_enabled() -> bool:
    return _flag("DOTKIT_PARALLEL", "1")


def verbose_enabled() -> bool:
    return _flag("DOTKIT_VERBOSE", "0")


def env_root() -> Path | None:
    value = os.getenv("DOTKIT_ROOT", "").strip()
    return Path(value).expanduser() if value else None


def home_dir() -> Path:
    return Path(os.getenv("HOME") or Path.home())


def cache_dir() -> Path:
    """Return the dotkit cache directory (``$XDG_CACHE_HOME/dotkit``)."""
    base = os.getenv("XDG_CACHE_HOME", "").strip()
    root = Path(base) if base else home_dir() / ".cache"
    return root / "dotkit"


def terminal_columns() -> int:
    try:
        return max(int(os.getenv("COLUMNS", "80")), 10)
    except ValueError:
        return 80
