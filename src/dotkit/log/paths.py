"""Log file locations and text cleanup."""

from __future__ import annotations

import re
from pathlib import Path

from dotkit.settings import cache_dir

_ANSI_RE = re.compile(r"\x1b\[[0-9;?]*[A-Za-z]")


def strip_ansi(text: str) -> str:
    return _ANSI_RE.sub("", text)


def run_log_path(command: str, directory: Path | None = None) -> Path:
    """Return ``<cache>/<command>.log``."""
    return (directory or cache_dir()) / f"{command}.log"


def diagnostic_log_path(command: str, directory: Path | None = None) -> Path:
    """Return ``<cache>/<command>.diag.log``."""
    return (directory or cache_dir()) / f"{command}.diag.log"
