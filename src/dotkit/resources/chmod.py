"""Permission mode on a file or directory tree."""

from __future__ import annotations

import os
import stat
from pathlib import Path

from dotkit.errors import PermissionDeniedError, ResourceError
from dotkit.resources.base import (
    AlreadyCorrect,
    Applied,
    Correct,
    Incorrect,
    Invalid,
    Resource,
    ResourceChange,
    ResourceState,
)


class ChmodResource(Resource):
    def __init__(self, target: Path, mode: int) -> None:
        self.target = target
        self.mode = mode

    def description(self) -> str:
        return f"{self.target} ({self.mode:o})"

    def current_state(self) -> ResourceState:
        if not self.target.exists():
            return Invalid(f"target does not exist: {self.target}")
        current = self._mode_of(self.target)
        if current == self.mode:
            return Correct()
        return Incorrect(f"mode {current:o}")

    def apply(self) -> ResourceChange:
        if isinstance(self.current_state(), Correct):
            return AlreadyCorrect()
        try:
            if self.target.is_dir() and not self.target.is_symlink():
                # Bottom-up so restrictive directory modes never block the walk.
                for dirpath, dirnames, filenames in os.walk(self.target, topdown=False):
                    for name in [*filenames, *dirnames]:
                        child = Path(dirpath) / name
                        if not child.is_symlink():
                            os.chmod(child, self.mode)
            os.chmod(self.target, self.mode)
        except PermissionError as exc:
            raise PermissionDeniedError(str(self.target)) from exc
        except OSError as exc:
            raise ResourceError(f"failed to chmod {self.target}: {exc}") from exc
        return Applied()

    @staticmethod
    def _mode_of(path: Path) -> int:
        return stat.S_IMODE(path.stat().st_mode) & 0o7777
