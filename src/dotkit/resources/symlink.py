"""Symlink from the dotfiles tree into the home directory."""

from __future__ import annotations

import os
import shutil
from pathlib import Path

from dotkit.errors import PermissionDeniedError, ResourceError
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
)


class SymlinkResource(Resource):
    def __init__(self, source: Path, target: Path) -> None:
        self.source = source
        self.target = target

    def description(self) -> str:
        return f"{self.target} -> {self.source}"

    def current_state(self) -> ResourceState:
        if not self.source.exists():
            return Invalid(f"source does not exist: {self.source}")
        if self.target.is_dir() and not self.target.is_symlink():
            return Invalid(f"target is a directory: {self.target}")
        if self.target.is_symlink():
            current = Path(os.readlink(self.target))
            # Relative links resolve against the directory holding the link.
            if _same_path(self.target.parent / current, self.source):
                return Correct()
            return Incorrect(f"points to {current}")
        if self.target.exists():
            return Incorrect("target is a regular file")
        return Missing()

    def apply(self) -> ResourceChange:
        if isinstance(self.current_state(), Correct):
            return AlreadyCorrect()
        try:
            self.target.parent.mkdir(parents=True, exist_ok=True)
            if self.target.is_symlink() or self.target.is_file():
                self.target.unlink()
            self.target.symlink_to(self.source, target_is_directory=self.source.is_dir())
        except PermissionError as exc:
            raise PermissionDeniedError(str(self.target)) from exc
        except OSError as exc:
            raise ResourceError(f"failed to link {self.target}: {exc}") from exc
        return Applied()

    def remove(self) -> ResourceChange:
        """Replace the link with a real copy of the source."""
        if not self.target.is_symlink():
            return AlreadyCorrect()
        try:
            self.target.unlink()
            if self.source.is_dir():
                shutil.copytree(self.source, self.target, symlinks=True)
            else:
                shutil.copy2(self.source, self.target)
        except PermissionError as exc:
            raise PermissionDeniedError(str(self.target)) from exc
        except OSError as exc:
            raise ResourceError(f"failed to unlink {self.target}: {exc}") from exc
        return Applied()


def _same_path(link: Path, source: Path) -> bool:
    if link == source:
        return True
    try:
        return link.resolve() == source.resolve()
    except OSError:
        return False
