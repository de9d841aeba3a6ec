"""Git hook linked from the dotfiles tree into ``.git/hooks``."""

from __future__ import annotations

from pathlib import Path

from dotkit.errors import ResourceError
from dotkit.resources.base import AlreadyCorrect, Applied, ResourceChange
from dotkit.resources.symlink import SymlinkResource


def hook_sources(root: Path) -> list[Path]:
    hooks_dir = root / "hooks"
    if not hooks_dir.is_dir():
        return []
    return sorted(path for path in hooks_dir.iterdir() if path.is_file())


class GitHookResource(SymlinkResource):
    def __init__(self, source: Path, root: Path) -> None:
        super().__init__(source, root / ".git" / "hooks" / source.name)

    def description(self) -> str:
        return f"git hook {self.source.name}"

    def remove(self) -> ResourceChange:
        """Delete the link; hooks are not materialised."""
        if not self.target.is_symlink():
            return AlreadyCorrect()
        try:
            self.target.unlink()
        except OSError as exc:
            raise ResourceError(f"failed to remove {self.target}: {exc}") from exc
        return Applied()
