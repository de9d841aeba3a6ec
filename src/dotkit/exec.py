"""Command runners used by resources and tasks."""

from __future__ import annotations

import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from dotkit.errors import ExecutionFailedError


@dataclass(frozen=True)
class ExecResult:
    """Result envelope for subprocess execution."""

    argv: tuple[str, ...]
    cwd: Path | None
    returncode: int
    stdout: str
    stderr: str

    @property
    def success(self) -> bool:
        return self.returncode == 0


class ExecError(ExecutionFailedError):
    """Raised when a command returns non-zero in check mode."""

    def __init__(self, result: ExecResult):
        rendered = " ".join(result.argv)
        detail = (result.stderr or result.stdout).strip()
        super().__init__(
            result.argv[0],
            result.returncode,
            result.stderr,
            message=f"command failed ({result.returncode}): {rendered}\n{detail}".rstrip(),
        )
        self.result = result


class Executor(Protocol):
    """Capability to run external programs."""

    def run(self, program: str, args: list[str], *, cwd: Path | None = None) -> ExecResult: ...

    def run_unchecked(self, program: str, args: list[str], *, cwd: Path | None = None) -> ExecResult: ...

    def which(self, program: str) -> bool: ...


class SystemExecutor:
    """Executor backed by ``subprocess``."""

    def run(self, program: str, args: list[str], *, cwd: Path | None = None) -> ExecResult:
        result = self.run_unchecked(program, args, cwd=cwd)
        if not result.success:
            raise ExecError(result)
        return result

    def run_unchecked(self, program: str, args: list[str], *, cwd: Path | None = None) -> ExecResult:
        argv = [program, *args]
        try:
            completed = subprocess.run(argv, cwd=cwd, capture_output=True, text=True, check=False)
        except FileNotFoundError as exc:
            raise ExecutionFailedError(program, None, f"{program}: command not found") from exc
        return ExecResult(
            argv=tuple(argv),
            cwd=cwd.resolve() if cwd is not None else None,
            returncode=completed.returncode,
            stdout=completed.stdout,
            stderr=completed.stderr,
        )

    def which(self, program: str) -> bool:
        return shutil.which(program) is not None
