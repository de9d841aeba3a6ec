"""Pytest configuration and fixtures for dotkit tests."""

from __future__ import annotations

import io
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
from rich.console import Console

from dotkit.config.store import ConfigStore
from dotkit.config.types import Config
from dotkit.exec import ExecError, ExecResult
from dotkit.log.logger import Logger
from dotkit.platform import OS_LINUX, Platform
from dotkit.tasks.context import Context


class StubExecutor:
    """Executor double answering from a table keyed by argv."""

    def __init__(
        self,
        outputs: dict[tuple[str, ...], ExecResult] | None = None,
        available: tuple[str, ...] = (),
    ) -> None:
        self.outputs = outputs or {}
        self.available = set(available)
        self.calls: list[tuple[str, ...]] = []

    def run_unchecked(self, program: str, args: list[str], *, cwd: Path | None = None) -> ExecResult:
        _ = cwd
        key = (program, *args)
        self.calls.append(key)
        if key not in self.outputs:
            raise AssertionError(f"missing stub for argv: {key}")
        return self.outputs[key]

    def run(self, program: str, args: list[str], *, cwd: Path | None = None) -> ExecResult:
        result = self.run_unchecked(program, args, cwd=cwd)
        if not result.success:
            raise ExecError(result)
        return result

    def which(self, program: str) -> bool:
        return program in self.available


def exec_result(argv: tuple[str, ...], stdout: str = "", stderr: str = "", code: int = 0) -> ExecResult:
    return ExecResult(argv=argv, cwd=None, returncode=code, stdout=stdout, stderr=stderr)


@pytest.fixture
def console() -> Console:
    return Console(file=io.StringIO(), width=200, force_terminal=False, color_system=None, highlight=False)


@pytest.fixture
def logger(tmp_path: Path, console: Console) -> Iterator[Logger]:
    log = Logger("test", verbose=True, console=console, log_dir=tmp_path / "cache")
    yield log
    log.close()


@pytest.fixture
def console_output(console: Console) -> Callable[[], str]:
    def read() -> str:
        assert isinstance(console.file, io.StringIO)
        return console.file.getvalue()

    return read


@pytest.fixture
def stub_executor() -> type[StubExecutor]:
    return StubExecutor


@pytest.fixture
def stub_result() -> Callable[..., ExecResult]:
    return exec_result


@pytest.fixture
def make_context(tmp_path: Path, logger: Logger) -> Callable[..., Context]:
    def build(
        *,
        config: Config | None = None,
        dry_run: bool = False,
        parallel: bool = False,
        executor: StubExecutor | None = None,
        platform: Platform | None = None,
    ) -> Context:
        home = tmp_path / "home"
        home.mkdir(exist_ok=True)
        return Context(
            config=ConfigStore(config or Config(root=tmp_path / "dotfiles")),
            platform=platform or Platform(os=OS_LINUX),
            log=logger,
            executor=executor or StubExecutor(),
            home=home,
            dry_run=dry_run,
            parallel=parallel,
        )

    return build
