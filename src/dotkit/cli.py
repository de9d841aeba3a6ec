"""dotkit command line."""

from __future__ import annotations

from pathlib import Path

import typer

from dotkit import __version__
from dotkit.commands.install import run_install
from dotkit.commands.runner import RunOptions
from dotkit.commands.uninstall import run_uninstall
from dotkit.errors import DotkitError
from dotkit.settings import parallel_enabled, verbose_enabled

app = typer.Typer(
    name="dotkit",
    help="Declarative dotfiles: link, install and configure from conf/dotkit.yaml.",
    no_args_is_help=True,
)

ROOT_OPTION = typer.Option(
    None,
    "--root",
    help="Dotfiles root (defaults to $DOTKIT_ROOT, then the current directory).",
)
DRY_RUN_OPTION = typer.Option(False, "--dry-run", "-d", help="Show what would change without changing it.")
PARALLEL_OPTION = typer.Option(
    None,
    "--parallel/--sequential",
    help="Run independent tasks concurrently (default from $DOTKIT_PARALLEL, on).",
)
VERBOSE_OPTION = typer.Option(False, "--verbose", "-v", help="Show debug output.")


def _version_option_callback(value: bool) -> None:
    """Handle eager --version option."""
    if value:
        typer.echo(f"dotkit {__version__}")
        raise typer.Exit()


@app.callback()
def _cli_callback(
    version: bool = typer.Option(
        False,
        "--version",
        help="Show dotkit version and exit.",
        is_eager=True,
        callback=_version_option_callback,
    ),
) -> None:
    """Declarative dotfiles and system configuration."""
    _ = version


def _options(root: Path | None, dry_run: bool, parallel: bool | None, verbose: bool) -> RunOptions:
    return RunOptions(
        root=root,
        dry_run=dry_run,
        parallel=parallel_enabled() if parallel is None else parallel,
        verbose=verbose or verbose_enabled(),
    )


def _split_terms(values: list[str]) -> list[str]:
    return [term for value in values for term in value.split(",") if term.strip()]


@app.command("install")
def install(
    root: Path | None = ROOT_OPTION,
    dry_run: bool = DRY_RUN_OPTION,
    parallel: bool | None = PARALLEL_OPTION,
    verbose: bool = VERBOSE_OPTION,
    skip: list[str] = typer.Option([], "--skip", help="Skip tasks whose name contains TEXT (repeatable, comma list)."),
    only: list[str] = typer.Option([], "--only", help="Run only tasks whose name contains TEXT (repeatable, comma list)."),
) -> None:
    """Converge the system to the declarations."""
    try:
        run_install(
            _options(root, dry_run, parallel, verbose),
            skip=_split_terms(skip),
            only=_split_terms(only),
        )
    except DotkitError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(1) from exc


@app.command("uninstall")
def uninstall(
    root: Path | None = ROOT_OPTION,
    dry_run: bool = DRY_RUN_OPTION,
    parallel: bool | None = PARALLEL_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Replace symlinks with real copies and remove git hooks."""
    try:
        run_uninstall(_options(root, dry_run, parallel, verbose))
    except DotkitError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(1) from exc


@app.command("version")
def version_cmd() -> None:
    """Print the dotkit version."""
    typer.echo(f"dotkit {__version__}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
