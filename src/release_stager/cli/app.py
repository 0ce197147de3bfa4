"""Typer application for release-stager."""

from __future__ import annotations

import logging
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from release_stager import __version__

app = typer.Typer(
    name="release-stager",
    help="Infer, check and tag semantic releases from git history.",
    no_args_is_help=True,
    add_completion=False,
)

console = Console()
err_console = Console(stderr=True)

StagesArg = Annotated[
    list[str] | None,
    typer.Argument(help="Requested stage: snapshot, devSnapshot, candidate or final."),
]
PathOption = Annotated[str | None, typer.Option("--path", help="Project directory (defaults to cwd).")]
PropertyOption = Annotated[
    list[str] | None,
    typer.Option("--property", "-P", help="Build property as key=value, e.g. -P release.version=1.2.3."),
]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging.")]


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"release-stager {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option("--version", callback=_version_callback, is_eager=True, help="Show version and exit."),
    ] = None,
) -> None:
    """release-stager command line."""


@app.command()
def infer(
    stages: StagesArg = None,
    path: PathOption = None,
    properties: PropertyOption = None,
    quiet: Annotated[bool, typer.Option("--quiet", "-q", help="Print only the version.")] = False,
    verbose: VerboseOption = False,
) -> None:
    """Show the version the requested stage would release."""
    from release_stager.cli.commands.release import run_infer

    _configure_logging(verbose)
    run_infer(path, stages or [], properties or [], quiet, console, err_console)


@app.command()
def release(
    stages: StagesArg = None,
    path: PathOption = None,
    properties: PropertyOption = None,
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Check and resolve without tagging.")] = False,
    verbose: VerboseOption = False,
) -> None:
    """Check preconditions, resolve the version, then tag and push."""
    from release_stager.cli.commands.release import run_release

    _configure_logging(verbose)
    run_release(path, stages or [], properties or [], dry_run, console, err_console)
