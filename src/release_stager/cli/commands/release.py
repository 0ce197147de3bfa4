"""Implementation of the 'infer' and 'release' commands.

Both commands run the release pipeline; 'infer' stops after resolving
the version, 'release' goes on to tag and push.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from rich.panel import Panel
from rich.table import Table

from release_stager.config import load_config, load_properties
from release_stager.core.release import ReleaseOutcome, ReleasePipeline
from release_stager.core.stage import Stage, parse_stage
from release_stager.exceptions import ConfigurationError, ReleaseStagerError

if TYPE_CHECKING:
    from rich.console import Console


def _validate_stages(stages: list[str]) -> None:
    for name in stages:
        if parse_stage(name) is None:
            expected = ", ".join(stage.value for stage in Stage)
            raise ConfigurationError(f"Unknown stage '{name}', expected one of: {expected}")


def _build_pipeline(path: str | None, property_options: list[str]) -> ReleasePipeline:
    project_path = Path(path) if path else Path.cwd()
    return ReleasePipeline(
        project_path,
        properties=load_properties(property_options),
        config=load_config(project_path),
    )


def _summary(outcome: ReleaseOutcome) -> Table:
    table = Table(show_header=False, box=None)
    table.add_column(style="dim")
    table.add_column()
    table.add_row("Version", f"[green]{outcome.version}[/]")
    table.add_row("Stage", outcome.stage or "[dim]none[/]")
    table.add_row("Status", outcome.status or "[dim]integration[/]")
    table.add_row("Strategy", outcome.strategy_name or "[dim]none[/]")
    if outcome.tag_name:
        table.add_row("Tag", f"[cyan]{outcome.tag_name}[/]")
    if outcome.branch_name:
        table.add_row("Branch", f"[cyan]{outcome.branch_name}[/]")
    return table


def run_infer(
    path: str | None,
    stages: list[str],
    property_options: list[str],
    quiet: bool,
    console: Console,
    err_console: Console,
) -> None:
    """Run the infer command.

    Args:
        path: Optional path to project directory
        stages: Requested stage names
        property_options: Build properties as ``key=value``
        quiet: Print only the version
        console: Console for standard output
        err_console: Console for error output
    """
    try:
        _validate_stages(stages)
        outcome = _build_pipeline(path, property_options).infer(stages)
    except ReleaseStagerError as e:
        err_console.print(f"[red]Error:[/] {e}")
        raise SystemExit(1) from e

    if quiet:
        console.print(outcome.version, highlight=False)
        return

    console.print(Panel(_summary(outcome), title="[cyan]Inferred Version[/]", border_style="cyan"))


def run_release(
    path: str | None,
    stages: list[str],
    property_options: list[str],
    dry_run: bool,
    console: Console,
    err_console: Console,
) -> None:
    """Run the release command.

    Args:
        path: Optional path to project directory
        stages: Requested stage names
        property_options: Build properties as ``key=value``
        dry_run: Resolve and check without tagging or pushing
        console: Console for standard output
        err_console: Console for error output
    """
    try:
        _validate_stages(stages)
        pipeline = _build_pipeline(path, property_options)
        outcome = pipeline.run(stages, execute=not dry_run)
    except ReleaseStagerError as e:
        err_console.print(f"[red]Error:[/] {e}")
        raise SystemExit(1) from e

    if not outcome.release_enabled:
        console.print(
            Panel(
                _summary(outcome),
                title="[yellow]Release Disabled[/]",
                border_style="yellow",
            )
        )
        console.print("[dim]Tagging and pushing were skipped for this build.[/]")
        return

    if dry_run:
        console.print(Panel(_summary(outcome), title="[yellow]Dry Run Preview[/]", border_style="yellow"))
        console.print("\n[dim]Run without [cyan]--dry-run[/] to tag and push.[/]")
        return

    if outcome.tag_name is None:
        console.print(Panel(_summary(outcome), title="[cyan]No Tag Required[/]", border_style="cyan"))
        return

    console.print(Panel(_summary(outcome), title="[green]Release Complete[/]", border_style="green"))
