"""CLI entry point for the visual regression pipeline."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from src.errors import VisualRegressionError
from src.models.config import Settings, SiteConfig, default_site_config
from src.orchestrator import Orchestrator

console = Console()

DEFAULT_CONFIG = "configs/default.json"


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


def _load_config(config: str) -> SiteConfig:
    try:
        return SiteConfig.load(config)
    except VisualRegressionError as e:
        console.print(f"[red]{e}[/red]")
        console.print("Run 'visreg init' to create an example config.")
        sys.exit(1)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """Visual regression testing: capture baselines, compare, review."""
    setup_logging(verbose)


@cli.command()
@click.option("--config", "-c", default=DEFAULT_CONFIG, help="Site config file path")
@click.option("--baseline", "-b", is_flag=True, help="Establish reference images instead of comparing")
@click.option("--root", "-r", default=".", type=click.Path(file_okay=False), help="Directory output/ is written under")
@click.option("--headed", is_flag=True, help="Show the browser window")
@click.option("--timeout", default=10000, show_default=True, help="Wait-for-element timeout (ms)")
@click.option("--tolerance", default=0, show_default=True, help="Per-channel pixel tolerance (0-255)")
@click.option("--keep-going", is_flag=True, help="On a hard error skip the viewport instead of the whole run")
def run(config: str, baseline: bool, root: str, headed: bool, timeout: int,
        tolerance: int, keep_going: bool) -> None:
    """Capture the configured site and compare it against its baseline."""
    site = _load_config(config)
    settings = Settings.localized(
        Path(root).resolve(),
        baseline_mode=baseline,
        headless=not headed,
        selector_timeout_ms=timeout,
        comparison_tolerance=tolerance,
        abort_on_error=not keep_going,
    )

    try:
        outcome = Orchestrator(site, settings).run()
    except VisualRegressionError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)

    result = outcome.run_result
    status = "[red]Failed[/red]" if not outcome.succeeded else "[bold green]Complete[/bold green]"
    console.print(f"\nRun {status}")
    table = Table(title=f"{site.label} ({'baseline' if baseline else 'comparison'})")
    table.add_column("Metric", style="bold")
    table.add_column("Value")
    table.add_row("Duration", f"{outcome.duration}s")
    table.add_row("Captures", str(len(result.analysis)))
    table.add_row("Warnings", f"[yellow]{len(result.warnings)}[/yellow]")
    table.add_row("Errors", f"[red]{len(result.errors)}[/red]")
    if not baseline:
        table.add_row("Diffs", str(len(outcome.diffs)))
        table.add_row("Pages to review", str(outcome.reviewed_paths))
    console.print(table)

    for error in result.errors:
        console.print(f"[red]{error}[/red]")
    for fmt, path in outcome.reports.items():
        console.print(f"  {fmt.upper()} report: [blue]{path}[/blue]")

    if not outcome.succeeded:
        sys.exit(1)


@cli.command()
@click.option("--config", "-c", default=DEFAULT_CONFIG, help="Site config file path")
def validate(config: str) -> None:
    """Check a site config without capturing anything."""
    site = _load_config(config)
    console.print(
        f"[green]Valid:[/green] {site.label}: {len(site.viewports)} viewports, "
        f"{len(site.paths)} paths, {len(site.actions)} actions, {len(site.shell)} shell selectors"
    )


@cli.command()
@click.option("--path", "-p", default=DEFAULT_CONFIG, help="Where to write the config")
@click.option("--force", is_flag=True, help="Overwrite an existing file")
def init(path: str, force: bool) -> None:
    """Create an example site configuration."""
    config_path = Path(path)
    if config_path.exists() and not force:
        if not click.confirm(f"{config_path} already exists. Overwrite?"):
            return

    default_site_config().save(config_path)
    console.print(f"[green]Created {config_path}[/green]")
    console.print("\nEstablish the baseline, then compare later runs against it:")
    console.print(f"  [blue]visreg run -c {config_path} --baseline[/blue]")
    console.print(f"  [blue]visreg run -c {config_path}[/blue]")


if __name__ == "__main__":
    cli()
