"""
examplecov CLI - Command-line interface for example coverage reports.

Provides commands for exporting coverage records and printing summaries.
"""

from __future__ import annotations

from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from examplecov.config import ExportConfig, ExportConfigLoader
from examplecov.coverage.loader import load_record
from examplecov.coverage.models import CoverageRecord
from examplecov.logging import configure_logging
from examplecov.reporting.errors import ExportError
from examplecov.reporting.exporter import CoverageExporter
from examplecov.reporting.statistics import (
    build_language_statistics,
    build_provider_statistic,
    render_short_summary,
)

app = typer.Typer(
    name="examplecov",
    help="Coverage reports for example conversion into target languages",
    add_completion=False,
)

console = Console()


def version_callback(value: bool) -> None:
    """Display version information."""
    if value:
        from examplecov import __version__

        console.print(f"[bold blue]examplecov[/bold blue] v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """examplecov - Coverage reports for example conversion."""
    pass


@app.command()
def export(
    record_path: str = typer.Argument(..., help="Coverage record file (JSON or YAML)"),
    output: str = typer.Option(None, "--output", "-o", help="Report output directory"),
    config_path: str = typer.Option(None, "--config", "-c", help="Export configuration file"),
    top_errors: int = typer.Option(
        None, "--top-errors", "-n", min=1, help="Maximum error reasons per statistic"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-V", help="Verbose output"),
) -> None:
    """
    Export a coverage record into its report files.

    Writes byExample.json, byLanguage.json, summary.json and
    shortSummary.txt into the output directory.
    """
    configure_logging(level="INFO" if verbose else "WARNING")

    config = _load_config(config_path)
    if top_errors is not None:
        config = config.model_copy(update={"top_errors": top_errors})
    record = _load_record(record_path)
    output_dir = Path(output or config.output_dir)

    console.print(
        Panel(
            f"[bold]Exporting:[/bold] {record_path}\n[dim]Output: {output_dir}[/dim]",
            title="📊 Example Coverage",
            border_style="magenta",
        )
    )

    try:
        written = CoverageExporter(record, config).export(output_dir)
    except ExportError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e

    _display_language_table(record)
    for path in written:
        console.print(f"[green]✓[/green] Written {path}")


@app.command()
def summary(
    record_path: str = typer.Argument(..., help="Coverage record file (JSON or YAML)"),
) -> None:
    """Print the short success digest of a coverage record."""
    record = _load_record(record_path)
    typer.echo(render_short_summary(record), nl=False)


@app.command("init-config")
def init_config(
    output: str = typer.Option(
        "examplecov.yaml", "--output", "-o", help="Path of the configuration file"
    ),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing config"),
) -> None:
    """Write a sample export configuration."""
    config_file = Path(output)

    if config_file.exists() and not force:
        console.print(f"[yellow]⚠️  Config file already exists:[/yellow] {config_file}")
        console.print("[dim]Use --force to overwrite[/dim]")
        raise typer.Exit(1)

    config_file.parent.mkdir(parents=True, exist_ok=True)
    config_file.write_text(ExportConfigLoader.generate_sample_config())
    console.print(f"[green]✓[/green] Created configuration: {config_file}")


# =============================================================================
# Helper Functions
# =============================================================================


def _load_config(config_path: str | None) -> ExportConfig:
    if not config_path:
        return ExportConfig()
    try:
        return ExportConfigLoader.from_yaml(config_path)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error:[/red] Invalid configuration: {e}")
        raise typer.Exit(1) from e


def _load_record(record_path: str) -> CoverageRecord:
    try:
        return load_record(record_path)
    except FileNotFoundError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e
    except (ValueError, ValidationError) as e:
        console.print(f"[red]Error:[/red] Invalid coverage record: {e}")
        raise typer.Exit(1) from e


def _display_language_table(record: CoverageRecord) -> None:
    """Display per-language success rates."""
    provider = build_provider_statistic(record)

    table = Table(show_header=True, header_style="bold")
    table.add_column("Language", style="cyan")
    table.add_column("Converted")
    table.add_column("Total")
    table.add_column("Success")
    table.add_column("Top Error")

    for language, stat in build_language_statistics(record, top_errors=1).items():
        top_error = stat.frequent_errors[0].reason if stat.frequent_errors else "-"
        table.add_row(
            escape(language),
            str(stat.successes.number),
            str(stat.total),
            f"{stat.successes.pct:.1f}%",
            escape(top_error[:50] + "..." if len(top_error) > 50 else top_error),
        )

    table.add_row(
        "Overall",
        str(provider.successes.number),
        str(provider.total_conversions),
        f"[bold]{provider.successes.pct:.1f}%[/bold]",
        "-",
    )

    console.print(f"\n[bold]{escape(provider.name)}[/bold] {escape(provider.version)}")
    console.print(table)
