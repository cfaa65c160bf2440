"""
Command-line interface for the transaction reconciliation tool.
"""

from datetime import datetime
from pathlib import Path
from typing import Optional
import logging
import sys

import click
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from . import __version__
from .config import load_config, generate_default_config
from .models.transaction import ReconciliationResult, ReconciliationSummary
from .parsers.csv_parser import TransactionCSVParser
from .pipeline import reconcile_files
from .reports.csv_export import export_result
from .reports.excel_generator import ExcelReportGenerator
from .utils.exceptions import ReconciliationError
from .utils.logging_config import setup_logging

console = Console()


@click.group()
@click.version_option(version=__version__)
def main():
    """Internal export vs. provider statement reconciliation tool."""
    pass


@main.command()
@click.argument("internal_file", type=click.Path(exists=True, path_type=Path))
@click.argument("provider_file", type=click.Path(exists=True, path_type=Path))
@click.option(
    "-c",
    "--config",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file (YAML)",
)
@click.option("-o", "--output", type=click.Path(path_type=Path), help="Output Excel file path")
@click.option(
    "--export-dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Also export matched/internal-only/provider-only groups as CSV files here",
)
@click.option(
    "--amount-tolerance",
    type=click.FloatRange(min=0),
    default=None,
    help="Override the amount tolerance",
)
@click.option(
    "--csv-mode",
    type=click.Choice(["simple", "rfc4180"]),
    default=None,
    help="Override how CSV rows are split",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
@click.option(
    "--dry-run", is_flag=True, help="Parse files and show summary without writing reports"
)
def reconcile(
    internal_file: Path,
    provider_file: Path,
    config: Optional[Path],
    output: Optional[Path],
    export_dir: Optional[Path],
    amount_tolerance: Optional[float],
    csv_mode: Optional[str],
    verbose: bool,
    dry_run: bool,
):
    """
    Reconcile an internal transaction export with a provider statement.

    INTERNAL_FILE: Path to the internal system CSV export
    PROVIDER_FILE: Path to the payment provider CSV statement
    """
    try:
        recon_config = load_config(config)
        setup_logging(
            logging.DEBUG if verbose else recon_config.logging.level,
            log_format=recon_config.logging.format,
        )

        # Apply command-line overrides
        if amount_tolerance is not None:
            recon_config.matching.amount_tolerance = amount_tolerance
        if csv_mode is not None:
            recon_config.input.csv_mode = csv_mode

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
        ) as progress:
            task = progress.add_task("Running reconciliation...", total=None)
            run = reconcile_files(internal_file, provider_file, recon_config)
            progress.update(task, completed=True)

        _display_summary(run.summary)
        _display_mismatches(run.result)

        if dry_run:
            console.print("\n[yellow]Dry run - no report generated[/yellow]")
            return

        if output is None:
            now = datetime.now()
            output = Path(
                recon_config.output.excel.filename_template.format(
                    date=now.strftime("%Y%m%d"), time=now.strftime("%H%M%S")
                )
            )

        report_path = ExcelReportGenerator(recon_config).generate_report(
            summary=run.summary,
            result=run.result,
            output_path=output,
        )
        console.print(f"\n[green]Report generated: {report_path}[/green]")

        if export_dir is not None:
            for path in export_result(run.result, export_dir, recon_config):
                console.print(f"[green]Exported: {path}[/green]")

    except ReconciliationError as e:
        console.print(f"[red]Error: {e}[/red]")
        if verbose:
            console.print_exception()
        sys.exit(1)


@main.command("parse")
@click.argument("csv_file", type=click.Path(exists=True, path_type=Path))
@click.option("-c", "--config", type=click.Path(exists=True, path_type=Path))
def parse(csv_file: Path, config: Optional[Path]):
    """
    Parse a transaction CSV file and display the transactions found.

    CSV_FILE: Path to an internal export or provider statement
    """
    try:
        parser = TransactionCSVParser(load_config(config))
        transactions = parser.parse_file(csv_file)
    except ReconciliationError as e:
        console.print(f"[red]Error parsing file: {e}[/red]")
        sys.exit(1)

    table = Table(title=f"Transactions: {csv_file.name}")
    table.add_column("Reference")
    table.add_column("Amount", justify="right")
    table.add_column("Status")
    table.add_column("Date")
    table.add_column("Description")

    for txn in transactions[:20]:  # Show first 20
        description = txn.description or "-"
        table.add_row(
            txn.reference,
            f"{txn.amount:,.2f}",
            txn.status or "-",
            txn.date or "-",
            description[:40] + "..." if len(description) > 40 else description,
        )

    console.print(table)

    if len(transactions) > 20:
        console.print(f"\n... and {len(transactions) - 20} more transactions")

    console.print(f"\nTotal transactions: {len(transactions)}")


@main.command("inspect")
@click.argument("csv_file", type=click.Path(exists=True, path_type=Path))
@click.option("-c", "--config", type=click.Path(exists=True, path_type=Path))
def inspect(csv_file: Path, config: Optional[Path]):
    """
    Show how each column of a CSV file will be interpreted.

    CSV_FILE: Path to an internal export or provider statement
    """
    try:
        summary = TransactionCSVParser(load_config(config)).get_file_summary(csv_file)
    except ReconciliationError as e:
        console.print(f"[red]Error reading file: {e}[/red]")
        sys.exit(1)

    table = Table(title=f"Columns: {csv_file.name}")
    table.add_column("Column", style="cyan")
    table.add_column("Role")
    for column, role in summary["field_roles"].items():
        table.add_row(column, role)
    console.print(table)

    console.print(f"\nRows: {summary['row_count']}")
    console.print(f"Parsed transactions: {summary['parsed_transactions']}")
    console.print(f"Skipped rows: {summary['skipped_rows']}")
    console.print(f"Total amount: {summary['total_amount']:,.2f}")


@main.command("init-config")
@click.option(
    "-o", "--output", type=click.Path(path_type=Path), default=Path("config.yaml")
)
def init_config(output: Path):
    """Generate a sample configuration file."""
    generate_default_config(output)
    console.print(f"[green]Configuration file generated: {output}[/green]")


def _display_summary(summary: ReconciliationSummary) -> None:
    """Display reconciliation summary in console."""
    table = Table(title="Reconciliation Summary")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("Internal Transactions", str(summary.total_internal_transactions))
    table.add_row("Provider Transactions", str(summary.total_provider_transactions))
    table.add_row("Total Transactions", str(summary.total_transactions))
    table.add_row("Matched", str(summary.matched_count))
    table.add_row("Unmatched", str(summary.unmatched_count))
    table.add_row("With Mismatches", str(summary.mismatched_count))
    table.add_row("Internal Only", str(summary.internal_only_count))
    table.add_row("Provider Only", str(summary.provider_only_count))
    table.add_row("Match Rate", f"{summary.match_rate:.1f}%")
    table.add_row("Processing Time", f"{summary.processing_time_seconds:.2f}s")

    console.print(table)


def _display_mismatches(result: ReconciliationResult) -> None:
    """List matched transactions whose amount or status disagree."""
    mismatched = result.mismatched
    if not mismatched:
        return

    table = Table(title="Mismatches")
    table.add_column("Reference")
    table.add_column("Details", style="red")
    for pair in mismatched[:20]:
        table.add_row(pair.internal.reference, "; ".join(pair.mismatches))
    console.print(table)

    if len(mismatched) > 20:
        console.print(f"\n... and {len(mismatched) - 20} more mismatches")


if __name__ == "__main__":
    main()
