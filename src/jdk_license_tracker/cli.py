"""Command-line interface for jdk_license_tracker.

Provides the main entry point and subcommands for analyzing Java version
information, checking it against license and lifecycle policy, listing the
lifecycle reference data, and refreshing it from endoflife.date.
"""

import asyncio
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from jdk_license_tracker.analyzer import AnalysisResult, Analyzer, summarize
from jdk_license_tracker.config import Settings, load_settings
from jdk_license_tracker.exceptions import ConfigurationError, DataFetchError, InputError
from jdk_license_tracker.lifecycle import EndOfLifeFetcher, categorize, write_overlay
from jdk_license_tracker.models import LicenseFlag, RiskCategory, Vendor
from jdk_license_tracker.reference import ReferenceData, load_reference_data
from jdk_license_tracker.reporters import get_reporter
from jdk_license_tracker.sources import collect_inputs

app = typer.Typer(
    name="jdk-license-tracker",
    help="Identify Java runtime versions, their license obligations and lifecycle risk.",
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)

# Configure logging
logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s: %(message)s",
)
logger = logging.getLogger("jdk_license_tracker")

# Exit code for configuration integrity failures
CONFIG_ERROR_EXIT = 2

ConfigOption = Annotated[
    Optional[Path],
    typer.Option(
        "--config",
        "-c",
        envvar="JDK_LICENSE_TRACKER_CONFIG",
        help="Settings file (TOML)",
        exists=True,
        readable=True,
        dir_okay=False,
    ),
]
VerboseOption = Annotated[
    bool,
    typer.Option(
        "--verbose",
        "-v",
        help="Enable verbose output",
    ),
]
PathsArgument = Annotated[
    list[str],
    typer.Argument(
        help="Properties exports, java -version transcripts, zip archives, or - for stdin",
    ),
]
AsOfOption = Annotated[
    Optional[datetime],
    typer.Option(
        "--as-of",
        formats=["%Y-%m-%d"],
        help="Evaluation date (default: today)",
    ),
]
VendorOption = Annotated[
    Optional[str],
    typer.Option(
        "--vendor",
        help="Vendor hint applied to every input (e.g. Oracle, Temurin)",
    ),
]


def _setup_logging(verbose: bool) -> None:
    """Configure logging level based on verbosity flag."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.getLogger("jdk_license_tracker").setLevel(level)


def _load(config: Optional[Path]) -> tuple[Settings, ReferenceData]:
    """Load settings and reference data, exiting with code 2 if invalid."""
    try:
        settings = load_settings(config)
        return settings, load_reference_data(settings)
    except ConfigurationError as e:
        err_console.print(f"[red]Configuration error:[/red] {escape(str(e))}")
        raise typer.Exit(code=CONFIG_ERROR_EXIT)


def _run_analysis(
    paths: list[str],
    as_of: date,
    vendor: Optional[str],
    config: Optional[Path],
) -> list[AnalysisResult]:
    """Shared logic of the analyze and check commands."""
    _, reference = _load(config)
    analyzer = Analyzer(reference)

    try:
        inputs = collect_inputs(paths)
    except InputError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1)

    return analyzer.analyze_all(inputs, as_of, vendor)


def _as_date(value: Optional[datetime]) -> date:
    return value.date() if value is not None else date.today()


@app.command()
def analyze(
    paths: PathsArgument,
    as_of: AsOfOption = None,
    vendor: VendorOption = None,
    output_format: Annotated[
        str,
        typer.Option(
            "--format",
            "-f",
            help="Output format: markdown or json",
        ),
    ] = "markdown",
    output: Annotated[
        Optional[Path],
        typer.Option(
            "--output",
            "-o",
            help="Write the report to this file instead of stdout",
        ),
    ] = None,
    config: ConfigOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Analyze Java version information and report license and risk verdicts."""
    _setup_logging(verbose)

    try:
        reporter = get_reporter(output_format)
    except ValueError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1)

    evaluation_date = _as_date(as_of)
    results = _run_analysis(paths, evaluation_date, vendor, config)

    if output is None:
        typer.echo(reporter.render(results, evaluation_date), nl=False)
        return

    try:
        reporter.write(results, evaluation_date, output)
    except OSError as e:
        err_console.print(f"[red]Error writing output:[/red] {escape(str(e))}")
        raise typer.Exit(code=1)
    console.print(f"[green]Generated:[/green] {output}")


@app.command()
def check(
    paths: PathsArgument,
    as_of: AsOfOption = None,
    vendor: VendorOption = None,
    fail_on_eol: Annotated[
        bool,
        typer.Option(
            "--fail-on-eol",
            help="Also fail for end-of-life or unsupported versions",
        ),
    ] = False,
    fail_on_unknown: Annotated[
        bool,
        typer.Option(
            "--fail-on-unknown",
            help="Also fail for unknown licenses and unparseable inputs",
        ),
    ] = False,
    config: ConfigOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Check Java versions against license and lifecycle policy.

    Exit codes:
        0 - No violations
        1 - Violations found or error occurred
        2 - Invalid configuration
    """
    _setup_logging(verbose)

    results = _run_analysis(paths, _as_date(as_of), vendor, config)
    if not results:
        console.print("[green]No inputs to check[/green]")
        raise typer.Exit(code=0)

    violations: list[tuple[str, str]] = []
    for result in results:
        failure = result.failure
        if failure is not None:
            if fail_on_unknown:
                violations.append((result.name, str(failure)))
            else:
                console.print(f"[yellow]Skipped {escape(result.name)}:[/yellow] {escape(str(failure))}")
            continue

        verdict = result.verdict
        if verdict.requires_commercial_license:
            violations.append((result.name, verdict.license.explanation))
        elif fail_on_unknown and verdict.license.flag is LicenseFlag.UNKNOWN:
            violations.append((result.name, verdict.license.explanation))

        if fail_on_eol and verdict.risk_category in (
            RiskCategory.END_OF_LIFE,
            RiskCategory.UNSUPPORTED,
        ):
            violations.append(
                (
                    result.name,
                    f"{verdict.identity.vendor.vendor.display_name} "
                    f"{verdict.identity.display_version} is {verdict.risk_category.value}",
                )
            )

    summary = summarize(results)
    console.print(
        f"Checked [bold]{summary.total}[/bold] inputs, {summary.distinct} distinct versions: "
        f"{summary.commercial} commercial, {summary.end_of_life} end-of-life, "
        f"{summary.outdated} older than Java 8"
    )

    if violations:
        console.print(f"\n[red]Violations ({len(violations)}):[/red]")
        for name, reason in violations:
            console.print(f"  - {name}: {reason}", markup=False)
        raise typer.Exit(code=1)

    console.print("\n[green]No violations found![/green]")


def _parse_vendor(value: str) -> Vendor:
    lowered = value.strip().lower()
    for candidate in Vendor:
        if lowered in (candidate.value, candidate.display_name.lower()):
            return candidate
    raise typer.BadParameter(f"Unknown vendor {value!r}")


@app.command()
def versions(
    vendor: Annotated[
        Optional[str],
        typer.Option(
            "--vendor",
            help="Only list records for this vendor ('unknown' for the vendor-neutral table)",
        ),
    ] = None,
    as_of: AsOfOption = None,
    config: ConfigOption = None,
) -> None:
    """List lifecycle reference records and their current risk category."""
    _, reference = _load(config)
    selected = _parse_vendor(vendor) if vendor else None
    evaluation_date = _as_date(as_of)

    table = Table(title=f"Lifecycle records as of {evaluation_date.isoformat()}")
    table.add_column("Vendor")
    table.add_column("Major", justify="right")
    table.add_column("LTS")
    table.add_column("Public updates until")
    table.add_column("End of life")
    table.add_column("Risk")

    records = sorted(
        reference.lifecycle,
        key=lambda r: (r.vendor.display_name if r.vendor else "", r.major),
    )
    shown = 0
    for record in records:
        record_vendor = record.vendor or Vendor.UNKNOWN
        if selected is not None and record_vendor is not selected:
            continue
        shown += 1
        category = categorize(record, evaluation_date, reference.warning_window)
        table.add_row(
            record.vendor.display_name if record.vendor else "(any)",
            str(record.major),
            "yes" if record.lts else "no",
            record.security_support_until.isoformat() if record.security_support_until else "-",
            record.eol_date.isoformat() if record.eol_date else "-",
            category.value,
        )

    if not shown:
        console.print("[yellow]No lifecycle records found[/yellow]")
        return
    console.print(table)


async def _run_refresh(output: Path) -> int:
    """Async implementation of the refresh command."""
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task("Fetching lifecycle data...", total=None)
        try:
            async with EndOfLifeFetcher() as fetcher:
                records = await fetcher.fetch_all()
        except DataFetchError as e:
            err_console.print(f"[red]Error:[/red] {escape(str(e))}")
            return 1
        progress.update(task, completed=True)

    try:
        write_overlay(records, output)
    except OSError as e:
        err_console.print(f"[red]Error writing output:[/red] {escape(str(e))}")
        return 1

    console.print(f"[green]Wrote {len(records)} lifecycle records to[/green] {output}")
    return 0


@app.command()
def refresh(
    output: Annotated[
        Optional[Path],
        typer.Option(
            "--output",
            "-o",
            help="Overlay file to write (default: the configured overlay path)",
        ),
    ] = None,
    config: ConfigOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Refresh lifecycle data from endoflife.date into the overlay file."""
    _setup_logging(verbose)

    if output is None:
        try:
            settings = load_settings(config)
        except ConfigurationError as e:
            err_console.print(f"[red]Configuration error:[/red] {escape(str(e))}")
            raise typer.Exit(code=CONFIG_ERROR_EXIT)
        output = settings.lifecycle_overlay_path
        if output is None:
            err_console.print("[red]Error:[/red] no overlay path configured, use --output")
            raise typer.Exit(code=1)

    exit_code = asyncio.run(_run_refresh(output))
    raise typer.Exit(code=exit_code)


if __name__ == "__main__":
    app()
