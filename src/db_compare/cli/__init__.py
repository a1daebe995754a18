"""CLI module for schema and row-count comparison of two databases.

Provides commands for listing connection profiles and comparing the
schema, the per-table row counts, or both, of a source and a target
SQL Server database.

Usage:
    db-compare profiles
    db-compare schema --source prod --target replica
    db-compare data --source prod --target replica --json
    db-compare compare --source prod --target "mssql://sa:pw@host/app"
    db-compare --config other.toml compare --source a --target b --no-data

Commands:
    profiles  - List available profiles
    schema    - Compare schemas
    data      - Compare row counts
    compare   - Run both comparisons (defaults from [compare] in db.toml)
"""

import argparse
import asyncio
import logging
import sys
import tomllib
from pathlib import Path

from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from db_compare.config.loader import load_db_config
from db_compare.config.models import CompareSettings
from db_compare.data.models import DataComparisonResult
from db_compare.engine import ComparisonEngine, CompleteComparisonResult
from db_compare.errors import ComparisonError
from db_compare.factory import ProfileNotFoundError, redact_url, resolve_reference
from db_compare.schema.models import SchemaComparisonResult, Severity

console = Console()
err_console = Console(stderr=True)

# db.toml failures reported as a single error line
CONFIG_ERRORS = (FileNotFoundError, tomllib.TOMLDecodeError, ValidationError)

SEVERITY_STYLES = {
    Severity.HIGH: "bold red",
    Severity.MEDIUM: "yellow",
    Severity.LOW: "dim",
}


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _config_path(args: argparse.Namespace) -> Path | None:
    config = getattr(args, "config", None)
    return Path(config) if config else None


def _print_error(e: Exception) -> None:
    console.print(f"[red]Error: {escape(str(e))}[/red]")


def _severity_cell(severity: Severity) -> str:
    style = SEVERITY_STYLES[severity]
    return f"[{style}]{severity.value}[/{style}]"


def _resolve_endpoints(args: argparse.Namespace) -> tuple[str, str] | None:
    """Resolve --source/--target to connection URLs, printing any error.

    Returns:
        ``(source_url, target_url)``, or ``None`` on failure.
    """
    config_path = _config_path(args)
    try:
        source_url = resolve_reference(args.source, config_path)
        target_url = resolve_reference(args.target, config_path)
    except (ProfileNotFoundError, *CONFIG_ERRORS) as e:
        _print_error(e)
        return None

    err_console.print(
        f"Comparing [bold cyan]{redact_url(source_url)}[/bold cyan] "
        f"-> [bold cyan]{redact_url(target_url)}[/bold cyan]",
        style="dim",
        highlight=False,
    )
    return source_url, target_url


# ============================================================================
# Report rendering
# ============================================================================


def _print_severity_summary(counts: dict[str, int]) -> None:
    parts = [
        f"{_severity_cell(severity)}: {counts[severity.value]}"
        for severity in Severity
    ]
    console.print("  " + "  ".join(parts))


def render_schema_result(result: SchemaComparisonResult) -> None:
    """Print a schema comparison as a rich table."""
    console.print()
    console.print(
        f"[bold]Schema comparison[/bold]: "
        f"{result.source_table_count} source tables, "
        f"{result.target_table_count} target tables"
    )

    if not result.differences:
        console.print("[bold green]v[/bold green] Schemas match")
        return

    table = Table(
        title=f"Schema Differences ({result.total_differences})",
        show_header=True,
        header_style="bold",
    )
    table.add_column("Severity")
    table.add_column("Type")
    table.add_column("Object", style="cyan")
    table.add_column("Difference")
    table.add_column("Source")
    table.add_column("Target")

    for diff in result.differences:
        table.add_row(
            _severity_cell(diff.severity),
            diff.type.value,
            diff.object_name,
            diff.difference,
            diff.source_value,
            diff.target_value,
        )

    console.print(table)
    _print_severity_summary(result.severity_counts())


def render_data_result(result: DataComparisonResult) -> None:
    """Print a row-count comparison as a rich table."""
    console.print()
    console.print(
        f"[bold]Row count comparison[/bold]: {result.tables_compared} tables, "
        f"{result.total_row_count_source:,} source rows, "
        f"{result.total_row_count_target:,} target rows"
    )
    for warning in result.warnings:
        console.print(f"[yellow]Warning: {warning}[/yellow]")

    if not result.differences:
        console.print("[bold green]v[/bold green] Row counts match")
        return

    table = Table(
        title=f"Row Count Differences ({result.total_differences})",
        show_header=True,
        header_style="bold",
    )
    table.add_column("Severity")
    table.add_column("Type")
    table.add_column("Table", style="cyan")
    table.add_column("Source", justify="right")
    table.add_column("Target", justify="right")
    table.add_column("Diff", justify="right")
    table.add_column("%", justify="right")

    for diff in result.differences:
        table.add_row(
            _severity_cell(diff.severity),
            diff.difference_type.value,
            diff.qualified_name,
            f"{diff.source_row_count:,}",
            f"{diff.target_row_count:,}",
            f"{diff.difference:,}",
            f"{diff.percentage_difference:.1f}",
        )

    console.print(table)
    _print_severity_summary(result.severity_counts())


def render_complete_result(result: CompleteComparisonResult) -> None:
    """Print both comparisons followed by combined totals and errors."""
    if result.schema_comparison:
        render_schema_result(result.schema_comparison)
    if result.data_comparison:
        render_data_result(result.data_comparison)

    console.print()
    console.print(
        f"[bold]Total differences:[/bold] {result.total_differences} "
        f"(schema: {result.schema_differences}, data: {result.data_differences})"
    )
    for error in result.errors:
        console.print(f"[bold red]x[/bold red] {error}")


# ============================================================================
# Async command implementations
# ============================================================================


async def _async_schema(args: argparse.Namespace) -> int:
    """Async implementation for schema command.

    Returns:
        0 on success, 1 on failure.
    """
    endpoints = _resolve_endpoints(args)
    if endpoints is None:
        return 1

    try:
        result = await ComparisonEngine().compare_schemas(*endpoints)
    except ComparisonError as e:
        console.print(f"\n[bold red]x[/bold red] {e}")
        return 1

    if args.json:
        console.print_json(result.to_json())
    else:
        render_schema_result(result)
    return 0


async def _async_data(args: argparse.Namespace) -> int:
    """Async implementation for data command.

    Returns:
        0 on success, 1 on failure.
    """
    endpoints = _resolve_endpoints(args)
    if endpoints is None:
        return 1

    try:
        result = await ComparisonEngine().compare_data(*endpoints)
    except ComparisonError as e:
        console.print(f"\n[bold red]x[/bold red] {e}")
        return 1

    if args.json:
        console.print_json(result.to_json())
    else:
        render_data_result(result)
    return 0


def _compare_settings(args: argparse.Namespace) -> CompareSettings:
    """Defaults from [compare] in db.toml, or built-in defaults without one."""
    try:
        return load_db_config(_config_path(args)).compare
    except FileNotFoundError:
        return CompareSettings()


async def _async_compare(args: argparse.Namespace) -> int:
    """Async implementation for compare command.

    Runs schema and data comparisons independently; a failure in one
    still reports the other.

    Returns:
        0 when every selected comparison succeeded, 1 otherwise.
    """
    try:
        settings = _compare_settings(args)
    except (tomllib.TOMLDecodeError, ValidationError) as e:
        _print_error(e)
        return 1

    schema = settings.schema_ and not args.no_schema
    data = settings.data and not args.no_data
    if not schema and not data:
        console.print("[red]Error: both schema and data comparison are disabled[/red]")
        return 1

    endpoints = _resolve_endpoints(args)
    if endpoints is None:
        return 1

    result = await ComparisonEngine().compare(*endpoints, schema=schema, data=data)

    if args.json:
        console.print_json(result.to_json())
    else:
        render_complete_result(result)
    return 0 if result.succeeded else 1


# ============================================================================
# Command handlers
# ============================================================================


def cmd_profiles(args: argparse.Namespace) -> int:
    """List available profiles from db.toml.

    Args:
        args: Parsed CLI arguments.

    Returns:
        0 on success, 1 if db.toml is missing or invalid.
    """
    try:
        config = load_db_config(_config_path(args))
    except CONFIG_ERRORS as e:
        _print_error(e)
        return 1

    table = Table(
        title="Database Profiles", show_header=True, header_style="bold"
    )
    table.add_column("Profile", style="cyan")
    table.add_column("Provider")
    table.add_column("URL")
    table.add_column("Description")

    for name, profile in config.profiles.items():
        table.add_row(
            name,
            profile.provider,
            redact_url(profile.url),
            profile.description or "",
        )

    console.print(table)
    return 0


def cmd_schema(args: argparse.Namespace) -> int:
    """Compare the schemas of two databases.

    Wraps the async implementation with ``asyncio.run()``.
    """
    return asyncio.run(_async_schema(args))


def cmd_data(args: argparse.Namespace) -> int:
    """Compare per-table row counts of two databases.

    Wraps the async implementation with ``asyncio.run()``.
    """
    return asyncio.run(_async_data(args))


def cmd_compare(args: argparse.Namespace) -> int:
    """Run schema and data comparisons.

    Wraps the async implementation with ``asyncio.run()``.
    """
    return asyncio.run(_async_compare(args))


# ============================================================================
# Main entry point
# ============================================================================


def _add_endpoint_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--source",
        "-s",
        required=True,
        help="Source profile name or connection URL",
    )
    parser.add_argument(
        "--target",
        "-t",
        required=True,
        help="Target profile name or connection URL",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the result as JSON",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="db-compare",
        description="Compare schema and row counts of two SQL Server databases",
    )

    # Global options
    parser.add_argument(
        "--config",
        default=None,
        help="Path to db.toml (default: ./db.toml)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Show debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # profiles command
    p_profiles = subparsers.add_parser(
        "profiles",
        help="List available profiles",
    )
    p_profiles.set_defaults(func=cmd_profiles)

    # schema command
    p_schema = subparsers.add_parser(
        "schema",
        help="Compare schemas",
    )
    _add_endpoint_arguments(p_schema)
    p_schema.set_defaults(func=cmd_schema)

    # data command
    p_data = subparsers.add_parser(
        "data",
        help="Compare row counts",
    )
    _add_endpoint_arguments(p_data)
    p_data.set_defaults(func=cmd_data)

    # compare command
    p_compare = subparsers.add_parser(
        "compare",
        help="Compare schemas and row counts",
    )
    _add_endpoint_arguments(p_compare)
    p_compare.add_argument(
        "--no-schema",
        action="store_true",
        help="Skip the schema comparison",
    )
    p_compare.add_argument(
        "--no-data",
        action="store_true",
        help="Skip the row count comparison",
    )
    p_compare.set_defaults(func=cmd_compare)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point.

    Parses command line arguments and dispatches to appropriate handler.

    Returns:
        Exit code (0 for success, 1 for errors).
    """
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
