"""CLI for the ``expense_categorizer`` package.

A Typer console interface around :func:`cmd_categorize`. Environment
variables are loaded from a local ``.env`` (without overriding the existing
environment) before settings are resolved; see :mod:`expense_categorizer.config`
for the variables honored. Business logic lives in
:mod:`expense_categorizer.api` and the modules it composes.
"""

from __future__ import annotations

import dataclasses
import sys
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv

from .api import export_report, process_expenses
from .config import Settings, load_category_rules, parse_sources
from .console import console, print_data_quality, print_summary
from .errors import ConfigurationError, ExpenseCategorizerError
from .logging_setup import configure_logging
from .models import SummaryMode


def resolve_settings(
    *,
    sources: list[str] | None = None,
    categories_path: Path | None = None,
    output_path: Path | None = None,
    summary_mode: SummaryMode | None = None,
    transfer_fallback: bool | None = None,
) -> Settings:
    """Environment-derived settings with explicit CLI values layered on top."""

    settings = Settings.from_env()
    overrides: dict[str, object] = {}
    if sources:
        overrides["sources"] = parse_sources(sources)
    if categories_path is not None:
        overrides["categories_path"] = categories_path
    if output_path is not None:
        overrides["output_path"] = output_path
    if summary_mode is not None:
        overrides["summary_mode"] = summary_mode
    if transfer_fallback is not None:
        overrides["transfer_fallback"] = transfer_fallback
    return dataclasses.replace(settings, **overrides) if overrides else settings


def cmd_categorize(settings: Settings) -> int:
    """Categorize all configured sources and export the report.

    Returns the process exit code: ``0`` on success (including when no
    transactions were found, in which case nothing is written) and ``1`` on
    configuration, input, or output failures, with the cause on stderr.
    """

    console.print("=== Credit Card Expense Categorizer ===\n")

    try:
        rules = load_category_rules(settings.categories_path)
        result = process_expenses(
            settings.sources, rules, transfer_fallback=settings.transfer_fallback
        )
    except ExpenseCategorizerError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not result.transactions:
        console.print("No transactions found. Please check your CSV files.")
        print_data_quality(result.stats)
        return 0

    print_summary(result.summary)

    try:
        export_report(result, rules, settings.output_path, mode=settings.summary_mode)
    except ExpenseCategorizerError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print_data_quality(result.stats)
    console.print(f"\nExport completed: {settings.output_path}")
    console.print(f"Location: {settings.output_path.resolve()}")
    return 0


# ---- Typer-based console interface -------------------------------------------


app = typer.Typer(
    add_completion=False,
    help=(
        "Categorize bank and credit-card CSV exports by keyword and write a "
        "consolidated report with category and financial summaries. Loads a "
        "local .env before reading EC_* settings."
    ),
)


@app.command()
def categorize(
    source: Annotated[
        list[str] | None,
        typer.Option(
            "--source",
            "-s",
            help="Input as PATH:TYPE (TYPE is credit or debit). Repeat for several files.",
        ),
    ] = None,
    categories: Annotated[
        Path | None,
        typer.Option("--categories", help="Category -> keywords JSON file.", dir_okay=False),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Report destination.", dir_okay=False),
    ] = None,
    summary_mode: Annotated[
        SummaryMode | None,
        typer.Option(
            "--summary-mode",
            case_sensitive=False,
            help="Render summary totals as computed numbers or spreadsheet formulas.",
        ),
    ] = None,
    transfer_fallback: Annotated[
        bool | None,
        typer.Option(
            "--transfer-fallback/--no-transfer-fallback",
            help="Route unmatched Pix/transfer rows by sign instead of Uncategorized.",
        ),
    ] = None,
    log_level: Annotated[
        str | None,
        typer.Option("--log-level", help="Override EXPENSE_CATEGORIZER_LOG_LEVEL."),
    ] = None,
) -> None:
    """Categorize expenses from the configured CSV sources."""

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)

    try:
        configure_logging(log_level)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise typer.Exit(1) from None

    try:
        settings = resolve_settings(
            sources=source,
            categories_path=categories,
            output_path=output,
            summary_mode=summary_mode,
            transfer_fallback=transfer_fallback,
        )
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise typer.Exit(1) from None

    raise typer.Exit(cmd_categorize(settings))


if __name__ == "__main__":  # pragma: no cover - exercised via the console script
    # Running as a module: `python -m expense_categorizer.cli`
    app()
