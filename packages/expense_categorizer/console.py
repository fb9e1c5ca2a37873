"""Console rendering of run summaries (``rich`` tables on stdout)."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .models import ProcessingStats, RunSummary

console = Console()


def format_signed_money(value: float) -> str:
    sign = "-" if value < 0 else "+"
    return f"{sign}${abs(value):.2f}"


def print_summary(summary: RunSummary, *, out: Console | None = None) -> None:
    """Print per-category totals (largest expense first) and overall totals."""

    c = out or console

    table = Table(title="Category Summary", title_justify="left")
    table.add_column("Category")
    table.add_column("Transactions", justify="right")
    table.add_column("Total", justify="right")
    for category, total in summary.ordered_categories():
        table.add_row(
            escape(category),
            str(summary.category_counts.get(category, 0)),
            format_signed_money(total),
        )
    c.print(table)

    totals = Table(title="Financial Summary", title_justify="left", show_header=False)
    totals.add_column("Label")
    totals.add_column("Amount", justify="right")
    totals.add_row("Total Expenses", f"-${abs(summary.total_expenses):.2f}")
    totals.add_row("Total Income", f"+${summary.total_income:.2f}")
    totals.add_row("Net Balance", format_signed_money(summary.net_balance))
    c.print(totals)


def print_data_quality(stats: ProcessingStats, *, out: Console | None = None) -> None:
    c = out or console
    if stats.missing_sources:
        c.print(f"[yellow]Skipped missing sources:[/yellow] {escape(', '.join(stats.missing_sources))}")
    if stats.malformed_values:
        c.print(
            f"[yellow]Data quality:[/yellow] {stats.malformed_values} row(s) had unparseable "
            "values and were counted as 0"
        )


__all__ = ["console", "format_signed_money", "print_summary", "print_data_quality"]
