"""Report builder: transactions plus a trailing summary block, as CSV rows.

Layout (row 1 is the header)::

    [Date,]Name,Value,Category,Type,Source
    <one row per transaction>
    <blank>
    <blank>
    CATEGORY SUMMARY
    Category,Total
    <one row per category, ascending by total>
    <blank>
    FINANCIAL SUMMARY
    Total Expenses,<total>
    Total Income,<total>
    Net Balance,<total>

Summary labels sit in the ``Name`` column and totals in the ``Value`` column.
The ``Date`` column only exists when at least one transaction carries a date.

In ``computed`` mode totals are rendered with two decimals. In ``formula``
mode they are spreadsheet formulas over the transaction rows, so the sheet
recomputes after manual edits.
"""

from __future__ import annotations

import csv
from collections.abc import Sequence
from dataclasses import dataclass
from os import PathLike
from pathlib import Path

from .errors import OutputWriteError
from .logging_setup import get_logger
from .models import CategoryRules, RunSummary, SummaryMode, Transaction

BASE_FIELDNAMES: tuple[str, ...] = ("Name", "Value", "Category", "Type", "Source")
DATE_FIELDNAME = "Date"

CATEGORY_SUMMARY_LABEL = "CATEGORY SUMMARY"
FINANCIAL_SUMMARY_LABEL = "FINANCIAL SUMMARY"
TOTAL_EXPENSES_LABEL = "Total Expenses"
TOTAL_INCOME_LABEL = "Total Income"
NET_BALANCE_LABEL = "Net Balance"

_logger = get_logger("expense_categorizer.report")


@dataclass(frozen=True, slots=True)
class Report:
    fieldnames: tuple[str, ...]
    rows: list[dict[str, str]]
    transaction_rows: int


def format_value(value: float) -> str:
    """Shortest text that parses back to exactly ``value``."""

    return repr(float(value))


def format_total(value: float) -> str:
    s = f"{value:.2f}"
    return "0.00" if s == "-0.00" else s


def _column_letter(fieldnames: Sequence[str], name: str) -> str:
    return chr(ord("A") + fieldnames.index(name))


def _quote_formula_text(text: str) -> str:
    return '"' + text.replace('"', '""') + '"'


def _equality_criterion(text: str) -> str:
    """SUMIF criterion matching ``text`` literally.

    ``~``, ``*`` and ``?`` are wildcard syntax and get a ``~`` escape; a
    leading ``<``, ``>`` or ``=`` would read as a comparison, so those names
    get an explicit ``=`` operator.
    """

    escaped = "".join("~" + ch if ch in "~*?" else ch for ch in text)
    if escaped[:1] in ("<", ">", "="):
        escaped = "=" + escaped
    return _quote_formula_text(escaped)


def summary_categories(summary: RunSummary, rules: CategoryRules) -> list[tuple[str, float]]:
    """Union of configured and observed categories, ascending by total.

    Categories without transactions report ``0.0``. Ties (including all the
    empty categories) are ordered alphabetically.
    """

    totals = {name: 0.0 for name in rules.names}
    totals.update(summary.category_totals)
    return sorted(totals.items(), key=lambda kv: (kv[1], kv[0]))


def build_report(
    transactions: Sequence[Transaction],
    summary: RunSummary,
    rules: CategoryRules,
    *,
    mode: SummaryMode = SummaryMode.COMPUTED,
) -> Report:
    """Assemble the ordered output rows for ``transactions``."""

    mode = SummaryMode(mode)
    with_dates = any(tx.date for tx in transactions)
    fieldnames = ((DATE_FIELDNAME,) if with_dates else ()) + BASE_FIELDNAMES

    rows: list[dict[str, str]] = []
    for tx in transactions:
        row = {
            "Name": tx.name,
            "Value": format_value(tx.value),
            "Category": tx.category,
            "Type": tx.type,
            "Source": tx.source,
        }
        if with_dates:
            row[DATE_FIELDNAME] = tx.date or ""
        rows.append(row)

    # Spreadsheet coordinates: header is row 1, transactions start at row 2.
    first_row, last_row = 2, len(transactions) + 1
    val_col = _column_letter(fieldnames, "Value")
    cat_col = _column_letter(fieldnames, "Category")
    val_range = f"{val_col}{first_row}:{val_col}{last_row}"
    cat_range = f"{cat_col}{first_row}:{cat_col}{last_row}"

    def current_row() -> int:
        return len(rows) + 1

    rows.extend([{}, {}])
    rows.append({"Name": CATEGORY_SUMMARY_LABEL})
    rows.append({"Name": "Category", "Value": "Total"})
    for category, total in summary_categories(summary, rules):
        if mode is SummaryMode.FORMULA:
            cell = f"=SUMIF({cat_range},{_equality_criterion(category)},{val_range})"
        else:
            cell = format_total(total)
        rows.append({"Name": category, "Value": cell})

    rows.append({})
    rows.append({"Name": FINANCIAL_SUMMARY_LABEL})
    if mode is SummaryMode.FORMULA:
        rows.append({"Name": TOTAL_EXPENSES_LABEL, "Value": f'=SUMIF({val_range},"<0",{val_range})'})
        expenses_row = current_row()
        rows.append({"Name": TOTAL_INCOME_LABEL, "Value": f'=SUMIF({val_range},">0",{val_range})'})
        income_row = current_row()
        rows.append(
            {"Name": NET_BALANCE_LABEL, "Value": f"={val_col}{expenses_row}+{val_col}{income_row}"}
        )
    else:
        rows.append({"Name": TOTAL_EXPENSES_LABEL, "Value": format_total(summary.total_expenses)})
        rows.append({"Name": TOTAL_INCOME_LABEL, "Value": format_total(summary.total_income)})
        rows.append({"Name": NET_BALANCE_LABEL, "Value": format_total(summary.net_balance)})

    return Report(fieldnames=fieldnames, rows=rows, transaction_rows=len(transactions))


def write_report(report: Report, path: str | PathLike[str]) -> Path:
    """Write ``report`` as UTF-8 CSV; any ``OSError`` becomes :class:`OutputWriteError`."""

    p = Path(path)
    try:
        with p.open("w", encoding="utf-8", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=list(report.fieldnames), restval="")
            writer.writeheader()
            writer.writerows(report.rows)
    except OSError as e:
        raise OutputWriteError(f"cannot write report to {p}: {e}") from e
    _logger.info("Wrote %d rows to %s", len(report.rows), p)
    return p


__all__ = [
    "BASE_FIELDNAMES",
    "DATE_FIELDNAME",
    "CATEGORY_SUMMARY_LABEL",
    "FINANCIAL_SUMMARY_LABEL",
    "TOTAL_EXPENSES_LABEL",
    "TOTAL_INCOME_LABEL",
    "NET_BALANCE_LABEL",
    "Report",
    "build_report",
    "format_total",
    "format_value",
    "summary_categories",
    "write_report",
]
