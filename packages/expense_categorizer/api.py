"""Public API and orchestration for the ``expense_categorizer`` package.

:func:`process_expenses` reads every configured source in order and runs the
aggregation pipeline; :func:`export_report` builds and writes the CSV report.
The CLI composes the two, but both are usable from library code.
"""

from __future__ import annotations

import csv
from collections.abc import Iterable
from dataclasses import dataclass
from os import PathLike

from .aggregation import TransactionAggregator, summarize
from .errors import InputReadError
from .ingest import read_source_rows
from .logging_setup import get_logger
from .models import (
    CategoryRules,
    ProcessingStats,
    RunSummary,
    SourceSpec,
    SummaryMode,
    Transaction,
)
from .report import Report, build_report, write_report

_logger = get_logger("expense_categorizer.api")


@dataclass(frozen=True, slots=True)
class RunResult:
    transactions: list[Transaction]
    summary: RunSummary
    stats: ProcessingStats


def process_expenses(
    sources: Iterable[SourceSpec],
    rules: CategoryRules,
    *,
    transfer_fallback: bool = False,
) -> RunResult:
    """Read, normalize, filter, and categorize all ``sources`` in order.

    Missing files are logged and skipped. Files that exist but cannot be
    decoded or parsed raise :class:`InputReadError`.
    """

    aggregator = TransactionAggregator(rules, transfer_fallback=transfer_fallback)

    for source in sources:
        try:
            rows = read_source_rows(source.path)
        except FileNotFoundError:
            _logger.warning("File not found - %s", source.path)
            aggregator.stats.missing_sources.append(source.name)
            continue
        except (OSError, UnicodeDecodeError, csv.Error) as e:
            raise InputReadError(f"cannot read {source.path}: {e}") from e

        _logger.info("Processing %s (%s): %d rows", source.name, source.type.value, len(rows))
        aggregator.add_source(rows, source)

    transactions = aggregator.finish()
    stats = aggregator.stats
    _logger.info("Total transactions processed: %d", len(transactions))
    if stats.malformed_values:
        _logger.warning(
            "%d row(s) had unparseable values and were counted as 0", stats.malformed_values
        )

    return RunResult(transactions=transactions, summary=summarize(transactions), stats=stats)


def export_report(
    result: RunResult,
    rules: CategoryRules,
    path: str | PathLike[str],
    *,
    mode: SummaryMode = SummaryMode.COMPUTED,
) -> Report:
    """Build the report for ``result`` and write it to ``path``."""

    report = build_report(result.transactions, result.summary, rules, mode=mode)
    write_report(report, path)
    return report


__all__ = ["RunResult", "process_expenses", "export_report"]
