"""Aggregation: turn raw rows into transactions and transactions into totals.

:class:`TransactionAggregator` is fed raw records source by source, in file
order. Per record it applies, in this order:

1. Bill-payment suppression: descriptions containing ``"pagamento de
   fatura"`` duplicate the credit-card purchases already imported from the
   card's own export, so the row is dropped.
2. Toll consolidation: ``"nutag"`` rows are not emitted individually; their
   values accumulate into one synthetic ``Consolidated`` entry appended by
   :meth:`TransactionAggregator.finish`.
3. Everything else becomes a categorized :class:`Transaction`.

:func:`summarize` then derives a :class:`RunSummary` from the final list.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from datetime import date, datetime

from .amounts import parse_amount
from .categorization import categorize
from .logging_setup import get_logger
from .models import (
    CONSOLIDATED_SOURCE,
    CategoryRules,
    ProcessingStats,
    RawRecord,
    RunSummary,
    SourceSpec,
    Transaction,
)
from .normalizers import normalize_record

BILL_PAYMENT_MARKER = "pagamento de fatura"
TOLL_MARKER = "nutag"
TOLL_NAME = "Pedágios NuTag"
TOLL_CATEGORY = "Transportation"

_logger = get_logger("expense_categorizer.aggregation")


def toll_description(count: int) -> str:
    return f"{TOLL_NAME} ({count} transações)"


class TransactionAggregator:
    """Accumulate transactions across sources for a single run."""

    def __init__(self, rules: CategoryRules, *, transfer_fallback: bool = False) -> None:
        self._rules = rules
        self._transfer_fallback = transfer_fallback
        self._transactions: list[Transaction] = []
        self._toll_total = 0.0
        self._toll_count = 0
        self._finished = False
        self.stats = ProcessingStats()

    def add_record(self, record: RawRecord, source: SourceSpec) -> Transaction | None:
        """Process one raw row; return the transaction it produced, if any."""

        if self._finished:
            raise RuntimeError("aggregator already finished; create a new one per run")

        self.stats.rows_read += 1
        norm = normalize_record(record)
        desc_lower = norm.description.lower()

        if BILL_PAYMENT_MARKER in desc_lower:
            self.stats.skipped_duplicates += 1
            _logger.info("Skipping duplicate: %s", norm.description)
            return None

        parsed = parse_amount(norm.raw_value, source.type)
        if parsed.malformed:
            self.stats.malformed_values += 1
            _logger.warning(
                "Unparseable value %r in %s (%s); counted as 0",
                norm.raw_value,
                source.name,
                norm.description or "<no description>",
            )

        if TOLL_MARKER in desc_lower:
            self._toll_total += parsed.value
            self._toll_count += 1
            self.stats.consolidated_tolls += 1
            _logger.info("Grouping NuTag toll: %.2f", parsed.value)
            return None

        tx = Transaction(
            name=norm.name,
            description=norm.description,
            value=parsed.value,
            category=categorize(
                norm.description,
                self._rules,
                value=parsed.value,
                transfer_fallback=self._transfer_fallback,
            ),
            source=source.name,
            date=norm.date,
        )
        self._transactions.append(tx)
        return tx

    def add_source(self, records: Iterable[RawRecord], source: SourceSpec) -> None:
        for record in records:
            self.add_record(record, source)
        self.stats.processed_sources.append(source.name)

    def finish(self) -> list[Transaction]:
        """Append the consolidated toll entry (if any) and return the final list."""

        if not self._finished:
            self._finished = True
            if self._toll_count > 0:
                _logger.info(
                    "Consolidated %d NuTag transactions into one entry: %.2f",
                    self._toll_count,
                    self._toll_total,
                )
                self._transactions.append(
                    Transaction(
                        name=TOLL_NAME,
                        description=toll_description(self._toll_count),
                        value=self._toll_total,
                        category=TOLL_CATEGORY,
                        source=CONSOLIDATED_SOURCE,
                    )
                )
            if any(tx.date for tx in self._transactions):
                self._transactions = sort_by_date(self._transactions)
        return list(self._transactions)


def _parse_display_date(text: str | None) -> date | None:
    if not text:
        return None
    try:
        return datetime.strptime(text, "%d/%m/%Y").date()
    except ValueError:
        return None


def sort_by_date(transactions: Iterable[Transaction]) -> list[Transaction]:
    """Stable sort, oldest first; undated or unparseable dates go last."""

    def key(tx: Transaction) -> tuple[int, date]:
        d = _parse_display_date(tx.date)
        return (0, d) if d is not None else (1, date.min)

    return sorted(transactions, key=key)


def summarize(transactions: Iterable[Transaction]) -> RunSummary:
    """Accumulate per-category and overall totals."""

    totals: dict[str, float] = defaultdict(float)
    counts: dict[str, int] = defaultdict(int)
    total_expenses = 0.0
    total_income = 0.0

    for tx in transactions:
        totals[tx.category] += tx.value
        counts[tx.category] += 1
        if tx.value < 0:
            total_expenses += tx.value
        else:
            total_income += tx.value

    return RunSummary(
        category_totals=dict(totals),
        category_counts=dict(counts),
        total_expenses=total_expenses,
        total_income=total_income,
    )


__all__ = [
    "BILL_PAYMENT_MARKER",
    "TOLL_MARKER",
    "TOLL_NAME",
    "TOLL_CATEGORY",
    "TransactionAggregator",
    "sort_by_date",
    "summarize",
    "toll_description",
]
