"""Data models and type aliases for ``expense_categorizer``.

Raw CSV rows stay opaque mappings until the column normalizer turns them
into :class:`Transaction` objects. Category rules are validated once through
pydantic and then treated as an immutable value passed explicitly to the
categorizer.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, field_validator

# ---------------------------------------------------------------------------
# Raw records and sources
# ---------------------------------------------------------------------------

RawRecord = Mapping[str, str | None]
"""A single CSV row: column name (as exported) to trimmed cell text, or None."""


UNCATEGORIZED = "Uncategorized"
CONSOLIDATED_SOURCE = "Consolidated"
EXPENSE = "Expense"
INCOME = "Income"


class SourceType(str, Enum):
    """Sign convention of an input file.

    ``credit`` exports list purchases as positive numbers; every value is
    forced to be an expense. ``debit`` exports already encode expenses as
    negative and income as positive.
    """

    CREDIT = "credit"
    DEBIT = "debit"


class SummaryMode(str, Enum):
    """How totals are rendered in the report's summary block."""

    COMPUTED = "computed"
    FORMULA = "formula"


@dataclass(frozen=True, slots=True)
class SourceSpec:
    """One configured input file plus its sign convention."""

    path: Path
    type: SourceType

    @property
    def name(self) -> str:
        """Identifier recorded on every transaction read from this source."""

        return self.path.name


# ---------------------------------------------------------------------------
# Transactions
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Transaction:
    """A normalized, categorized transaction.

    ``value`` is signed: negative means money out. ``type`` is derived from
    the sign so the two can never disagree. ``date`` is only populated when
    the source file carried a date-like column (``DD/MM/YYYY`` text).
    """

    name: str
    description: str
    value: float
    category: str
    source: str
    date: str | None = None

    @property
    def type(self) -> str:
        return EXPENSE if self.value < 0 else INCOME


# ---------------------------------------------------------------------------
# Category rules
# ---------------------------------------------------------------------------


class CategoryRules(BaseModel):
    """Ordered mapping of category name to ordered keywords.

    Iteration order is the configuration order, which is also the matching
    priority: the first category owning a matching keyword wins.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    categories: dict[str, tuple[str, ...]]

    @field_validator("categories")
    @classmethod
    def _validate_categories(cls, v: dict[str, tuple[str, ...]]) -> dict[str, tuple[str, ...]]:
        for name, keywords in v.items():
            if not name.strip():
                raise ValueError("category names must be non-empty")
            for kw in keywords:
                # A blank keyword would match every description.
                if not kw.strip():
                    raise ValueError(f"category {name!r} has a blank keyword")
        return v

    @classmethod
    def from_mapping(cls, data: Mapping[str, object]) -> CategoryRules:
        return cls.model_validate({"categories": dict(data)})

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(self.categories)

    def items(self) -> Iterator[tuple[str, tuple[str, ...]]]:
        return iter(self.categories.items())


# ---------------------------------------------------------------------------
# Run results
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class RunSummary:
    """Per-category and overall totals derived from the final transactions."""

    category_totals: Mapping[str, float]
    category_counts: Mapping[str, int]
    total_expenses: float
    total_income: float

    @property
    def net_balance(self) -> float:
        return self.total_expenses + self.total_income

    def ordered_categories(self) -> list[tuple[str, float]]:
        """Categories ascending by total (largest expense first), ties by name."""

        return sorted(self.category_totals.items(), key=lambda kv: (kv[1], kv[0]))


@dataclass(slots=True)
class ProcessingStats:
    """Data-quality counters collected while processing sources."""

    processed_sources: list[str] = field(default_factory=list)
    missing_sources: list[str] = field(default_factory=list)
    rows_read: int = 0
    skipped_duplicates: int = 0
    consolidated_tolls: int = 0
    malformed_values: int = 0


__all__ = [
    "RawRecord",
    "UNCATEGORIZED",
    "CONSOLIDATED_SOURCE",
    "EXPENSE",
    "INCOME",
    "SourceType",
    "SummaryMode",
    "SourceSpec",
    "Transaction",
    "CategoryRules",
    "RunSummary",
    "ProcessingStats",
]
