"""Public interface for the ``expense_categorizer`` package.

Symbol re-exports only; no runtime logic lives here.
"""

from .aggregation import TransactionAggregator, summarize
from .amounts import ParsedAmount, parse_amount
from .api import RunResult, export_report, process_expenses
from .categorization import categorize
from .config import Settings, load_category_rules
from .errors import (
    ConfigurationError,
    ExpenseCategorizerError,
    InputReadError,
    OutputWriteError,
)
from .models import (
    CategoryRules,
    ProcessingStats,
    RawRecord,
    RunSummary,
    SourceSpec,
    SourceType,
    SummaryMode,
    Transaction,
)
from .normalizers import NormalizedRecord, first_non_empty, normalize_record
from .report import Report, build_report, write_report

__all__ = [
    # API
    "process_expenses",
    "export_report",
    "RunResult",
    # Pipeline stages
    "normalize_record",
    "first_non_empty",
    "NormalizedRecord",
    "parse_amount",
    "ParsedAmount",
    "categorize",
    "TransactionAggregator",
    "summarize",
    "build_report",
    "write_report",
    "Report",
    # Configuration
    "Settings",
    "load_category_rules",
    # Models / types
    "CategoryRules",
    "ProcessingStats",
    "RawRecord",
    "RunSummary",
    "SourceSpec",
    "SourceType",
    "SummaryMode",
    "Transaction",
    # Errors
    "ExpenseCategorizerError",
    "ConfigurationError",
    "InputReadError",
    "OutputWriteError",
]
