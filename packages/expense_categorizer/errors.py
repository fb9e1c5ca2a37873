"""Exception types raised for unrecoverable failures.

Recoverable conditions (missing input files, malformed amounts, an empty
result set) are reported through logging and :class:`ProcessingStats`
instead of exceptions.
"""

from __future__ import annotations


class ExpenseCategorizerError(RuntimeError):
    """Base class for fatal errors surfaced by the CLI."""


class ConfigurationError(ExpenseCategorizerError):
    """The category configuration or a source specification is unusable."""


class OutputWriteError(ExpenseCategorizerError):
    """The report could not be written to its destination."""


class InputReadError(ExpenseCategorizerError):
    """An existing input file could not be read or parsed as CSV."""


__all__ = [
    "ExpenseCategorizerError",
    "ConfigurationError",
    "OutputWriteError",
    "InputReadError",
]
