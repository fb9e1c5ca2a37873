"""Run configuration and category-rule loading.

Settings resolve as: explicit CLI option, then environment variable (a local
``.env`` is loaded by the CLI beforehand), then the defaults below. Paths are
relative to the working directory.

Environment variables
---------------------
- ``EC_SOURCES``: comma-separated ``path:type`` pairs, e.g.
  ``credit.csv:credit,debit.csv:debit``.
- ``EC_CATEGORIES_PATH``: category JSON file.
- ``EC_OUTPUT_PATH``: report destination.
- ``EC_SUMMARY_MODE``: ``computed`` or ``formula``.
- ``EC_TRANSFER_FALLBACK``: ``1/true/yes`` or ``0/false/no``.
"""

from __future__ import annotations

import json
import os
from collections.abc import Iterable
from dataclasses import dataclass
from os import PathLike
from pathlib import Path

from pydantic import ValidationError

from .errors import ConfigurationError
from .logging_setup import get_logger
from .models import CategoryRules, SourceSpec, SourceType, SummaryMode

DEFAULT_SOURCES: tuple[SourceSpec, ...] = (
    SourceSpec(Path("credit.csv"), SourceType.CREDIT),
    SourceSpec(Path("debit.csv"), SourceType.DEBIT),
)
DEFAULT_CATEGORIES_PATH = Path("categories.json")
DEFAULT_OUTPUT_PATH = Path("categorized_expenses.csv")

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}

_logger = get_logger("expense_categorizer.config")


def parse_source_spec(text: str) -> SourceSpec:
    """Parse ``"path:type"``; the type is split off the last colon."""

    path_part, sep, type_part = text.strip().rpartition(":")
    if not sep or not path_part.strip():
        raise ConfigurationError(
            f"invalid source {text!r}: expected PATH:TYPE with TYPE one of "
            + ", ".join(t.value for t in SourceType)
        )
    try:
        source_type = SourceType(type_part.strip().lower())
    except ValueError:
        raise ConfigurationError(
            f"invalid source type {type_part.strip()!r} in {text!r}; expected one of "
            + ", ".join(t.value for t in SourceType)
        ) from None
    return SourceSpec(Path(path_part.strip()), source_type)


def parse_sources(items: Iterable[str]) -> tuple[SourceSpec, ...]:
    return tuple(parse_source_spec(item) for item in items if item.strip())


def _parse_bool(name: str, raw: str) -> bool:
    v = raw.strip().lower()
    if v in _TRUE_VALUES:
        return True
    if v in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"{name} must be a boolean flag, got {raw!r}")


def _parse_summary_mode(raw: str) -> SummaryMode:
    try:
        return SummaryMode(raw.strip().lower())
    except ValueError:
        raise ConfigurationError(
            f"invalid summary mode {raw!r}; expected one of "
            + ", ".join(m.value for m in SummaryMode)
        ) from None


@dataclass(frozen=True, slots=True)
class Settings:
    """Configuration for a single run."""

    sources: tuple[SourceSpec, ...] = DEFAULT_SOURCES
    categories_path: Path = DEFAULT_CATEGORIES_PATH
    output_path: Path = DEFAULT_OUTPUT_PATH
    summary_mode: SummaryMode = SummaryMode.COMPUTED
    transfer_fallback: bool = False

    @classmethod
    def from_env(cls) -> Settings:
        """Instantiate settings using environment overrides when present."""

        defaults = cls()

        sources = defaults.sources
        env_sources = os.getenv("EC_SOURCES")
        if env_sources and env_sources.strip():
            sources = parse_sources(env_sources.split(","))
            if not sources:
                raise ConfigurationError("EC_SOURCES is set but lists no sources")

        env_mode = os.getenv("EC_SUMMARY_MODE")
        env_fallback = os.getenv("EC_TRANSFER_FALLBACK")

        return cls(
            sources=sources,
            categories_path=Path(os.getenv("EC_CATEGORIES_PATH") or defaults.categories_path),
            output_path=Path(os.getenv("EC_OUTPUT_PATH") or defaults.output_path),
            summary_mode=_parse_summary_mode(env_mode) if env_mode else defaults.summary_mode,
            transfer_fallback=(
                _parse_bool("EC_TRANSFER_FALLBACK", env_fallback)
                if env_fallback
                else defaults.transfer_fallback
            ),
        )


def load_category_rules(path: str | PathLike[str]) -> CategoryRules:
    """Read and validate the category → keywords JSON file.

    The file must hold a single JSON object whose values are lists of keyword
    strings. Any read, decode, or validation failure raises
    :class:`ConfigurationError`.
    """

    p = Path(path)
    try:
        with p.open(encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        raise ConfigurationError(f"category configuration not found: {p}") from None
    except OSError as e:
        raise ConfigurationError(f"cannot read category configuration {p}: {e}") from e
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ConfigurationError(f"category configuration {p} is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(
            f"category configuration {p} must be a JSON object of category -> keywords"
        )

    try:
        rules = CategoryRules.from_mapping(data)
    except ValidationError as e:
        raise ConfigurationError(f"invalid category configuration {p}: {e}") from e

    _logger.debug("Loaded %d categories from %s", len(rules.names), p)
    return rules


__all__ = [
    "DEFAULT_SOURCES",
    "DEFAULT_CATEGORIES_PATH",
    "DEFAULT_OUTPUT_PATH",
    "Settings",
    "load_category_rules",
    "parse_source_spec",
    "parse_sources",
]
