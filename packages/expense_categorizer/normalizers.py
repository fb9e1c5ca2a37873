"""Column normalizer: map bank-specific CSV columns to one transaction shape.

Exports differ in casing and language (``title`` vs ``Descrição`` vs
``Description``). Each canonical field is resolved by trying a fixed, ordered
list of column names and keeping the first non-empty value. Lookups are
case-sensitive; a missing column degrades to an empty value and never raises.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass

from .models import RawRecord

# Ordered column candidates per canonical field.
NAME_COLUMNS: tuple[str, ...] = (
    "name",
    "Name",
    "title",
    "Title",
    "description",
    "Description",
    "Descrição",
)
DESCRIPTION_COLUMNS: tuple[str, ...] = (
    "Descrição",
    "description",
    "Description",
    "title",
    "Title",
    "name",
    "Name",
)
VALUE_COLUMNS: tuple[str, ...] = ("value", "Value", "amount", "Amount", "Valor")
DATE_COLUMNS: tuple[str, ...] = ("date", "Date", "data", "Data")

DEFAULT_RAW_VALUE = "0"

_ISO_DATE_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")


@dataclass(frozen=True, slots=True)
class NormalizedRecord:
    name: str
    description: str
    raw_value: str
    date: str | None = None


def first_non_empty(record: RawRecord, keys: Sequence[str]) -> str | None:
    """Return the value of the first column in ``keys`` that is present and non-empty.

    Values are compared after stripping whitespace but returned stripped as
    well, so callers never see padding from loosely formatted exports.
    """

    for key in keys:
        v = record.get(key)
        if v is None:
            continue
        t = v.strip()
        if t:
            return t
    return None


def normalize_date(raw: str | None) -> str | None:
    """Render ISO dates (``YYYY-MM-DD``) as ``DD/MM/YYYY``; keep other text as-is."""

    if raw is None:
        return None
    s = raw.strip()
    if not s:
        return None
    m = _ISO_DATE_RE.match(s)
    if m:
        year, month, day = m.groups()
        return f"{day}/{month}/{year}"
    return s


def normalize_record(record: RawRecord) -> NormalizedRecord:
    """Resolve ``name``, ``description``, raw value text and optional date."""

    return NormalizedRecord(
        name=first_non_empty(record, NAME_COLUMNS) or "",
        description=first_non_empty(record, DESCRIPTION_COLUMNS) or "",
        raw_value=first_non_empty(record, VALUE_COLUMNS) or DEFAULT_RAW_VALUE,
        date=normalize_date(first_non_empty(record, DATE_COLUMNS)),
    )


__all__ = [
    "NAME_COLUMNS",
    "DESCRIPTION_COLUMNS",
    "VALUE_COLUMNS",
    "DATE_COLUMNS",
    "NormalizedRecord",
    "first_non_empty",
    "normalize_date",
    "normalize_record",
]
