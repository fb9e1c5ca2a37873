"""CSV ingest: read a source file into raw records.

Parsing follows RFC 4180 via the stdlib :mod:`csv` module. The header row is
required and rows may not carry extra non-blank cells. Header names and cell
values are trimmed, rows whose cells are all empty are skipped, and a UTF-8
byte-order mark is tolerated.
"""

from __future__ import annotations

import csv
from os import PathLike
from pathlib import Path
from typing import TextIO


def read_rows(f: TextIO) -> list[dict[str, str]]:
    """Read all data rows from an open text stream.

    A row with more non-blank cells than the header raises :class:`csv.Error`;
    this is typically an unquoted decimal comma (``Uber,25,90``) that would
    otherwise silently truncate the amount.
    """

    reader = csv.DictReader(f)
    rows: list[dict[str, str]] = []
    for row in reader:
        # DictReader collects surplus cells under a ``None`` key.
        surplus = row.pop(None, None) or []
        if any(cell.strip() for cell in surplus):
            raise csv.Error(
                f"line {reader.line_num}: expected {len(reader.fieldnames or ())} "
                f"columns, got {len(reader.fieldnames or ()) + len(surplus)} "
                "(unquoted comma in a value?)"
            )
        normalized = {
            k.strip(): (v.strip() if v is not None else "") for k, v in row.items()
        }
        if all(v == "" for v in normalized.values()):
            continue
        rows.append(normalized)
    return rows


def read_source_rows(csv_path: str | PathLike[str]) -> list[dict[str, str]]:
    """Open ``csv_path`` (UTF-8) and return its rows.

    ``FileNotFoundError`` propagates so callers can decide whether a missing
    source is fatal.
    """

    with Path(csv_path).open(encoding="utf-8-sig", newline="") as f:
        return read_rows(f)


__all__ = ["read_rows", "read_source_rows"]
