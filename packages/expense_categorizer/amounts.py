"""Value parser: locale-formatted amount text to a signed float.

Parsing is deliberately lenient. The first decimal comma becomes a period,
every character other than digits, ``.`` and ``-`` is dropped, and the
longest leading numeric prefix is used (``"1.234.56"`` parses as ``1.234``).
Text with no numeric prefix yields ``0.0`` flagged as malformed so callers
can report it without poisoning totals.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from .models import SourceType

_DISALLOWED_RE = re.compile(r"[^0-9.\-]")
_NUMERIC_PREFIX_RE = re.compile(r"-?(?:\d+(?:\.\d*)?|\.\d+)")


@dataclass(frozen=True, slots=True)
class ParsedAmount:
    value: float
    malformed: bool = False


def clean_amount_text(raw: str) -> str:
    return _DISALLOWED_RE.sub("", raw.replace(",", ".", 1))


def parse_amount(raw: str, source_type: SourceType | str) -> ParsedAmount:
    """Parse ``raw`` and apply the sign convention of ``source_type``.

    ``credit`` sources always produce a non-positive value; ``debit`` sources
    keep the parsed sign.
    """

    st = SourceType(source_type)
    m = _NUMERIC_PREFIX_RE.match(clean_amount_text(raw))
    if m is None:
        return ParsedAmount(0.0, malformed=True)

    value = float(m.group(0))
    if st is SourceType.CREDIT:
        value = -abs(value)
    if value == 0:
        # Collapse -0.0 so it never renders as "-0.0".
        value = 0.0
    return ParsedAmount(value)


__all__ = ["ParsedAmount", "clean_amount_text", "parse_amount"]
