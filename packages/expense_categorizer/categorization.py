"""Keyword-based categorization.

Matching is a case-insensitive substring test. Categories are visited in
configuration order, and within a category its keywords in configuration
order; the first hit wins. Rules live in an immutable
:class:`~expense_categorizer.models.CategoryRules` value supplied by the
caller, never in module state.
"""

from __future__ import annotations

from .models import UNCATEGORIZED, CategoryRules

# Fallback used only when ``transfer_fallback`` is enabled and no keyword
# matched. Value sign picks between the two categories.
TRANSFER_MARKERS: tuple[str, ...] = ("pix", "transferência", "transferencia")
TRANSFER_INCOME_CATEGORY = "Ride Sharing Income"
TRANSFER_EXPENSE_CATEGORY = "Personal Transfers"


def match_keyword(description: str, rules: CategoryRules) -> str | None:
    """Return the first category whose keyword occurs in ``description``."""

    desc_lower = description.lower()
    for category, keywords in rules.items():
        for keyword in keywords:
            if keyword.lower() in desc_lower:
                return category
    return None


def _transfer_category(desc_lower: str, value: float | None) -> str | None:
    if value is None or not any(marker in desc_lower for marker in TRANSFER_MARKERS):
        return None
    if value > 0:
        return TRANSFER_INCOME_CATEGORY
    if value < 0:
        return TRANSFER_EXPENSE_CATEGORY
    return None


def categorize(
    description: str,
    rules: CategoryRules,
    *,
    value: float | None = None,
    transfer_fallback: bool = False,
) -> str:
    """Assign a category label to ``description``.

    Returns ``"Uncategorized"`` for an empty description or when nothing
    matches. With ``transfer_fallback`` enabled, unmatched Pix/transfer
    descriptions are routed by the sign of ``value`` instead.
    """

    if not description:
        return UNCATEGORIZED

    category = match_keyword(description, rules)
    if category is not None:
        return category

    if transfer_fallback:
        category = _transfer_category(description.lower(), value)
        if category is not None:
            return category

    return UNCATEGORIZED


__all__ = [
    "TRANSFER_MARKERS",
    "TRANSFER_INCOME_CATEGORY",
    "TRANSFER_EXPENSE_CATEGORY",
    "match_keyword",
    "categorize",
]
