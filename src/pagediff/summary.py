"""
Search and sort helpers for the difference summary list.
"""

import re
from collections import Counter

from .models import Difference, DifferenceCategory
from .normalizer import normalize_text

SORT_COLUMNS = ("id", "type", "category", "details")

_ID_NUMBER_RE = re.compile(r"(\d+)$")


def filter_differences(differences: list[Difference], query: str | None) -> list[Difference]:
    """
    Keep differences whose category label or detail contains the query.

    Matching is done on normalized text, so it ignores case and spacing.
    """
    needle = normalize_text(query)
    if not needle:
        return list(differences)
    return [
        diff
        for diff in differences
        if needle in normalize_text(f"{diff.visual_kind.icon} {diff.category.label} {diff.detail}")
    ]


def _sort_key(column: str):
    if column == "id":
        # Numeric order, so pce-diff-10 sorts after pce-diff-9
        def by_id(diff: Difference):
            match = _ID_NUMBER_RE.search(diff.id or "")
            return int(match.group(1)) if match else 0

        return by_id
    if column == "type":
        return lambda diff: diff.visual_kind.value
    if column == "category":
        return lambda diff: diff.category.label.lower()
    if column == "details":
        return lambda diff: diff.detail.lower()
    raise ValueError(f"Unknown sort column: {column}. Use one of {', '.join(SORT_COLUMNS)}.")


def sort_differences(
    differences: list[Difference], column: str = "id", descending: bool = False
) -> list[Difference]:
    """
    Sort differences by a summary column.

    Args:
        differences: Differences to sort
        column: One of 'id', 'type', 'category' or 'details'
        descending: Reverse the order

    Returns:
        New sorted list (stable for equal keys)

    Raises:
        ValueError: If the column is unknown
    """
    return sorted(differences, key=_sort_key(column), reverse=descending)


def count_by_category(differences: list[Difference]) -> dict[DifferenceCategory, int]:
    """Count differences per category, in category declaration order."""
    counts = Counter(diff.category for diff in differences)
    return {category: counts[category] for category in DifferenceCategory if counts[category]}
