"""
Terminal output formatter for CLI.

Handles all display logic - no business logic, just presentation.
"""

from pagediff.models import ComparisonResult, Difference
from pagediff.summary import count_by_category, filter_differences, sort_differences

DETAIL_WIDTH = 100


def print_comparison_summary(
    result: ComparisonResult,
    query: str | None = None,
    sort_by: str = "id",
    descending: bool = False,
) -> None:
    """
    Print a human-readable summary of a comparison to terminal.

    Shows per-category counts followed by the (optionally searched and
    sorted) list of differences.

    Args:
        result: ComparisonResult to display
        query: Only list differences matching this search text
        sort_by: Summary column to sort by
        descending: Reverse the sort order
    """
    print("\n" + "=" * 80)
    print("PAGE DIFFERENCE SUMMARY")
    print("=" * 80)
    print(f"\nSource:  {result.source_url or 'N/A'}")
    print(f"Current: {result.current_url or 'N/A'}")

    if result.finished_at:
        duration = (result.finished_at - result.started_at).total_seconds()
        print(f"Duration: {duration:.2f} seconds")

    print(f"\n{'=' * 80}")
    print(f"Differences Detected: {result.count}")
    print(f"{'=' * 80}\n")

    if not result.has_differences:
        print("✓ No content differences detected.\n")
        _print_errors(result)
        return

    for category, count in count_by_category(result.differences).items():
        print(f"  {category.label:<22} {count}")

    listed = sort_differences(filter_differences(result.differences, query), sort_by, descending)
    if query:
        print(f"\nMatching \"{query}\": {len(listed)} / {result.count}")

    print()
    for diff in listed:
        _print_difference(diff)

    _print_errors(result)


def _print_difference(diff: Difference) -> None:
    detail = diff.detail
    if len(detail) > DETAIL_WIDTH:
        detail = detail[:DETAIL_WIDTH] + "..."
    print(f"  {diff.visual_kind.icon} [{diff.id}] {diff.category.label}: {detail}")


def _print_errors(result: ComparisonResult) -> None:
    """
    Print errors from a comparison in a readable format.

    Args:
        result: ComparisonResult containing errors
    """
    if result.fetch_errors:
        print("\n  Fetch Errors:")
        for error in result.fetch_errors:
            print(f"    • {error}")

    if result.classification_errors:
        print("\n  Classification Errors:")
        for error in result.classification_errors:
            print(f"    • {error}")
