"""
Page Difference Engine.

Core engine for detecting content differences between a source snapshot and
a current rendering of a web page. Designed to be reusable by CLI and future
API implementations.
"""

# Core models
# Main orchestrator
from .comparator import PageComparator
from .document import Document, SoupDocument
from .models import (
    CompareOptions,
    ComparisonResult,
    Difference,
    DifferenceCategory,
    LinkRecord,
    PageSnapshot,
    SourceIndex,
    VisualKind,
)

__all__ = [
    # Models
    "CompareOptions",
    "ComparisonResult",
    "Difference",
    "DifferenceCategory",
    "LinkRecord",
    "PageSnapshot",
    "SourceIndex",
    "VisualKind",
    # Documents
    "Document",
    "SoupDocument",
    # Main entry point
    "PageComparator",
]
