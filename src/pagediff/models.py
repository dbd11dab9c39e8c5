"""
Core data models for the page difference engine.

All models are pure data structures that can be serialized and reused
by both CLI and future API implementations.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Mapping


class DifferenceCategory(str, Enum):
    """Kind of content change detected between the two documents."""

    HEADING_CHANGE = "Heading Change"
    PARAGRAPH_CHANGE = "Paragraph Change"
    GENERAL_TEXT_CHANGE = "General Text Change"
    CTA_TEXT_CHANGE = "CTA Text Change"
    MODIFIED_LINK = "Modified Link"
    NEW_LINK = "New Link"
    IMAGE_CHANGE = "Image Change"
    REMOVED_TEXT = "Removed Text"
    REMOVED_LINK = "Removed Link"

    @property
    def label(self) -> str:
        return self.value


# color, icon, treatment
_VISUAL_STYLES = {
    "HEADING": ("#FFC300", "✍️", "background"),
    "PARAGRAPH": ("#FFFAA0", "📄", "background"),
    "GENERAL_TEXT": ("#E0E0E0", "📝", "background"),
    "CTA_TEXT": ("#DA70D6", "💬", "background"),
    "MODIFIED_LINK": ("#FF4136", "↔️", "border"),
    "NEW_LINK": ("#FF4136", "✨", "border"),
    "IMAGE": ("#82CA9D", "🖼️", "marker"),
    "REMOVED": ("#B0C4DE", "❌", "none"),
}


class VisualKind(Enum):
    """
    Styling family used by renderers to mark a difference.

    Each kind maps to a fixed color, icon and treatment.
    """

    HEADING = "HEADING"
    PARAGRAPH = "PARAGRAPH"
    GENERAL_TEXT = "GENERAL_TEXT"
    CTA_TEXT = "CTA_TEXT"
    MODIFIED_LINK = "MODIFIED_LINK"
    NEW_LINK = "NEW_LINK"
    IMAGE = "IMAGE"
    REMOVED = "REMOVED"

    @property
    def color(self) -> str:
        return _VISUAL_STYLES[self.value][0]

    @property
    def icon(self) -> str:
        return _VISUAL_STYLES[self.value][1]

    @property
    def treatment(self) -> str:
        """One of 'background', 'border', 'marker' or 'none'."""
        return _VISUAL_STYLES[self.value][2]


CATEGORY_VISUAL_KINDS = {
    DifferenceCategory.HEADING_CHANGE: VisualKind.HEADING,
    DifferenceCategory.PARAGRAPH_CHANGE: VisualKind.PARAGRAPH,
    DifferenceCategory.GENERAL_TEXT_CHANGE: VisualKind.GENERAL_TEXT,
    DifferenceCategory.CTA_TEXT_CHANGE: VisualKind.CTA_TEXT,
    DifferenceCategory.MODIFIED_LINK: VisualKind.MODIFIED_LINK,
    DifferenceCategory.NEW_LINK: VisualKind.NEW_LINK,
    DifferenceCategory.IMAGE_CHANGE: VisualKind.IMAGE,
    DifferenceCategory.REMOVED_TEXT: VisualKind.REMOVED,
    DifferenceCategory.REMOVED_LINK: VisualKind.REMOVED,
}


@dataclass(frozen=True)
class CompareOptions:
    """
    Behaviour switches for a comparison run.

    Frozen so a run cannot change its own configuration halfway through.
    """

    ui_container_id: str = "pce-ui-container"
    excluded_tags: frozenset[str] = frozenset({"script", "style"})
    # Report images whose src/srcset yield no file name at all
    report_unnamed_images: bool = True


@dataclass(frozen=True)
class LinkRecord:
    """A link as stored in the source index."""

    url: str | None
    text: str  # Normalized visible text, used for matching
    label: str = ""  # Visible text with original casing, used in messages


@dataclass(frozen=True)
class SourceIndex:
    """
    Snapshot of the reference document used for matching.

    Built once per comparison and never mutated afterwards.
    """

    texts: frozenset[str]
    text_order: tuple[str, ...]  # First-seen order of texts, for stable reporting
    links_by_url: Mapping[str, LinkRecord]
    links_by_text: Mapping[str, LinkRecord]
    image_names: frozenset[str]
    # Every (url, text) pair seen, so duplicate URLs with different texts still match
    link_pairs: frozenset[tuple[str | None, str]] = frozenset()

    def has_text(self, text: str) -> bool:
        return text in self.texts


@dataclass(frozen=True)
class Difference:
    """
    One classified content change.

    Created by the classifier without an id; the registry hands back a copy
    carrying its assigned identifier.
    """

    category: DifferenceCategory
    detail: str
    visual_kind: VisualKind
    target: Any = field(default=None, compare=False, repr=False)
    target_tag: str | None = None
    id: str | None = None

    @property
    def is_removal(self) -> bool:
        return self.target is None

    def to_dict(self) -> dict:
        """Convert difference to dictionary for serialization."""
        return {
            "id": self.id,
            "category": self.category.label,
            "visual_kind": self.visual_kind.value,
            "icon": self.visual_kind.icon,
            "detail": self.detail,
            "target_tag": self.target_tag,
        }


@dataclass
class PageSnapshot:
    """
    HTML of one page as acquired by a fetcher.

    Represents either the source or the current rendering.
    """

    url: str  # Final URL after redirects
    original_url: str  # URL as requested
    html: str
    status_code: int | None = None  # Not available for rendered pages
    rendered: bool = False
    fetch_time_ms: int = 0

    @property
    def success(self) -> bool:
        """Check if the page was acquired with a usable status."""
        if self.status_code is None:
            return True
        return 200 <= self.status_code < 300


@dataclass
class ComparisonResult:
    """
    Complete output of one comparison run.

    Holds only the differences of the latest pair of documents.
    """

    started_at: datetime
    finished_at: datetime | None
    source_url: str | None
    current_url: str | None
    differences: list[Difference] = field(default_factory=list)

    # Errors
    fetch_errors: list[str] = field(default_factory=list)
    classification_errors: list[str] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.differences)

    @property
    def success(self) -> bool:
        """A run succeeds when both documents were acquired."""
        return len(self.fetch_errors) == 0

    @property
    def has_differences(self) -> bool:
        return len(self.differences) > 0

    def differences_of(self, category: DifferenceCategory) -> list[Difference]:
        """Get all differences of one category, in emission order."""
        return [diff for diff in self.differences if diff.category is category]

    def to_dict(self) -> dict:
        """
        Convert result to dictionary for serialization.

        Used for JSON/CSV export and API responses.
        """
        return {
            "source_url": self.source_url,
            "current_url": self.current_url,
            "started_at": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "difference_count": self.count,
            "differences": [diff.to_dict() for diff in self.differences],
            "fetch_errors": self.fetch_errors,
            "classification_errors": self.classification_errors,
            "success": self.success,
        }
