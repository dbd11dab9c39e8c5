"""
Tree traversal helpers.

Produces the meaningful text leaves of a document and answers ancestor
questions, independently of the concrete tree implementation.
"""

from enum import Enum
from typing import Any, Callable, Iterator

from .document import Document
from .models import CompareOptions

DEFAULT_OPTIONS = CompareOptions()

HEADING_TAGS = frozenset({"h1", "h2", "h3", "h4", "h5", "h6"})


class TagKind(Enum):
    """Closed classification of element tags relevant to diffing."""

    HEADING = "heading"
    PARAGRAPH = "paragraph"
    ANCHOR = "anchor"
    BUTTON = "button"
    IMAGE = "image"
    OTHER = "other"


_TAG_KINDS = {
    "p": TagKind.PARAGRAPH,
    "a": TagKind.ANCHOR,
    "button": TagKind.BUTTON,
    "img": TagKind.IMAGE,
}


def classify_tag(name: str | None) -> TagKind:
    """Map a tag name to its TagKind."""
    if not name:
        return TagKind.OTHER
    name = name.lower()
    if name in HEADING_TAGS:
        return TagKind.HEADING
    return _TAG_KINDS.get(name, TagKind.OTHER)


def iter_preorder(
    document: Document,
    node: Any,
    skip: Callable[[Any], bool] | None = None,
) -> Iterator[Any]:
    """
    Depth-first, pre-order traversal of the descendants of a node.

    Args:
        document: Document owning the node
        node: Node whose descendants are visited (not yielded itself)
        skip: Predicate; elements for which it returns True are not yielded
            and their subtree is not entered

    Yields:
        Descendant nodes in document order
    """
    # Explicit stack so very deep documents don't hit the recursion limit
    stack = list(reversed(document.children(node)))
    while stack:
        current = stack.pop()
        if skip is not None and skip(current):
            continue
        yield current
        stack.extend(reversed(document.children(current)))


def nearest_ancestor(
    document: Document,
    node: Any,
    predicate: Callable[[Any], bool],
) -> Any | None:
    """
    Find the nearest element ancestor of a node matching a predicate.

    The node itself is not considered.
    """
    current = document.parent(node)
    while current is not None:
        if document.is_element(current) and predicate(current):
            return current
        current = document.parent(current)
    return None


def _excluded_subtree(document: Document, options: CompareOptions) -> Callable[[Any], bool]:
    def is_excluded(node: Any) -> bool:
        name = document.tag_name(node)
        if name is None:
            return False
        if name in options.excluded_tags:
            return True
        return document.get_attribute(node, "id") == options.ui_container_id

    return is_excluded


def collect_text_leaves(
    document: Document,
    root: Any = None,
    options: CompareOptions = DEFAULT_OPTIONS,
) -> Iterator[Any]:
    """
    Yield the meaningful text nodes under a root element.

    Text under script/style elements or the injected annotation container is
    skipped, as is text that is blank after trimming. Calling again restarts
    the traversal.

    Args:
        document: Document to walk
        root: Element to start from (defaults to the document root)
        options: Comparison options naming the excluded subtrees

    Yields:
        Text nodes in document order
    """
    start = document.root if root is None else root
    is_excluded = _excluded_subtree(document, options)

    if is_excluded(start) or nearest_ancestor(document, start, is_excluded) is not None:
        return

    for node in iter_preorder(document, start, skip=is_excluded):
        value = document.text_value(node)
        if value is not None and value.strip():
            yield node


def element_text(
    document: Document,
    element: Any,
    options: CompareOptions = DEFAULT_OPTIONS,
) -> str:
    """
    Concatenated text content of an element, with the same exclusions.

    Used as the visible text of anchors.
    """
    is_excluded = _excluded_subtree(document, options)
    parts = []
    for node in iter_preorder(document, element, skip=is_excluded):
        value = document.text_value(node)
        if value is not None:
            parts.append(value)
    return "".join(parts)
