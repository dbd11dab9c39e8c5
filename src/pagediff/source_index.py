"""
Source index construction.

Snapshots the reference document into lookup structures the classifier
reads from. The source tree itself is never modified.
"""

import logging
from types import MappingProxyType

from .document import Document
from .models import CompareOptions, LinkRecord, SourceIndex
from .normalizer import (
    collapse_whitespace,
    extract_file_name,
    extract_responsive_file_names,
    normalize_text,
)
from .walker import DEFAULT_OPTIONS, collect_text_leaves, element_text

logger = logging.getLogger(__name__)


def image_candidate_names(document: Document, image) -> list[str]:
    """
    Candidate file names of an image: primary source first, then srcset entries.

    Args:
        document: Document owning the image
        image: Image element

    Returns:
        Distinct file names in discovery order (possibly empty)
    """
    names: list[str] = []

    primary = extract_file_name(document.get_attribute(image, "src"), document.base_url)
    if primary:
        names.append(primary)

    srcset = document.get_attribute(image, "srcset")
    for name in extract_responsive_file_names(srcset, document.base_url):
        if name not in names:
            names.append(name)

    return names


def link_record(document: Document, anchor, options: CompareOptions = DEFAULT_OPTIONS) -> LinkRecord:
    """Build the comparable record of an anchor element."""
    raw_text = element_text(document, anchor, options)
    return LinkRecord(
        url=document.resolve_url(document.get_attribute(anchor, "href")),
        text=normalize_text(raw_text),
        label=collapse_whitespace(raw_text),
    )


def iter_links(document: Document):
    """Anchor elements that carry an href attribute."""
    for anchor in document.elements_by_tag("a"):
        if document.get_attribute(anchor, "href") is not None:
            yield anchor


def build_source_index(document: Document, options: CompareOptions = DEFAULT_OPTIONS) -> SourceIndex:
    """
    Build the lookup index of the reference document.

    Args:
        document: Source document
        options: Comparison options

    Returns:
        Immutable SourceIndex
    """
    # dict keeps first-seen order while de-duplicating
    texts: dict[str, None] = {}
    for node in collect_text_leaves(document, options=options):
        texts.setdefault(normalize_text(document.text_value(node)), None)

    links_by_url: dict[str, LinkRecord] = {}
    links_by_text: dict[str, LinkRecord] = {}
    link_pairs: set[tuple[str | None, str]] = set()
    for anchor in iter_links(document):
        record = link_record(document, anchor, options)
        link_pairs.add((record.url, record.text))
        if record.url is not None:
            links_by_url[record.url] = record
        if record.text:
            links_by_text[record.text] = record

    image_names: set[str] = set()
    for image in document.elements_by_tag("img"):
        image_names.update(image_candidate_names(document, image))

    logger.debug(
        "Indexed source: %d texts, %d link urls, %d link texts, %d image names",
        len(texts),
        len(links_by_url),
        len(links_by_text),
        len(image_names),
    )

    return SourceIndex(
        texts=frozenset(texts),
        text_order=tuple(texts),
        links_by_url=MappingProxyType(links_by_url),
        links_by_text=MappingProxyType(links_by_text),
        image_names=frozenset(image_names),
        link_pairs=frozenset(link_pairs),
    )
