"""
Difference classifier.

Walks the current document once per category (text, links, images) plus a
removal pass over the source index, and registers a typed Difference for
every change found.
"""

import logging
from typing import Any, Callable, Iterable

from .document import Document
from .models import (
    CATEGORY_VISUAL_KINDS,
    CompareOptions,
    Difference,
    DifferenceCategory,
    SourceIndex,
)
from .normalizer import normalize_text
from .registry import DiffRegistry
from .source_index import image_candidate_names, iter_links, link_record
from .walker import DEFAULT_OPTIONS, TagKind, classify_tag, collect_text_leaves, nearest_ancestor

logger = logging.getLogger(__name__)

INTERACTIVE_KINDS = (TagKind.ANCHOR, TagKind.BUTTON)


class DiffClassifier:
    """
    Classifies the differences between a source index and a current document.

    The source index is only read. Every difference goes through the
    registry, which drops those whose target was already classified.
    """

    def __init__(
        self,
        index: SourceIndex,
        registry: DiffRegistry,
        options: CompareOptions = DEFAULT_OPTIONS,
    ):
        """
        Initialize the classifier.

        Args:
            index: Index of the source document
            registry: Registry of the current comparison run
            options: Comparison options
        """
        self.index = index
        self.registry = registry
        self.options = options
        self.errors: list[str] = []

    def classify(self, document: Document) -> list[Difference]:
        """
        Classify all differences of a current document.

        Args:
            document: Current document

        Returns:
            Differences registered by this call, in emission order
        """
        emitted: list[Difference] = []
        emitted.extend(
            self._run_pass(
                "text",
                collect_text_leaves(document, options=self.options),
                lambda node: self._classify_text(document, node),
            )
        )
        emitted.extend(
            self._run_pass(
                "link",
                iter_links(document),
                lambda anchor: self._classify_link(document, anchor),
            )
        )
        emitted.extend(
            self._run_pass(
                "image",
                document.elements_by_tag("img"),
                lambda image: self._classify_image(document, image),
            )
        )
        emitted.extend(self._detect_removed(document))

        logger.debug("Classified %d differences", len(emitted))
        return emitted

    def _run_pass(
        self,
        name: str,
        nodes: Iterable[Any],
        classify_node: Callable[[Any], Difference | None],
    ) -> list[Difference]:
        emitted = []
        for node in nodes:
            try:
                difference = classify_node(node)
            except Exception as e:
                # A broken node never aborts the run
                logger.warning("Skipping node in %s pass: %s", name, e)
                self.errors.append(f"{name.capitalize()} classification failed: {str(e)}")
                continue

            if difference is None:
                continue
            registered = self.registry.register(difference)
            if registered is not None:
                emitted.append(registered)
        return emitted

    def _difference(
        self,
        category: DifferenceCategory,
        detail: str,
        document: Document | None = None,
        target: Any = None,
    ) -> Difference:
        return Difference(
            category=category,
            detail=detail,
            visual_kind=CATEGORY_VISUAL_KINDS[category],
            target=target,
            target_tag=document.tag_name(target) if target is not None else None,
        )

    def _classify_text(self, document: Document, node: Any) -> Difference | None:
        text = normalize_text(document.text_value(node))
        if self.index.has_text(text):
            return None

        parent = document.parent(node)
        tag = document.tag_name(parent) or ""
        kind = classify_tag(tag)

        if kind is TagKind.HEADING:
            return self._difference(
                DifferenceCategory.HEADING_CHANGE, f"Text changed in <{tag.upper()}>", document, parent
            )
        if kind is TagKind.PARAGRAPH:
            return self._difference(
                DifferenceCategory.PARAGRAPH_CHANGE, "Text changed in <p>", document, parent
            )

        # Link and button text is the link pass's business
        def is_interactive(element: Any) -> bool:
            return classify_tag(document.tag_name(element)) in INTERACTIVE_KINDS

        if is_interactive(parent) or nearest_ancestor(document, parent, is_interactive):
            return None

        return self._difference(
            DifferenceCategory.GENERAL_TEXT_CHANGE, f"Text changed in <{tag.upper()}>", document, parent
        )

    def _classify_link(self, document: Document, anchor: Any) -> Difference | None:
        current = link_record(document, anchor, self.options)
        if (current.url, current.text) in self.index.link_pairs:
            return None

        # URL match is checked before text match
        by_url = self.index.links_by_url.get(current.url) if current.url is not None else None
        if by_url is not None:
            if by_url.text == current.text:
                return None
            return self._difference(
                DifferenceCategory.CTA_TEXT_CHANGE,
                f'Link text changed from "{by_url.label}"',
                document,
                anchor,
            )

        by_text = self.index.links_by_text.get(current.text) if current.text else None
        if by_text is not None:
            return self._difference(
                DifferenceCategory.MODIFIED_LINK,
                f"URL changed from: {by_text.url or 'N/A'}",
                document,
                anchor,
            )

        url = current.url or document.get_attribute(anchor, "href") or "N/A"
        return self._difference(DifferenceCategory.NEW_LINK, f"URL: {url}", document, anchor)

    def _classify_image(self, document: Document, image: Any) -> Difference | None:
        names = image_candidate_names(document, image)
        if not names and not self.options.report_unnamed_images:
            return None
        if any(name in self.index.image_names for name in names):
            return None

        first = names[0] if names else "N/A"
        return self._difference(DifferenceCategory.IMAGE_CHANGE, f"Filename: {first}", document, image)

    def _detect_removed(self, document: Document) -> list[Difference]:
        """
        Report source texts and link URLs absent from the current document.

        The current document's texts and URLs are indexed once up front.
        """
        current_texts = {
            normalize_text(document.text_value(node))
            for node in collect_text_leaves(document, options=self.options)
        }
        current_urls = {
            document.resolve_url(document.get_attribute(anchor, "href"))
            for anchor in iter_links(document)
        }
        current_urls.discard(None)

        removals = []
        for text in self.index.text_order:
            if text not in current_texts:
                removals.append(
                    self._difference(DifferenceCategory.REMOVED_TEXT, f'Text removed: "{text}"')
                )
        for url in self.index.links_by_url:
            if url not in current_urls:
                removals.append(
                    self._difference(DifferenceCategory.REMOVED_LINK, f"URL removed: {url}")
                )

        return self._run_pass("removal", removals, lambda difference: difference)
