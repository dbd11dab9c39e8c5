"""
Comparator for orchestrating a full comparison run.

Acquires the two documents, indexes the source, classifies the current
document and collects the result.
"""

import asyncio
import logging
from datetime import datetime

from .classifier import DiffClassifier
from .document import Document, SoupDocument
from .fetcher import FetchError, Fetcher, JSRenderedFetcher, RawHTMLFetcher
from .models import CompareOptions, ComparisonResult, PageSnapshot
from .registry import DiffRegistry
from .source_index import build_source_index

logger = logging.getLogger(__name__)


class PageComparator:
    """
    Orchestrates comparisons between a source and a current document.

    Designed to be reusable by both CLI and future API implementations.
    Session state lives in the registry and is reset at the start of
    every run, so a run only ever reports on its own pair of documents.
    """

    def __init__(
        self,
        options: CompareOptions | None = None,
        fetch_timeout: int = 30000,
        render: bool = False,
        user_agent: str | None = None,
        wait_strategy: str = "network_idle",
        fetcher: Fetcher | None = None,
    ):
        """
        Initialize the comparator.

        Args:
            options: Comparison options (defaults to CompareOptions())
            fetch_timeout: Timeout for fetching/rendering pages in milliseconds
            render: Whether to render pages with JavaScript before comparing
            user_agent: Custom User-Agent header (optional)
            wait_strategy: Wait strategy for JS rendering ('network_idle', 'load', 'timeout')
            fetcher: Fetcher override (optional)
        """
        self.options = options or CompareOptions()
        self.fetch_timeout = fetch_timeout
        self.registry = DiffRegistry()
        self.last_index = None

        if fetcher is not None:
            self.fetcher = fetcher
        elif render:
            self.fetcher = JSRenderedFetcher(user_agent=user_agent, wait_strategy=wait_strategy)
        else:
            self.fetcher = RawHTMLFetcher(user_agent=user_agent)

    def compare(self, source: Document, current: Document) -> ComparisonResult:
        """
        Compare two parsed documents.

        Args:
            source: Reference document
            current: Document to classify

        Returns:
            ComparisonResult for this pair of documents
        """
        started_at = datetime.now()
        self.registry.reset(key_of=current.node_key)

        index = build_source_index(source, self.options)
        self.last_index = index

        classifier = DiffClassifier(index, self.registry, self.options)
        differences = classifier.classify(current)

        logger.info("Comparison finished with %d differences", len(differences))

        return ComparisonResult(
            started_at=started_at,
            finished_at=datetime.now(),
            source_url=getattr(source, "url", None),
            current_url=getattr(current, "url", None),
            differences=differences,
            classification_errors=classifier.errors,
        )

    def compare_html(
        self,
        source_html: str,
        current_html: str,
        source_url: str | None = None,
        current_url: str | None = None,
    ) -> ComparisonResult:
        """
        Parse and compare two HTML strings.

        Args:
            source_html: Markup of the reference page
            current_html: Markup of the page to classify
            source_url: URL of the reference page, used as its base URI (optional)
            current_url: URL of the current page, used as its base URI (optional)

        Returns:
            ComparisonResult for the two pages
        """
        source = SoupDocument.from_html(source_html, url=source_url)
        current = SoupDocument.from_html(current_html, url=current_url)
        return self.compare(source, current)

    async def compare_urls_async(
        self, source_url: str, current_url: str
    ) -> tuple[ComparisonResult, SoupDocument | None]:
        """
        Fetch two pages concurrently and compare them.

        Args:
            source_url: URL of the reference page
            current_url: URL of the page to classify

        Returns:
            Tuple of (ComparisonResult, current document or None if it could not be fetched)
        """
        started_at = datetime.now()

        results = await asyncio.gather(
            self._acquire(source_url),
            self._acquire(current_url),
            return_exceptions=True,
        )

        fetch_errors = [str(result) for result in results if isinstance(result, FetchError)]
        for result in results:
            if isinstance(result, BaseException) and not isinstance(result, FetchError):
                raise result

        if fetch_errors:
            return (
                ComparisonResult(
                    started_at=started_at,
                    finished_at=datetime.now(),
                    source_url=source_url,
                    current_url=current_url,
                    fetch_errors=fetch_errors,
                ),
                None,
            )

        source_snapshot, current_snapshot = results
        source = SoupDocument.from_html(source_snapshot.html, url=source_snapshot.url)
        current = SoupDocument.from_html(current_snapshot.html, url=current_snapshot.url)
        return self.compare(source, current), current

    def compare_urls(
        self, source_url: str, current_url: str
    ) -> tuple[ComparisonResult, SoupDocument | None]:
        """
        Fetch and compare two pages synchronously.

        Convenience method that wraps compare_urls_async.
        """
        return asyncio.run(self.compare_urls_async(source_url, current_url))

    async def _acquire(self, url: str) -> PageSnapshot:
        snapshot, error = await self.fetcher.fetch(url, timeout=self.fetch_timeout)
        if error or snapshot is None:
            raise FetchError(f"{url}: {error or 'no content'}")
        return snapshot
