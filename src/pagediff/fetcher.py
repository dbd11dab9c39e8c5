"""
Fetcher implementations for acquiring page markup.

Provides both raw HTML fetching (non-JS) and rendered HTML fetching (JS-enabled),
so the source and current documents can be taken from live pages.
"""

import asyncio
import logging
from abc import ABC, abstractmethod

import httpx
from playwright.async_api import Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from .models import PageSnapshot

logger = logging.getLogger(__name__)

WAIT_STRATEGIES = ("network_idle", "load", "timeout")


class FetchError(Exception):
    """Raised when a page needed for a comparison cannot be acquired."""

    pass


class Fetcher(ABC):
    """
    Abstract base class for fetchers.

    Defines the interface for acquiring a page snapshot with or without
    JavaScript execution.
    """

    @abstractmethod
    async def fetch(self, url: str, timeout: int = 30000) -> tuple[PageSnapshot | None, str | None]:
        """
        Fetch a URL.

        Args:
            url: The URL to fetch
            timeout: Timeout in milliseconds

        Returns:
            Tuple of (PageSnapshot, None) on success, or (None, error_message) on failure
        """
        pass


class RawHTMLFetcher(Fetcher):
    """
    Fetches page markup without JavaScript execution.

    Uses httpx for HTTP requests and follows redirects.
    """

    def __init__(
        self,
        user_agent: str | None = None,
        follow_redirects: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the raw HTML fetcher.

        Args:
            user_agent: Custom User-Agent header (optional)
            follow_redirects: Whether to follow HTTP redirects
            transport: httpx transport override (optional, e.g. for tests)
        """
        self.user_agent = user_agent or "Mozilla/5.0 (compatible; PageDiff/1.0)"
        self.follow_redirects = follow_redirects
        self.transport = transport

    async def fetch(self, url: str, timeout: int = 30000) -> tuple[PageSnapshot | None, str | None]:
        """
        Fetch URL without JavaScript execution.

        Non-2xx responses are returned as errors, since their markup is not
        the page that was meant to be compared.
        """
        loop = asyncio.get_running_loop()
        start_time = loop.time()

        try:
            async with httpx.AsyncClient(
                follow_redirects=self.follow_redirects,
                timeout=timeout / 1000.0,
                headers={"User-Agent": self.user_agent},
                transport=self.transport,
            ) as client:
                response = await client.get(url)

            snapshot = PageSnapshot(
                url=str(response.url),
                original_url=url,
                html=response.text,
                status_code=response.status_code,
                fetch_time_ms=int((loop.time() - start_time) * 1000),
            )

        except httpx.TimeoutException:
            logger.warning("Timeout fetching %s", url)
            return None, f"Timeout after {timeout}ms"
        except httpx.HTTPError as e:
            logger.warning("HTTP error fetching %s: %s", url, e)
            return None, f"HTTP error: {str(e)}"
        except Exception as e:
            # httpx.InvalidURL and friends are not HTTPError subclasses
            logger.warning("Unexpected error fetching %s: %s", url, e)
            return None, f"Unexpected error: {str(e)}"

        if not snapshot.success:
            return None, f"HTTP status {snapshot.status_code} for {url}"

        logger.info("Fetched %s (%d bytes, %dms)", snapshot.url, len(snapshot.html), snapshot.fetch_time_ms)
        return snapshot, None


class JSRenderedFetcher(Fetcher):
    """
    Fetches page markup with JavaScript execution enabled.

    Uses Playwright for headless browser rendering. Supports configurable wait strategies.
    """

    def __init__(
        self,
        user_agent: str | None = None,
        wait_strategy: str = "network_idle",
        headless: bool = True,
    ):
        """
        Initialize the JS-enabled fetcher.

        Args:
            user_agent: Custom User-Agent header (optional)
            wait_strategy: Wait strategy ('network_idle', 'load', or 'timeout')
            headless: Whether to run browser in headless mode
        """
        if wait_strategy not in WAIT_STRATEGIES:
            raise ValueError(f"Unknown wait strategy: {wait_strategy}")

        self.user_agent = user_agent
        self.wait_strategy = wait_strategy
        self.headless = headless

    async def fetch(self, url: str, timeout: int = 30000) -> tuple[PageSnapshot | None, str | None]:
        """Fetch URL with JavaScript execution."""
        from playwright.async_api import async_playwright

        loop = asyncio.get_running_loop()
        start_time = loop.time()

        try:
            async with async_playwright() as p:
                browser = await p.chromium.launch(headless=self.headless)
                try:
                    page = await browser.new_page(user_agent=self.user_agent)
                    response = await page.goto(url, wait_until="domcontentloaded", timeout=timeout)
                    if not response:
                        return None, "No response received"

                    await self._wait_for_content(page, timeout)

                    snapshot = PageSnapshot(
                        url=page.url,
                        original_url=url,
                        html=await page.content(),
                        rendered=True,
                        fetch_time_ms=int((loop.time() - start_time) * 1000),
                    )
                finally:
                    await browser.close()

        except PlaywrightTimeoutError:
            logger.warning("Render timeout for %s", url)
            return None, f"Render timeout after {timeout}ms"
        except Exception as e:
            logger.warning("Render error for %s: %s", url, e)
            return None, f"Render error: {str(e)}"

        logger.info("Rendered %s (%dms)", snapshot.url, snapshot.fetch_time_ms)
        return snapshot, None

    async def _wait_for_content(self, page: Page, timeout: int):
        """
        Apply wait strategy to ensure content is loaded.

        Args:
            page: Playwright Page object
            timeout: Timeout in milliseconds
        """
        if self.wait_strategy == "network_idle":
            try:
                await page.wait_for_load_state("networkidle", timeout=timeout)
            except PlaywrightTimeoutError:
                # Keep whatever domcontentloaded produced
                pass
        elif self.wait_strategy == "load":
            await page.wait_for_load_state("load", timeout=timeout)
        else:
            await asyncio.sleep(timeout / 2000.0)
