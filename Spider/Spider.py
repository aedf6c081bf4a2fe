"""
Spider/Spider.py — Bounded depth-first traversal of same-site pages.

Starting from the root URL the spider visits internal links depth-first, in
the order they appear in the DOM, stopping at the page and depth limits.
Each visited page is navigated, extracted and appended to the crawl result;
navigation regions are read once, from the root page.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Optional

from Browser import Navigator
from Extractor import PageExtractor
from Models import CrawlError, CrawlResult, CrawlSettings, PageData

logger = logging.getLogger(__name__)


class Spider:
    """Depth-first crawler over one browser page.

    Uses an explicit LIFO work-list of ``(url, depth)`` entries; children are
    pushed in reverse so entries pop in the same order a recursive visit
    would reach them. The visited set lives on the instance, so one
    :class:`Spider` serves exactly one crawl.
    """

    def __init__(
        self,
        navigator: Navigator,
        extractor: PageExtractor,
        settings: CrawlSettings,
        shutdown_event: Optional[asyncio.Event] = None,
    ) -> None:
        self.navigator = navigator
        self.extractor = extractor
        self.settings = settings
        self.shutdown_event = shutdown_event

        self._visited: set[str] = set()

    @property
    def visited(self) -> frozenset[str]:
        return frozenset(self._visited)

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    async def crawl(self, root_url: str, result: CrawlResult) -> None:
        """Visit *root_url* and its internal links, accumulating into *result*.

        Failing to load the root page raises :class:`~Models.CrawlError`. Any
        other failure, including extraction on the root page, is recorded in
        ``result.summary.errors`` and the crawl moves on to the next entry.
        """
        work: list[tuple[str, int]] = [(root_url, 0)]

        while work:
            url, depth = work.pop()

            if self._should_stop(url, depth, result):
                continue

            if self.shutdown_event is not None and self.shutdown_event.is_set():
                logger.info("Shutdown requested — stopping before %s", url)
                result.summary.errors.append(f"Crawl cancelled before visiting {url}")
                break

            self._visited.add(url)
            try:
                await self.navigator.navigate_to_url(url)
            except Exception as exc:
                if depth == 0:
                    raise CrawlError(f"Failed to crawl {url}: {exc}") from exc
                self._record_failure(url, exc, result)
                continue

            try:
                page_data = await self._collect(url, depth, result)
            except Exception as exc:
                self._record_failure(url, exc, result)
                continue

            children = self._select_links(page_data)
            work.extend((link, depth + 1) for link in reversed(children))

    # ------------------------------------------------------------------
    # Page visit
    # ------------------------------------------------------------------

    async def _collect(self, url: str, depth: int, result: CrawlResult) -> PageData:
        """Extract the loaded page and append it to *result*.

        At depth 0 the navigation regions are read as well; if that fails
        the page is kept and the failure is recorded.
        """
        page_data = await self.extractor.extract(url)

        result.pages.append(page_data)
        result.sitemap.append(url)
        logger.info(
            "Crawled %s (depth=%d, forms=%d, links=%d, errors=%d)",
            url,
            depth,
            len(page_data.forms),
            len(page_data.links),
            len(page_data.errors),
        )

        if depth == 0:
            try:
                result.navigation = await self.extractor.extract_navigation()
            except Exception as exc:
                self._record_failure(url, exc, result)

        return page_data

    @staticmethod
    def _record_failure(url: str, exc: Exception, result: CrawlResult) -> None:
        logger.warning("Failed to crawl %s: %s", url, exc)
        result.summary.errors.append(f"Failed to crawl {url}: {exc}")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _should_stop(self, url: str, depth: int, result: CrawlResult) -> bool:
        """Return *True* if *url* must not be visited at *depth*."""
        if depth > self.settings.max_depth:
            return True
        if len(result.pages) >= self.settings.max_pages:
            return True
        return url in self._visited

    def _select_links(self, page_data: PageData) -> list[str]:
        """Return the first ``max_links_per_page`` unvisited internal links, in DOM order.

        Repeated hrefs each take a slot; the visited check skips the repeats
        when they are popped.
        """
        candidates = [
            link.href
            for link in page_data.links
            if link.internal and link.href not in self._visited
        ]
        return candidates[: self.settings.max_links_per_page]
