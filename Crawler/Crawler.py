"""
Crawler/Crawler.py — One bounded crawl of a web application.

Drives the full sequence for a target URL: root page load, consent
dismissal, optional login, depth-first traversal, site-file probing,
feature inference and summary aggregation.
"""
from __future__ import annotations

import asyncio
import enum
import logging
from typing import Optional
from urllib.parse import urlparse

from Analyzer import analyze_features, build_summary
from Auth import AuthManager
from Browser import BrowserSession, Navigator
from Extractor import PageExtractor
from Models import CrawlError, CrawlResult, CrawlSettings, LoginCredentials
from Probe import SiteProbe
from Spider import Spider

logger = logging.getLogger(__name__)


class CrawlState(enum.Enum):
    IDLE = "idle"
    ROOT_LOADED = "root_loaded"
    TRAVERSING = "traversing"
    DONE = "done"
    FAILED = "failed"


class SiteCrawler:
    """Crawls one site per :meth:`crawl_site` call on a single browser session.

    Usage::

        async with SiteCrawler(CrawlSettings(max_pages=20)) as crawler:
            result = await crawler.crawl_site("https://example.com", credentials)

    Fatal failures (session start, root page, login controls) raise and no
    partial result is returned. Everything else ends up in
    ``result.summary.errors``.
    """

    def __init__(
        self,
        settings: Optional[CrawlSettings] = None,
        shutdown_event: Optional[asyncio.Event] = None,
        probe_site_files: bool = True,
    ) -> None:
        self.settings = settings or CrawlSettings()
        self.shutdown_event = shutdown_event
        self.probe_site_files = probe_site_files
        self.session = BrowserSession(self.settings)
        self.state = CrawlState.IDLE

    async def __aenter__(self) -> "SiteCrawler":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def initialize(self) -> None:
        """Start the browser session; failures propagate."""
        await self.session.initialize()

    async def close(self) -> None:
        await self.session.close()

    # ------------------------------------------------------------------
    # Crawl
    # ------------------------------------------------------------------

    async def crawl_site(
        self,
        target_url: str,
        credentials: Optional[LoginCredentials] = None,
    ) -> CrawlResult:
        """Crawl *target_url*, logging in first when *credentials* are given.

        Raises :class:`~Models.CrawlError` when the session is not
        initialized, the target is not an http(s) URL, or the root page
        cannot be loaded; :class:`~Models.AuthenticationError` when a login
        control cannot be used.
        """
        if not self.session.is_open:
            raise CrawlError("Crawler not initialized. Call initialize() first.")

        parsed = urlparse(target_url)
        if parsed.scheme not in {"http", "https"} or not parsed.hostname:
            raise CrawlError(f"Target must be an absolute http(s) URL, got {target_url!r}")

        page = self.session.page
        navigator = Navigator(page, self.settings)
        extractor = PageExtractor(page, self.settings, crawl_host=parsed.hostname)
        spider = Spider(navigator, extractor, self.settings, self.shutdown_event)
        result = CrawlResult()

        self.state = CrawlState.IDLE
        try:
            if self._cancelled():
                raise CrawlError(f"Crawl cancelled before loading {target_url}")
            try:
                await navigator.navigate_to_url(target_url)
            except Exception as exc:
                raise CrawlError(f"Failed to load {target_url}: {exc}") from exc
            self.state = CrawlState.ROOT_LOADED

            await navigator.handle_consent_popups()

            if credentials is not None:
                # The spider records the cancellation when it sees the event.
                if self._cancelled():
                    logger.info("Shutdown requested — skipping login")
                else:
                    await AuthManager(navigator).authenticate(credentials)

            self.state = CrawlState.TRAVERSING
            await spider.crawl(target_url, result)

            if self.probe_site_files:
                async with SiteProbe(self.settings.user_agent) as probe:
                    result.site_files = await probe.probe(target_url)

            result.features = analyze_features(result.pages)
            result.summary = build_summary(result.pages, result.summary.errors)
        except BaseException:
            self.state = CrawlState.FAILED
            logger.error("Crawl of %s failed", target_url)
            raise

        self.state = CrawlState.DONE
        logger.info(
            "Crawl of %s complete: %d pages, %d errors",
            target_url,
            result.summary.total_pages,
            len(result.summary.errors),
        )
        return result

    def _cancelled(self) -> bool:
        return self.shutdown_event is not None and self.shutdown_event.is_set()


async def crawl(
    target_url: str,
    credentials: Optional[LoginCredentials] = None,
    settings: Optional[CrawlSettings] = None,
    timeout: Optional[float] = None,
) -> CrawlResult:
    """Run one crawl in its own browser session.

    *timeout* bounds the whole crawl in seconds; the session is released on
    timeout like on any other exit path.
    """
    async with SiteCrawler(settings) as crawler:
        return await asyncio.wait_for(crawler.crawl_site(target_url, credentials), timeout)
