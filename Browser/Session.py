"""
Browser/Session.py — Lifecycle of the single browser and page used by a crawl.

A session owns exactly one Chromium process, one browser context and one
page. Navigation on that page is strictly sequential; concurrent crawls need
one session each.
"""
from __future__ import annotations

import logging
from typing import Optional

from playwright.async_api import (
    Browser,
    BrowserContext,
    Error as PlaywrightError,
    Page,
    Playwright,
    async_playwright,
)

from Models import CrawlError, CrawlSettings

logger = logging.getLogger(__name__)

# Chromium flags required when running as root inside containers
_LAUNCH_ARGS: list[str] = ["--no-sandbox", "--disable-setuid-sandbox"]


class BrowserSession:
    """Owns the Playwright browser and page for one crawl.

    Usage::

        async with BrowserSession(settings) as session:
            await session.page.goto(url)

    :meth:`close` runs on every exit path of the ``async with`` block,
    including errors and task cancellation.
    """

    def __init__(self, settings: CrawlSettings) -> None:
        self.settings = settings
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self._page: Optional[Page] = None

    async def __aenter__(self) -> "BrowserSession":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    @property
    def page(self) -> Page:
        """The session's page; raises :class:`CrawlError` before :meth:`initialize`."""
        if self._page is None:
            raise CrawlError("Browser session not initialized. Call initialize() first.")
        return self._page

    @property
    def is_open(self) -> bool:
        return self._page is not None

    async def initialize(self) -> None:
        """Launch the browser and open the page.

        Applies viewport, default timeout and (when configured) a custom user
        agent. Any failure, cancellation included, releases what was already
        acquired and is re-raised.
        """
        if self._page is not None:
            return

        try:
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(
                headless=self.settings.headless,
                args=_LAUNCH_ARGS,
            )

            context_kwargs: dict = {
                "viewport": {
                    "width": self.settings.viewport.width,
                    "height": self.settings.viewport.height,
                },
            }
            if self.settings.user_agent:
                context_kwargs["user_agent"] = self.settings.user_agent
            self._context = await self._browser.new_context(**context_kwargs)

            self._page = await self._context.new_page()
            self._page.set_default_timeout(self.settings.timeout_ms)
        except BaseException as exc:
            logger.error("Failed to initialize browser session: %r", exc)
            await self.close()
            raise

        logger.info(
            "Browser session initialized (viewport=%dx%d, timeout=%dms)",
            self.settings.viewport.width,
            self.settings.viewport.height,
            self.settings.timeout_ms,
        )

    async def close(self) -> None:
        """Release page, context, browser and Playwright, in that order.

        Idempotent. A failing release step is logged and the remaining steps
        still run.
        """
        page, self._page = self._page, None
        context, self._context = self._context, None
        browser, self._browser = self._browser, None
        playwright, self._playwright = self._playwright, None

        if page is not None and not page.is_closed():
            try:
                await page.close()
            except PlaywrightError as exc:
                logger.debug("Error closing page: %s", exc)
        if context is not None:
            try:
                await context.close()
            except PlaywrightError as exc:
                logger.debug("Error closing browser context: %s", exc)
        if browser is not None:
            try:
                await browser.close()
            except PlaywrightError as exc:
                logger.debug("Error closing browser: %s", exc)
        if playwright is not None:
            try:
                await playwright.stop()
            except PlaywrightError as exc:
                logger.debug("Error stopping Playwright: %s", exc)
            logger.info("Browser session closed")
