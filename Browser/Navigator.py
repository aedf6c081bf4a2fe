"""
Browser/Navigator.py — Page loads and cookie-consent dismissal.
"""
from __future__ import annotations

import logging
from typing import Optional

from playwright.async_api import Error as PlaywrightError, Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from Models import CrawlSettings
from Models.Selectors import CONSENT_SELECTORS

logger = logging.getLogger(__name__)

#: Visibility wait per consent selector, in milliseconds.
CONSENT_VISIBILITY_TIMEOUT_MS: int = 2_000

#: Pause after clicking a consent button so the overlay can go away.
CONSENT_SETTLE_MS: int = 1_000


class Navigator:
    """Loads URLs on the session page and dismisses consent overlays."""

    def __init__(self, page: Page, settings: CrawlSettings) -> None:
        self.page = page
        self.settings = settings

    @property
    def wait_until(self) -> str:
        return "networkidle" if self.settings.wait_for_network_idle else "load"

    @property
    def current_url(self) -> str:
        return self.page.url

    async def navigate_to_url(self, url: str) -> None:
        """Load *url*, waiting for ``networkidle`` or ``load``.

        DNS, TLS and timeout failures are re-raised to the caller.
        """
        try:
            await self.page.goto(url, wait_until=self.wait_until)
        except PlaywrightError as exc:
            logger.error("Failed to navigate to %s: %s", url, exc)
            raise
        logger.info("Navigated to: %s", url)

    async def handle_consent_popups(self) -> Optional[str]:
        """Click the first visible consent button, if any.

        Best-effort: tries :data:`~Models.Selectors.CONSENT_SELECTORS` in
        order, waiting up to :data:`CONSENT_VISIBILITY_TIMEOUT_MS` for each to
        become visible. Returns the selector that was clicked, or *None* when no
        overlay was found. Never raises.
        """
        for selector in CONSENT_SELECTORS:
            try:
                button = self.page.locator(selector).first
                try:
                    await button.wait_for(state="visible", timeout=CONSENT_VISIBILITY_TIMEOUT_MS)
                except PlaywrightTimeoutError:
                    continue
                await button.click()
                logger.info("Clicked consent button: %s", selector)
                await self.wait(CONSENT_SETTLE_MS)
                return selector
            except PlaywrightError as exc:
                logger.debug("Consent selector %s not usable: %s", selector, exc)

        logger.debug("No consent popup found")
        return None

    async def wait(self, ms: int) -> None:
        await self.page.wait_for_timeout(ms)
