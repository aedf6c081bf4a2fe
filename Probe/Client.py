"""
Probe/Client.py — Existence probes for ``/robots.txt`` and ``/sitemap.xml``.

Probing is fire-and-forget: every request has a fixed timeout and any
failure simply reports the file as absent. Nothing here raises.
"""
from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import urlparse

import httpx

from Models import SiteFiles

logger = logging.getLogger(__name__)


class SiteProbe:
    """Async HEAD-request prober for well-known files at a site root.

    Usage::

        async with SiteProbe() as probe:
            files = await probe.probe("https://example.com/shop")
    """

    #: Per-request timeout, in seconds.
    TIMEOUT: float = 5.0

    def __init__(self, user_agent: Optional[str] = None) -> None:
        headers = {"User-Agent": user_agent} if user_agent else None
        self._http = httpx.AsyncClient(
            timeout=self.TIMEOUT,
            follow_redirects=True,
            headers=headers,
        )

    async def __aenter__(self) -> "SiteProbe":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def probe(self, target_url: str) -> SiteFiles:
        """Return which of the well-known files exist at *target_url*'s origin."""
        parsed = urlparse(target_url)
        base = f"{parsed.scheme}://{parsed.netloc}"
        return SiteFiles(
            has_robots_txt=await self.exists(f"{base}/robots.txt"),
            has_sitemap_xml=await self.exists(f"{base}/sitemap.xml"),
        )

    async def exists(self, url: str) -> bool:
        """Return *True* if a HEAD request to *url* answers with status < 400."""
        try:
            resp = await self._http.head(url)
        except httpx.HTTPError as exc:
            logger.debug("Probe of %s failed: %s", url, exc)
            return False
        logger.debug("Probe of %s -> HTTP %d", url, resp.status_code)
        return resp.status_code < 400

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._http.aclose()
