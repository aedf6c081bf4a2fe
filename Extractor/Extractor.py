"""
Extractor/Extractor.py — Structured data extraction from a loaded page.

Every facet (screenshot, text, forms, links, images, headings, buttons,
inputs, metadata) is read independently: a facet that fails records a
page-scoped error and the remaining facets still run. DOM reads are batched
into one ``page.evaluate()`` per facet to avoid per-element round-trips.
"""
from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Optional
from urllib.parse import urlparse

from playwright.async_api import Page

from Models import (
    ButtonData,
    CrawlSettings,
    FormData,
    FormFieldData,
    HeadingData,
    ImageData,
    InputData,
    LinkData,
    NavigationData,
    PageData,
)
from Models.Selectors import BREADCRUMB_SELECTORS, FOOTER_NAV_SELECTORS, MAIN_NAV_SELECTORS

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# In-page scripts
# ---------------------------------------------------------------------------

_FORMS_JS = """
() => Array.from(document.querySelectorAll('form')).map(form => ({
    id:     form.id || null,
    name:   form.getAttribute('name'),
    action: form.action || null,
    method: form.method || null,
    fields: Array.from(form.querySelectorAll('input, select, textarea')).map(el => ({
        name:        el.name || null,
        type:        el.type || 'text',
        required:    !!el.required,
        placeholder: 'placeholder' in el ? (el.placeholder || null) : null,
        value:       el.value ?? null,
        label:       (el.labels && el.labels[0] && el.labels[0].textContent || '').trim(),
        options:     el.tagName === 'SELECT'
                         ? Array.from(el.options).map(o => o.text)
                         : null,
    })),
}))
"""

_LINKS_JS = """
() => ({
    origin: window.location.origin,
    links: Array.from(document.querySelectorAll('a[href]')).map(a => ({
        href: a.getAttribute('href') || '',
        text: (a.textContent || '').trim(),
    })),
})
"""

_IMAGES_JS = """
() => Array.from(document.querySelectorAll('img')).map(img => ({
    src:    img.src,
    alt:    img.alt,
    width:  img.width,
    height: img.height,
}))
"""

_HEADINGS_JS = """
() => Array.from(document.querySelectorAll('h1, h2, h3, h4, h5, h6')).map(h => ({
    level: parseInt(h.tagName.charAt(1), 10),
    text:  (h.textContent || '').trim(),
}))
"""

_BUTTONS_JS = """
() => Array.from(
    document.querySelectorAll('button, input[type="button"], input[type="submit"]')
).map(b => ({
    text:      (b.textContent || '').trim() || b.value || '',
    type:      b.type || null,
    id:        b.id || null,
    className: (typeof b.className === 'string' ? b.className : '') || null,
}))
"""

_INPUTS_JS = """
() => Array.from(document.querySelectorAll('input, select, textarea')).map(el => ({
    type:        el.type || el.tagName.toLowerCase(),
    name:        el.name || null,
    id:          el.id || null,
    placeholder: 'placeholder' in el ? (el.placeholder || null) : null,
    required:    !!el.required,
    value:       el.value ?? null,
}))
"""

_METADATA_JS = """
() => {
    const meta = {};
    document.querySelectorAll('meta').forEach(tag => {
        const name = tag.getAttribute('name') || tag.getAttribute('property');
        const content = tag.getAttribute('content');
        if (name && content) meta[name] = content;
    });
    meta.title      = document.title;
    meta.url        = window.location.href;
    meta.hasJQuery  = typeof window.jQuery !== 'undefined';
    meta.hasReact   = document.querySelector('[data-reactroot]') !== null;
    meta.hasVue     = document.querySelector('[data-v-app], [data-server-rendered]') !== null;
    meta.hasAngular = document.querySelector('[ng-app], [data-ng-app], [ng-version]') !== null;
    return meta;
}
"""

# Receives [mainSelectors, footerSelectors, breadcrumbSelectors]
_NAVIGATION_JS = """
([mainSel, footerSel, crumbSel]) => {
    const region = selectors => {
        for (const sel of selectors) {
            const el = document.querySelector(sel);
            if (el) {
                return Array.from(el.querySelectorAll('a')).map(a => ({
                    href: a.href,
                    text: (a.textContent || '').trim(),
                }));
            }
        }
        return [];
    };
    return {
        mainNavigation:   region(mainSel),
        footerNavigation: region(footerSel),
        breadcrumbs:      region(crumbSel),
    };
}
"""


# ---------------------------------------------------------------------------
# Link classification
# ---------------------------------------------------------------------------


def classify_link(href: str, text: str, origin: str, crawl_host: str) -> LinkData:
    """Classify a raw ``href`` attribute as internal or external.

    Internal means root-relative (``/path``) or pointing at a host that
    contains *crawl_host*. Root-relative hrefs are made absolute against
    *origin*; protocol-relative hrefs (``//host/path``) take *origin*'s
    scheme.
    """
    if href.startswith("//"):
        scheme = urlparse(origin).scheme or "https"
        href = f"{scheme}:{href}"
    elif href.startswith("/"):
        return LinkData(href=origin.rstrip("/") + href, text=text, internal=True)

    host = (urlparse(href).hostname or "").lower()
    internal = bool(crawl_host) and crawl_host.lower() in host
    return LinkData(href=href, text=text, internal=internal)


# ---------------------------------------------------------------------------
# Extractor
# ---------------------------------------------------------------------------


class PageExtractor:
    """Reads one :class:`~Models.PageData` from the page currently loaded.

    *crawl_host* is the hostname of the crawl's target URL; links are
    internal relative to it.
    """

    def __init__(self, page: Page, settings: CrawlSettings, crawl_host: str) -> None:
        self.page = page
        self.settings = settings
        self.crawl_host = crawl_host

    async def extract(self, url: str) -> PageData:
        """Capture a screenshot and every data facet of the current page."""
        page_data = PageData(url=url)

        facets: list[tuple[str, Callable[[PageData], Awaitable[None]]]] = [
            ("Title", self._read_title),
            ("Screenshot", self._read_screenshot),
            ("Content", self._read_content),
            ("Form", self._read_forms),
            ("Link", self._read_links),
            ("Image", self._read_images),
            ("Heading", self._read_headings),
            ("Button", self._read_buttons),
            ("Input", self._read_inputs),
            ("Metadata", self._read_metadata),
        ]
        for name, reader in facets:
            try:
                await reader(page_data)
            except Exception as exc:
                message = (
                    f"Screenshot capture failed: {exc}"
                    if name == "Screenshot"
                    else f"{name} extraction failed: {exc}"
                )
                logger.debug("%s for %s", message, url)
                page_data.errors.append(message)

        return page_data

    async def extract_navigation(self) -> NavigationData:
        """Return the main, footer and breadcrumb navigation of the current page.

        For each region the first matching selector of its table supplies
        all of the region's links.
        """
        raw = await self.page.evaluate(
            _NAVIGATION_JS,
            [list(MAIN_NAV_SELECTORS), list(FOOTER_NAV_SELECTORS), list(BREADCRUMB_SELECTORS)],
        )
        return NavigationData(
            main_navigation=self._nav_links(raw.get("mainNavigation")),
            footer_navigation=self._nav_links(raw.get("footerNavigation")),
            breadcrumbs=self._nav_links(raw.get("breadcrumbs")),
        )

    # ------------------------------------------------------------------
    # Facet readers
    # ------------------------------------------------------------------

    async def _read_title(self, page_data: PageData) -> None:
        page_data.title = await self.page.title()

    async def _read_screenshot(self, page_data: PageData) -> None:
        page_data.screenshot = await self.page.screenshot(
            type="jpeg",
            quality=self.settings.screenshot_quality,
        )

    async def _read_content(self, page_data: PageData) -> None:
        page_data.content = await self.page.text_content("body") or ""

    async def _read_forms(self, page_data: PageData) -> None:
        raw = await self.page.evaluate(_FORMS_JS)
        page_data.forms = [
            FormData(
                id=f.get("id"),
                name=f.get("name"),
                action=f.get("action"),
                method=f.get("method"),
                fields=[FormFieldData(**field) for field in f.get("fields", [])],
            )
            for f in raw
        ]

    async def _read_links(self, page_data: PageData) -> None:
        raw = await self.page.evaluate(_LINKS_JS)
        origin = raw["origin"]
        page_data.links = [
            classify_link(link["href"], link["text"], origin, self.crawl_host)
            for link in raw["links"]
        ]

    async def _read_images(self, page_data: PageData) -> None:
        raw = await self.page.evaluate(_IMAGES_JS)
        page_data.images = [ImageData(**img) for img in raw]

    async def _read_headings(self, page_data: PageData) -> None:
        raw = await self.page.evaluate(_HEADINGS_JS)
        page_data.headings = [HeadingData(**h) for h in raw]

    async def _read_buttons(self, page_data: PageData) -> None:
        raw = await self.page.evaluate(_BUTTONS_JS)
        page_data.buttons = [
            ButtonData(
                text=b.get("text", ""),
                type=b.get("type"),
                id=b.get("id"),
                class_name=b.get("className"),
            )
            for b in raw
        ]

    async def _read_inputs(self, page_data: PageData) -> None:
        raw = await self.page.evaluate(_INPUTS_JS)
        page_data.inputs = [InputData(**i) for i in raw]

    async def _read_metadata(self, page_data: PageData) -> None:
        raw: dict[str, Any] = await self.page.evaluate(_METADATA_JS)
        page_data.metadata = dict(raw)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _nav_links(self, raw: Optional[list[dict]]) -> list[LinkData]:
        return [
            LinkData(
                href=link["href"],
                text=link.get("text", ""),
                internal=self.crawl_host.lower() in (urlparse(link["href"]).hostname or ""),
            )
            for link in raw or []
        ]
