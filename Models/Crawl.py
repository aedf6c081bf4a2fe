"""
Models/Crawl.py — Data types produced by a crawl.

Settings and credentials are supplied by the caller; every other record is
created by the extractor or the spider while a crawl runs and is owned by the
:class:`CrawlResult` that contains it.
"""
from __future__ import annotations

import base64
from dataclasses import dataclass, field
from typing import Any, Optional, Union


def _pick(data: dict, *keys: str, default: Any = None) -> Any:
    """Return the value of the first of *keys* present in *data*."""
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


# ---------------------------------------------------------------------------
# Input configuration
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Viewport:
    """Browser viewport size in CSS pixels."""

    width: int = 1920
    height: int = 1080

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"viewport must be positive, got {self.width}x{self.height}")

    @classmethod
    def parse(cls, value: str) -> "Viewport":
        """Parse a ``WIDTHxHEIGHT`` string such as ``1280x720``."""
        width, sep, height = value.lower().partition("x")
        if not sep:
            raise ValueError(f"viewport must look like WIDTHxHEIGHT, got {value!r}")
        return cls(width=int(width), height=int(height))


@dataclass(frozen=True)
class CrawlSettings:
    """Limits and browser options for one crawl.

    Immutable for the duration of the crawl; unset fields take the defaults
    below.
    """

    max_pages: int = 10
    max_depth: int = 3
    wait_for_network_idle: bool = True
    screenshot_quality: int = 80
    timeout_ms: int = 30_000
    user_agent: Optional[str] = None
    viewport: Viewport = field(default_factory=Viewport)
    max_links_per_page: int = 5
    """Fan-out cap: internal links followed from any single page."""
    headless: bool = True

    def __post_init__(self) -> None:
        if self.max_pages <= 0:
            raise ValueError(f"max_pages must be > 0, got {self.max_pages}")
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be >= 0, got {self.max_depth}")
        if not 0 <= self.screenshot_quality <= 100:
            raise ValueError(
                f"screenshot_quality must be within [0, 100], got {self.screenshot_quality}"
            )
        if self.timeout_ms <= 0:
            raise ValueError(f"timeout_ms must be > 0, got {self.timeout_ms}")
        if self.max_links_per_page <= 0:
            raise ValueError(
                f"max_links_per_page must be > 0, got {self.max_links_per_page}"
            )

    @classmethod
    def from_dict(cls, data: dict) -> "CrawlSettings":
        """Build settings from a JSON-style dict.

        Accepts snake_case keys as well as the camelCase keys used by the web
        front-end (``maxPages``, ``waitForNetworkIdle``, ``timeout`` …).
        Unknown keys are ignored.
        """
        defaults = cls()
        viewport = _pick(data, "viewport")
        if isinstance(viewport, dict):
            viewport = Viewport(
                width=int(viewport.get("width", defaults.viewport.width)),
                height=int(viewport.get("height", defaults.viewport.height)),
            )
        elif isinstance(viewport, str):
            viewport = Viewport.parse(viewport)
        else:
            viewport = defaults.viewport

        return cls(
            max_pages=int(_pick(data, "max_pages", "maxPages", default=defaults.max_pages)),
            max_depth=int(_pick(data, "max_depth", "maxDepth", default=defaults.max_depth)),
            wait_for_network_idle=bool(
                _pick(
                    data,
                    "wait_for_network_idle",
                    "waitForNetworkIdle",
                    default=defaults.wait_for_network_idle,
                )
            ),
            screenshot_quality=int(
                _pick(
                    data,
                    "screenshot_quality",
                    "screenshotQuality",
                    default=defaults.screenshot_quality,
                )
            ),
            timeout_ms=int(
                _pick(data, "timeout_ms", "timeoutMs", "timeout", default=defaults.timeout_ms)
            ),
            user_agent=_pick(data, "user_agent", "userAgent"),
            viewport=viewport,
            max_links_per_page=int(
                _pick(
                    data,
                    "max_links_per_page",
                    "maxLinksPerPage",
                    default=defaults.max_links_per_page,
                )
            ),
            headless=bool(_pick(data, "headless", default=defaults.headless)),
        )


@dataclass(frozen=True)
class LoginCredentials:
    """Credentials for the optional login step.

    Selector fields override the default fallback tables when set. Used at
    most once per crawl and never persisted.
    """

    username: str
    password: str = field(repr=False)
    login_url: Optional[str] = None
    username_selector: Optional[str] = None
    password_selector: Optional[str] = None
    submit_selector: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "LoginCredentials":
        missing = [k for k in ("username", "password") if not data.get(k)]
        if missing:
            raise ValueError(f"credentials missing required keys: {missing}")
        return cls(
            username=data["username"],
            password=data["password"],
            login_url=_pick(data, "login_url", "loginUrl"),
            username_selector=_pick(data, "username_selector", "usernameSelector"),
            password_selector=_pick(data, "password_selector", "passwordSelector"),
            submit_selector=_pick(data, "submit_selector", "submitSelector"),
        )


# ---------------------------------------------------------------------------
# Extracted page records
# ---------------------------------------------------------------------------


@dataclass
class FormFieldData:
    """A single ``input``/``select``/``textarea`` inside a form."""

    name: Optional[str] = None
    type: str = "text"
    required: bool = False
    placeholder: Optional[str] = None
    value: Optional[str] = None
    label: str = ""
    """Text of the first associated ``<label>``."""
    options: Optional[list[str]] = None
    """Option texts, for ``select`` fields only."""


@dataclass
class FormData:
    id: Optional[str] = None
    name: Optional[str] = None
    action: Optional[str] = None
    method: Optional[str] = None
    fields: list[FormFieldData] = field(default_factory=list)


@dataclass
class LinkData:
    href: str
    text: str = ""
    internal: bool = False


@dataclass
class ImageData:
    src: str
    alt: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None


@dataclass
class HeadingData:
    level: int
    text: str = ""


@dataclass
class ButtonData:
    text: str = ""
    type: Optional[str] = None
    id: Optional[str] = None
    class_name: Optional[str] = None


@dataclass
class InputData:
    type: str
    name: Optional[str] = None
    id: Optional[str] = None
    placeholder: Optional[str] = None
    required: bool = False
    value: Optional[str] = None


@dataclass
class PageData:
    """Everything captured from a single visited page."""

    url: str
    """URL the spider requested; also the page's sitemap entry."""

    title: str = ""

    screenshot: Optional[Union[bytes, str]] = None
    """JPEG bytes, or the storage key once offloaded to a screenshot store."""

    content: Optional[str] = None
    """Visible body text."""

    forms: list[FormData] = field(default_factory=list)
    links: list[LinkData] = field(default_factory=list)
    images: list[ImageData] = field(default_factory=list)
    headings: list[HeadingData] = field(default_factory=list)
    buttons: list[ButtonData] = field(default_factory=list)
    inputs: list[InputData] = field(default_factory=list)

    errors: list[str] = field(default_factory=list)
    """Page-scoped, non-fatal extraction failures."""

    metadata: dict[str, Any] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Crawl result
# ---------------------------------------------------------------------------


@dataclass
class CrawlSummary:
    total_pages: int = 0
    total_forms: int = 0
    total_links: int = 0
    total_images: int = 0
    errors: list[str] = field(default_factory=list)


@dataclass
class NavigationData:
    """Site-wide navigation regions, captured once from the root page."""

    main_navigation: list[LinkData] = field(default_factory=list)
    footer_navigation: list[LinkData] = field(default_factory=list)
    breadcrumbs: list[LinkData] = field(default_factory=list)


@dataclass
class FeatureFlags:
    has_login: bool = False
    has_search: bool = False
    has_cart: bool = False
    has_user_profile: bool = False
    has_comments: bool = False
    has_ratings: bool = False


@dataclass
class SiteFiles:
    """Existence of well-known crawler files at the site root."""

    has_robots_txt: bool = False
    has_sitemap_xml: bool = False


@dataclass
class CrawlResult:
    """Terminal artifact of one crawl.

    ``pages[i]`` always corresponds to ``sitemap[i]``.
    """

    pages: list[PageData] = field(default_factory=list)
    sitemap: list[str] = field(default_factory=list)
    summary: CrawlSummary = field(default_factory=CrawlSummary)
    navigation: NavigationData = field(default_factory=NavigationData)
    features: FeatureFlags = field(default_factory=FeatureFlags)
    site_files: SiteFiles = field(default_factory=SiteFiles)

    def to_dict(self) -> dict:
        """Render the camelCase JSON document consumed by the web front-end."""
        return {
            "pages": [_page_to_dict(p) for p in self.pages],
            "sitemap": list(self.sitemap),
            "summary": {
                "totalPages": self.summary.total_pages,
                "totalForms": self.summary.total_forms,
                "totalLinks": self.summary.total_links,
                "totalImages": self.summary.total_images,
                "errors": list(self.summary.errors),
            },
            "navigation": {
                "mainNavigation": [_link_to_dict(l) for l in self.navigation.main_navigation],
                "footerNavigation": [_link_to_dict(l) for l in self.navigation.footer_navigation],
                "breadcrumbs": [_link_to_dict(l) for l in self.navigation.breadcrumbs],
            },
            "features": {
                "hasLogin": self.features.has_login,
                "hasSearch": self.features.has_search,
                "hasCart": self.features.has_cart,
                "hasUserProfile": self.features.has_user_profile,
                "hasComments": self.features.has_comments,
                "hasRatings": self.features.has_ratings,
            },
            "siteFiles": {
                "hasRobotsTxt": self.site_files.has_robots_txt,
                "hasSitemapXml": self.site_files.has_sitemap_xml,
            },
        }


def _link_to_dict(link: LinkData) -> dict:
    return {"href": link.href, "text": link.text, "internal": link.internal}


def _page_to_dict(page: PageData) -> dict:
    screenshot = page.screenshot
    if isinstance(screenshot, bytes):
        screenshot = base64.b64encode(screenshot).decode()
    return {
        "url": page.url,
        "title": page.title,
        "screenshot": screenshot,
        "content": page.content,
        "forms": [
            {
                "id": f.id,
                "name": f.name,
                "action": f.action,
                "method": f.method,
                "fields": [
                    {
                        "name": ff.name,
                        "type": ff.type,
                        "required": ff.required,
                        "placeholder": ff.placeholder,
                        "value": ff.value,
                        "label": ff.label,
                        "options": ff.options,
                    }
                    for ff in f.fields
                ],
            }
            for f in page.forms
        ],
        "links": [_link_to_dict(l) for l in page.links],
        "images": [
            {"src": i.src, "alt": i.alt, "width": i.width, "height": i.height}
            for i in page.images
        ],
        "headings": [{"level": h.level, "text": h.text} for h in page.headings],
        "buttons": [
            {"text": b.text, "type": b.type, "id": b.id, "className": b.class_name}
            for b in page.buttons
        ],
        "inputs": [
            {
                "type": i.type,
                "name": i.name,
                "id": i.id,
                "placeholder": i.placeholder,
                "required": i.required,
                "value": i.value,
            }
            for i in page.inputs
        ],
        "errors": list(page.errors),
        "metadata": dict(page.metadata),
    }
