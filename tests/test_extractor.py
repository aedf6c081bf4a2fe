"""
tests/test_extractor.py — Unit tests for link classification and PageExtractor.

PageExtractor is driven against a fake page whose ``evaluate()`` answers
each in-page script with canned DOM data.
"""
import asyncio

import pytest

from Extractor import PageExtractor, classify_link
from Extractor import Extractor as extractor_module
from Models import CrawlSettings


ORIGIN = "https://example.com"


# ---------------------------------------------------------------------------
# classify_link
# ---------------------------------------------------------------------------


class TestClassifyLink:
    def test_root_relative_is_internal_and_absolute(self):
        link = classify_link("/about", "About", ORIGIN, "example.com")
        assert link.internal is True
        assert link.href == "https://example.com/about"
        assert link.text == "About"

    def test_absolute_same_host_is_internal(self):
        link = classify_link("https://example.com/shop", "", ORIGIN, "example.com")
        assert link.internal is True
        assert link.href == "https://example.com/shop"

    def test_subdomain_containing_host_is_internal(self):
        assert classify_link("https://www.example.com/", "", ORIGIN, "example.com").internal is True

    def test_other_host_is_external(self):
        link = classify_link("https://other.org/page", "", ORIGIN, "example.com")
        assert link.internal is False
        assert link.href == "https://other.org/page"

    def test_host_in_query_string_is_external(self):
        link = classify_link("https://other.org/?ref=example.com", "", ORIGIN, "example.com")
        assert link.internal is False

    def test_protocol_relative_takes_origin_scheme(self):
        link = classify_link("//cdn.other.org/lib.js", "", ORIGIN, "example.com")
        assert link.href == "https://cdn.other.org/lib.js"
        assert link.internal is False

    @pytest.mark.parametrize("href", ["about.html", "#top", "mailto:info@example.org", "javascript:void(0)"])
    def test_non_root_relative_forms_are_external(self, href):
        assert classify_link(href, "", ORIGIN, "example.com").internal is False

    def test_host_comparison_is_case_insensitive(self):
        assert classify_link("https://EXAMPLE.com/x", "", ORIGIN, "Example.com").internal is True


# ---------------------------------------------------------------------------
# PageExtractor
# ---------------------------------------------------------------------------


DOM = {
    extractor_module._FORMS_JS: [
        {
            "id": "login",
            "name": None,
            "action": "https://example.com/session",
            "method": "post",
            "fields": [
                {"name": "email", "type": "email", "required": True, "placeholder": "you@x",
                 "value": "", "label": "E-mail", "options": None},
                {"name": "role", "type": "select-one", "required": False, "placeholder": None,
                 "value": "a", "label": "", "options": ["Admin", "User"]},
            ],
        }
    ],
    extractor_module._LINKS_JS: {
        "origin": ORIGIN,
        "links": [
            {"href": "/a", "text": "A"},
            {"href": "https://other.org/", "text": "Other"},
        ],
    },
    extractor_module._IMAGES_JS: [{"src": "https://example.com/logo.png", "alt": "Logo", "width": 10, "height": 5}],
    extractor_module._HEADINGS_JS: [{"level": 1, "text": "Welcome"}],
    extractor_module._BUTTONS_JS: [{"text": "Go", "type": "submit", "id": None, "className": "btn"}],
    extractor_module._INPUTS_JS: [{"type": "email", "name": "email", "id": None,
                                   "placeholder": "you@x", "required": True, "value": ""}],
    extractor_module._METADATA_JS: {"description": "Demo", "title": "Home", "url": ORIGIN + "/",
                                    "hasJQuery": False, "hasReact": True, "hasVue": False,
                                    "hasAngular": False},
    extractor_module._NAVIGATION_JS: {
        "mainNavigation": [{"href": "https://example.com/about", "text": "About"}],
        "footerNavigation": [{"href": "https://twitter.com/x", "text": "Twitter"}],
        "breadcrumbs": [],
    },
}


class FakePage:
    def __init__(self, dom: dict, failing_scripts=(), screenshot_error: bool = False) -> None:
        self.dom = dom
        self.failing_scripts = set(failing_scripts)
        self.screenshot_error = screenshot_error
        self.screenshot_kwargs: dict = {}
        self.evaluate_args: list = []

    async def title(self) -> str:
        return "Home"

    async def screenshot(self, **kwargs) -> bytes:
        self.screenshot_kwargs = kwargs
        if self.screenshot_error:
            raise RuntimeError("Target page crashed")
        return b"\xff\xd8"

    async def text_content(self, selector: str) -> str:
        return "Hello world"

    async def evaluate(self, script: str, arg=None):
        self.evaluate_args.append(arg)
        if script in self.failing_scripts:
            raise RuntimeError("Execution context was destroyed")
        return self.dom[script]


def extract(fake: FakePage, settings: CrawlSettings = CrawlSettings()):
    ex = PageExtractor(fake, settings, crawl_host="example.com")
    return asyncio.run(ex.extract(ORIGIN + "/"))


class TestPageExtractor:
    def test_all_facets_extracted(self):
        data = extract(FakePage(DOM))
        assert data.url == "https://example.com/"
        assert data.title == "Home"
        assert data.screenshot == b"\xff\xd8"
        assert data.content == "Hello world"
        assert data.forms[0].fields[0].label == "E-mail"
        assert data.forms[0].fields[1].options == ["Admin", "User"]
        assert [(l.href, l.internal) for l in data.links] == [
            ("https://example.com/a", True),
            ("https://other.org/", False),
        ]
        assert data.images[0].alt == "Logo"
        assert data.headings[0].level == 1
        assert data.buttons[0].class_name == "btn"
        assert data.inputs[0].type == "email"
        assert data.metadata["hasReact"] is True
        assert data.errors == []

    def test_screenshot_uses_jpeg_quality(self):
        fake = FakePage(DOM)
        extract(fake, CrawlSettings(screenshot_quality=55))
        assert fake.screenshot_kwargs == {"type": "jpeg", "quality": 55}

    def test_screenshot_failure_is_page_scoped(self):
        data = extract(FakePage(DOM, screenshot_error=True))
        assert data.screenshot is None
        assert data.errors == ["Screenshot capture failed: Target page crashed"]
        assert data.links  # later facets still ran

    def test_failing_facet_does_not_abort_others(self):
        data = extract(FakePage(DOM, failing_scripts={extractor_module._FORMS_JS}))
        assert data.forms == []
        assert data.errors == ["Form extraction failed: Execution context was destroyed"]
        assert len(data.links) == 2
        assert data.metadata["description"] == "Demo"

    def test_several_failing_facets_each_recorded(self):
        failing = {extractor_module._IMAGES_JS, extractor_module._METADATA_JS}
        data = extract(FakePage(DOM, failing_scripts=failing))
        assert data.errors == [
            "Image extraction failed: Execution context was destroyed",
            "Metadata extraction failed: Execution context was destroyed",
        ]

    def test_extract_navigation(self):
        fake = FakePage(DOM)
        ex = PageExtractor(fake, CrawlSettings(), crawl_host="example.com")
        nav = asyncio.run(ex.extract_navigation())
        assert nav.main_navigation[0].internal is True
        assert nav.footer_navigation[0].internal is False
        assert nav.breadcrumbs == []
        main_sel, footer_sel, crumb_sel = fake.evaluate_args[-1]
        assert main_sel[0] == "nav"
        assert crumb_sel[0] == ".breadcrumb"
