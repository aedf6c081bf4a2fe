"""
tests/test_models.py — Unit tests for Models dataclasses.

Construction, default-value and validation tests that do not require a
browser.
"""
import base64

import pytest

from Models import (
    CrawlResult,
    CrawlSettings,
    FormData,
    FormFieldData,
    LinkData,
    LoginCredentials,
    PageData,
    Viewport,
)


# ---------------------------------------------------------------------------
# CrawlSettings
# ---------------------------------------------------------------------------


class TestCrawlSettings:
    def test_defaults(self):
        s = CrawlSettings()
        assert s.max_pages == 10
        assert s.max_depth == 3
        assert s.wait_for_network_idle is True
        assert s.screenshot_quality == 80
        assert s.timeout_ms == 30_000
        assert s.user_agent is None
        assert s.viewport == Viewport(1920, 1080)
        assert s.max_links_per_page == 5

    def test_is_immutable(self):
        s = CrawlSettings()
        with pytest.raises(AttributeError):
            s.max_pages = 99

    @pytest.mark.parametrize("kwargs", [
        {"max_pages": 0},
        {"max_depth": -1},
        {"screenshot_quality": 101},
        {"screenshot_quality": -1},
        {"timeout_ms": 0},
        {"max_links_per_page": 0},
    ])
    def test_rejects_invalid_values(self, kwargs):
        with pytest.raises(ValueError):
            CrawlSettings(**kwargs)

    def test_zero_depth_allowed(self):
        assert CrawlSettings(max_depth=0).max_depth == 0

    def test_from_dict_accepts_camel_case(self):
        s = CrawlSettings.from_dict({
            "maxPages": 4,
            "maxDepth": 1,
            "waitForNetworkIdle": False,
            "screenshotQuality": 50,
            "timeout": 5000,
            "userAgent": "TestBot/1.0",
            "viewport": {"width": 800, "height": 600},
        })
        assert s.max_pages == 4
        assert s.max_depth == 1
        assert s.wait_for_network_idle is False
        assert s.screenshot_quality == 50
        assert s.timeout_ms == 5000
        assert s.user_agent == "TestBot/1.0"
        assert s.viewport == Viewport(800, 600)

    def test_from_dict_accepts_snake_case(self):
        s = CrawlSettings.from_dict({"max_pages": 7, "timeout_ms": 1000})
        assert s.max_pages == 7
        assert s.timeout_ms == 1000

    def test_from_dict_missing_keys_take_defaults(self):
        assert CrawlSettings.from_dict({}) == CrawlSettings()

    def test_from_dict_ignores_unknown_keys(self):
        s = CrawlSettings.from_dict({"includePDF": True, "maxPages": 2})
        assert s.max_pages == 2

    def test_from_dict_viewport_string(self):
        s = CrawlSettings.from_dict({"viewport": "1280x720"})
        assert s.viewport == Viewport(1280, 720)

    def test_from_dict_validates(self):
        with pytest.raises(ValueError):
            CrawlSettings.from_dict({"maxPages": 0})


# ---------------------------------------------------------------------------
# Viewport
# ---------------------------------------------------------------------------


class TestViewport:
    def test_parse(self):
        assert Viewport.parse("1366x768") == Viewport(1366, 768)

    def test_parse_uppercase_separator(self):
        assert Viewport.parse("640X480") == Viewport(640, 480)

    @pytest.mark.parametrize("value", ["1366", "axb", "0x100"])
    def test_parse_rejects_malformed(self, value):
        with pytest.raises(ValueError):
            Viewport.parse(value)


# ---------------------------------------------------------------------------
# LoginCredentials
# ---------------------------------------------------------------------------


class TestLoginCredentials:
    def test_from_dict_camel_case(self):
        c = LoginCredentials.from_dict({
            "username": "admin",
            "password": "secret",
            "loginUrl": "https://example.com/login",
            "submitSelector": "#go",
        })
        assert c.login_url == "https://example.com/login"
        assert c.submit_selector == "#go"
        assert c.username_selector is None

    def test_from_dict_requires_username_and_password(self):
        with pytest.raises(ValueError, match="password"):
            LoginCredentials.from_dict({"username": "admin"})

    def test_repr_hides_password(self):
        c = LoginCredentials(username="admin", password="hunter2")
        assert "hunter2" not in repr(c)


# ---------------------------------------------------------------------------
# PageData
# ---------------------------------------------------------------------------


class TestPageData:
    def test_defaults_are_empty(self):
        p = PageData(url="https://example.com")
        assert p.title == ""
        assert p.screenshot is None
        assert p.forms == [] and p.links == [] and p.errors == []
        assert p.metadata == {}

    def test_lists_are_not_shared(self):
        a = PageData(url="https://example.com/a")
        b = PageData(url="https://example.com/b")
        a.errors.append("boom")
        assert b.errors == []

    def test_structural_equality_of_records(self):
        assert LinkData("https://example.com/", "Home", True) == LinkData(
            "https://example.com/", "Home", True
        )


# ---------------------------------------------------------------------------
# CrawlResult.to_dict
# ---------------------------------------------------------------------------


class TestCrawlResultToDict:
    def _result(self) -> CrawlResult:
        page = PageData(
            url="https://example.com/",
            title="Home",
            screenshot=b"\xff\xd8jpeg",
            forms=[FormData(id="f", fields=[FormFieldData(name="q", type="search")])],
            links=[LinkData("https://example.com/a", "A", True)],
        )
        result = CrawlResult(pages=[page], sitemap=[page.url])
        result.summary.total_pages = 1
        result.features.has_search = True
        return result

    def test_camel_case_keys(self):
        d = self._result().to_dict()
        assert set(d) == {"pages", "sitemap", "summary", "navigation", "features", "siteFiles"}
        assert d["summary"]["totalPages"] == 1
        assert d["features"]["hasSearch"] is True
        assert "mainNavigation" in d["navigation"]

    def test_screenshot_bytes_are_base64(self):
        d = self._result().to_dict()
        assert d["pages"][0]["screenshot"] == base64.b64encode(b"\xff\xd8jpeg").decode()

    def test_stored_screenshot_key_kept_as_is(self):
        result = self._result()
        result.pages[0].screenshot = "crawl/page-1.jpg"
        assert result.to_dict()["pages"][0]["screenshot"] == "crawl/page-1.jpg"

    def test_form_fields_rendered(self):
        d = self._result().to_dict()
        assert d["pages"][0]["forms"][0]["fields"][0]["name"] == "q"
