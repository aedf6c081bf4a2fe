"""
tests/test_reporter.py — Unit tests for Reporter.

Only report persistence is asserted on. Rich console output is exercised
for crashes but its rendering is not checked.
"""
import json

from Models import CrawlResult, CrawlSummary, FeatureFlags, PageData
from Reporter import Reporter


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def make_reporter(tmp_path) -> Reporter:
    return Reporter(output_file=str(tmp_path / "crawl.json"))


def make_result() -> CrawlResult:
    page = PageData(url="https://example.com/", title="Home", screenshot=b"\xff\xd8")
    return CrawlResult(
        pages=[page],
        sitemap=["https://example.com/"],
        summary=CrawlSummary(total_pages=1, errors=["https://example.com/: Image extraction failed: x"]),
        features=FeatureFlags(has_login=True),
    )


# ---------------------------------------------------------------------------
# save
# ---------------------------------------------------------------------------


class TestSave:
    def test_output_file_stored(self, tmp_path):
        out = str(tmp_path / "out.json")
        assert Reporter(output_file=out).output_file == out

    def test_save_writes_valid_json(self, tmp_path):
        r = make_reporter(tmp_path)
        assert r.save(make_result()) is True
        data = json.loads((tmp_path / "crawl.json").read_text())
        assert data["sitemap"] == ["https://example.com/"]
        assert data["summary"]["totalPages"] == 1
        assert data["features"]["hasLogin"] is True

    def test_inline_screenshot_is_base64(self, tmp_path):
        r = make_reporter(tmp_path)
        r.save(make_result())
        data = json.loads((tmp_path / "crawl.json").read_text())
        assert data["pages"][0]["screenshot"] == "/9g="

    def test_no_screenshot_records_by_default(self, tmp_path):
        r = make_reporter(tmp_path)
        r.save(make_result())
        data = json.loads((tmp_path / "crawl.json").read_text())
        assert "screenshots" not in data

    def test_screenshot_records_included(self, tmp_path):
        r = make_reporter(tmp_path)
        records = [{"page_url": "https://example.com/", "storage_path": "c1/page-1.jpg", "page_title": "Home"}]
        r.save(make_result(), records)
        data = json.loads((tmp_path / "crawl.json").read_text())
        assert data["screenshots"] == records

    def test_save_to_missing_directory_returns_false(self, tmp_path):
        r = Reporter(output_file=str(tmp_path / "missing" / "crawl.json"))
        assert r.save(make_result()) is False


# ---------------------------------------------------------------------------
# Console output
# ---------------------------------------------------------------------------


class TestConsole:
    def test_print_summary_does_not_raise(self, tmp_path):
        make_reporter(tmp_path).print_summary(make_result())

    def test_print_summary_empty_result(self, tmp_path):
        make_reporter(tmp_path).print_summary(CrawlResult())
