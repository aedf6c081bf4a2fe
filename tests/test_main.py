"""
tests/test_main.py — Unit tests for CLI argument conversion.
"""
import json

import pytest

from main import build_arg_parser, build_credentials, build_settings
from Models import Viewport


def parse(*argv: str):
    return build_arg_parser().parse_args(["--target-url", "https://example.com", *argv])


class TestBuildSettings:
    def test_defaults(self):
        s = build_settings(parse())
        assert (s.max_pages, s.max_depth, s.max_links_per_page) == (10, 3, 5)
        assert s.headless is True
        assert s.wait_for_network_idle is True

    def test_flags_override_defaults(self):
        s = build_settings(parse(
            "--max-pages", "25", "--max-depth", "1", "--timeout", "5000",
            "--no-network-idle", "--no-headless", "--viewport", "1280x720",
        ))
        assert s.max_pages == 25
        assert s.max_depth == 1
        assert s.timeout_ms == 5000
        assert s.wait_for_network_idle is False
        assert s.headless is False
        assert s.viewport == Viewport(1280, 720)

    def test_settings_file_with_flag_precedence(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"maxPages": 50, "maxDepth": 2, "screenshotQuality": 40}))
        s = build_settings(parse("--settings", str(path), "--max-pages", "7"))
        assert s.max_pages == 7
        assert s.max_depth == 2
        assert s.screenshot_quality == 40

    def test_missing_settings_file(self, tmp_path):
        with pytest.raises(ValueError, match="not found"):
            build_settings(parse("--settings", str(tmp_path / "nope.json")))

    def test_settings_file_must_be_object(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text("[1, 2]")
        with pytest.raises(ValueError, match="JSON object"):
            build_settings(parse("--settings", str(path)))

    def test_invalid_limit_rejected(self):
        with pytest.raises(ValueError):
            build_settings(parse("--max-pages", "0"))


class TestBuildCredentials:
    def test_none_without_flags(self):
        assert build_credentials(parse()) is None

    def test_username_and_password(self):
        creds = build_credentials(parse(
            "--username", "admin", "--password", "secret", "--login-url", "https://example.com/login",
        ))
        assert creds.username == "admin"
        assert creds.password == "secret"
        assert creds.login_url == "https://example.com/login"

    def test_username_without_password(self):
        with pytest.raises(ValueError, match="together"):
            build_credentials(parse("--username", "admin"))

    def test_credentials_file(self, tmp_path):
        path = tmp_path / "login.json"
        path.write_text(json.dumps({"username": "u", "password": "p"}))
        assert build_credentials(parse("--credentials", str(path))).username == "u"
