"""
main.py — Entry point for the site crawler.

Sets up the CLI, configures logging, builds crawl settings and optional
login credentials, then runs one bounded crawl and writes the JSON report.
Ctrl-C stops the traversal before the next page load and still reports the
pages collected so far.

Usage::

    python main.py --target-url https://target.com [options]
"""
from __future__ import annotations

import argparse
import asyncio
import json
import logging
import signal
import sys
import uuid
from pathlib import Path
from typing import Optional

from Auth import AuthManager
from Crawler import SiteCrawler
from Models import CrawlError, CrawlSettings, LoginCredentials
from Reporter import Reporter
from Storage import FileScreenshotStore, persist_screenshots

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# CLI definition
# ---------------------------------------------------------------------------


def build_arg_parser() -> argparse.ArgumentParser:
    """Build and return the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="site-crawler",
        description="Bounded web-application crawler powered by Playwright",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=r"""
Examples
────────
  Basic crawl:
    python main.py --target-url https://target.com

  With a credentials file:
    python main.py --target-url https://target.com --credentials login.json

  Full example:
    python main.py --target-url https://target.com \
                   --username admin --password secret \
                   --login-url https://target.com/login \
                   --max-pages 25 --max-depth 2 \
                   --screenshots-dir shots --output crawl.json \
                   --no-headless --verbose
        """,
    )

    # ── Target ────────────────────────────────────────────────────────────────
    parser.add_argument(
        "--target-url",
        required=True,
        metavar="URL",
        help="Starting URL to crawl (required)",
    )

    # ── Authentication ────────────────────────────────────────────────────────
    auth = parser.add_argument_group("authentication")
    auth.add_argument(
        "--credentials",
        metavar="FILE",
        help="JSON file with username, password and optional login_url / selectors",
    )
    auth.add_argument("--username", metavar="USER", help="Login username or e-mail")
    auth.add_argument("--password", metavar="PASS", help="Login password")
    auth.add_argument(
        "--login-url",
        metavar="URL",
        help="Page holding the login form (default: the target page)",
    )

    # ── Crawl limits ──────────────────────────────────────────────────────────
    limits = parser.add_argument_group("crawl limits")
    limits.add_argument(
        "--settings",
        metavar="FILE",
        help="JSON file with crawl settings; explicit flags take precedence",
    )
    limits.add_argument(
        "--max-pages",
        type=int,
        metavar="N",
        help="Maximum pages to crawl (default: 10)",
    )
    limits.add_argument(
        "--max-depth",
        type=int,
        metavar="N",
        help="Maximum link depth from the target page (default: 3)",
    )
    limits.add_argument(
        "--max-links-per-page",
        type=int,
        metavar="N",
        help="Internal links followed from each page (default: 5)",
    )
    limits.add_argument(
        "--timeout",
        type=int,
        metavar="MS",
        help="Default timeout for browser operations in ms (default: 30000)",
    )
    limits.add_argument(
        "--no-network-idle",
        dest="network_idle",
        action="store_false",
        default=None,
        help="Wait for the load event instead of network idle",
    )

    # ── Output ────────────────────────────────────────────────────────────────
    out = parser.add_argument_group("output")
    out.add_argument(
        "--output",
        default="crawl.json",
        metavar="FILE",
        help="JSON report output path (default: crawl.json)",
    )
    out.add_argument(
        "--screenshots-dir",
        metavar="DIR",
        help="Store screenshots as files here instead of inline base64",
    )
    out.add_argument(
        "--screenshot-quality",
        type=int,
        metavar="0-100",
        help="JPEG screenshot quality (default: 80)",
    )
    out.add_argument(
        "--no-probe",
        dest="probe",
        action="store_false",
        help="Skip the robots.txt / sitemap.xml existence probe",
    )
    out.add_argument(
        "--verbose",
        action="store_true",
        help="Enable DEBUG-level logging",
    )

    # ── Browser ───────────────────────────────────────────────────────────────
    browser = parser.add_argument_group("browser")
    browser.add_argument("--user-agent", metavar="UA", help="Custom user agent string")
    browser.add_argument(
        "--viewport",
        metavar="WxH",
        help="Viewport size, e.g. 1280x720 (default: 1920x1080)",
    )
    headless = browser.add_mutually_exclusive_group()
    headless.add_argument(
        "--headless",
        dest="headless",
        action="store_true",
        default=None,
        help="Run browser headlessly (default)",
    )
    headless.add_argument(
        "--no-headless",
        dest="headless",
        action="store_false",
        help="Show the browser UI (useful for debugging)",
    )

    return parser


# ---------------------------------------------------------------------------
# Argument conversion
# ---------------------------------------------------------------------------


def build_settings(args: argparse.Namespace) -> CrawlSettings:
    """Merge the optional ``--settings`` file with explicit CLI flags."""
    data: dict = {}
    if args.settings:
        try:
            data = json.loads(Path(args.settings).read_text())
        except FileNotFoundError:
            raise ValueError(f"Settings file not found: {args.settings}") from None
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON in settings file {args.settings}: {exc}") from exc
        if not isinstance(data, dict):
            raise ValueError(f"Settings file {args.settings} must contain a JSON object")

    overrides = {
        "max_pages": args.max_pages,
        "max_depth": args.max_depth,
        "max_links_per_page": args.max_links_per_page,
        "timeout_ms": args.timeout,
        "wait_for_network_idle": args.network_idle,
        "screenshot_quality": args.screenshot_quality,
        "user_agent": args.user_agent,
        "headless": args.headless,
    }
    data.update({k: v for k, v in overrides.items() if v is not None})
    if args.viewport:
        data["viewport"] = args.viewport
    return CrawlSettings.from_dict(data)


def build_credentials(args: argparse.Namespace) -> Optional[LoginCredentials]:
    """Return credentials from ``--credentials`` or the username/password flags."""
    if args.credentials:
        return AuthManager.load_credentials(args.credentials)
    if args.username or args.password:
        if not (args.username and args.password):
            raise ValueError("--username and --password must be given together")
        return LoginCredentials(
            username=args.username,
            password=args.password,
            login_url=args.login_url,
        )
    return None


# ---------------------------------------------------------------------------
# Main async entry point
# ---------------------------------------------------------------------------


async def run(args: argparse.Namespace) -> int:
    """Crawl, persist screenshots and write the report; return the exit status."""
    reporter = Reporter(output_file=args.output)
    reporter.print_banner()

    try:
        settings = build_settings(args)
        credentials = build_credentials(args)
    except ValueError as exc:
        reporter.log_error(str(exc))
        return 2

    shutdown_event = asyncio.Event()

    # ── SIGINT handler ────────────────────────────────────────────────────────
    def _on_sigint(*_) -> None:
        reporter.log_info(
            "[yellow]Ctrl-C received — finishing the current page and reporting…[/yellow]"
        )
        shutdown_event.set()

    signal.signal(signal.SIGINT, _on_sigint)

    reporter.log_info(f"Target:      [bold cyan]{args.target_url}[/bold cyan]")
    reporter.log_info(f"Max pages:   {settings.max_pages}   depth: {settings.max_depth}")
    if credentials:
        reporter.log_info(f"Login as:    [bold cyan]{credentials.username}[/bold cyan]")
    else:
        reporter.log_info("Login:       [yellow]None[/yellow]")

    try:
        async with SiteCrawler(settings, shutdown_event, probe_site_files=args.probe) as crawler:
            result = await crawler.crawl_site(args.target_url, credentials)
    except CrawlError as exc:
        reporter.log_error(f"Crawl failed: {exc}")
        return 1

    reporter.log_info(f"Crawl complete — [bold]{result.summary.total_pages}[/bold] pages.")

    screenshots: Optional[list[dict]] = None
    if args.screenshots_dir:
        store = FileScreenshotStore(args.screenshots_dir)
        screenshots = persist_screenshots(result, store, uuid.uuid4().hex)
        reporter.log_info(f"Stored {len(screenshots)} screenshot(s) in {args.screenshots_dir}")

    reporter.save(result, screenshots)
    reporter.print_summary(result)
    return 0


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def main() -> None:
    """Parse arguments, configure logging, and run the async main loop."""
    parser = build_arg_parser()
    args = parser.parse_args()

    # ── Logging setup ─────────────────────────────────────────────────────────
    log_level = logging.DEBUG if args.verbose else logging.ERROR
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)-8s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    # Suppress noisy library logs unless in verbose mode
    if not args.verbose:
        for lib in ("playwright", "httpx", "asyncio"):
            logging.getLogger(lib).setLevel(logging.WARNING)

    try:
        sys.exit(asyncio.run(run(args)))
    except KeyboardInterrupt:
        # Second Ctrl-C while cleanup is running: exit immediately
        sys.exit(130)


if __name__ == "__main__":
    main()
