"""
Reporter/Reporter.py — Console output and JSON report generation.

Provides the :class:`Reporter` used by the command-line tool to print status
messages, write the crawl result to disk, and render the end-of-run summary.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from Models import CrawlResult

logger = logging.getLogger(__name__)

# Single shared console instance (stdout)
console = Console()

# Flag attribute -> label shown in the summary table
_FEATURE_LABELS: tuple[tuple[str, str], ...] = (
    ("has_login", "Login"),
    ("has_search", "Search"),
    ("has_cart", "Cart"),
    ("has_user_profile", "User profile"),
    ("has_comments", "Comments"),
    ("has_ratings", "Ratings"),
)


class Reporter:
    """Drives all user-visible output for a crawl.

    Responsibilities:
    - Informational / error messages
    - JSON report persistence
    - End-of-run summary tables
    """

    def __init__(self, output_file: str) -> None:
        self.output_file: str = output_file

    # ------------------------------------------------------------------
    # Display helpers
    # ------------------------------------------------------------------

    def print_banner(self) -> None:
        """Print the tool banner to the console."""
        console.print(
            Panel(
                "[bold cyan]Site Crawler[/bold cyan]  |  Playwright-based application crawler\n"
                "[dim]Only crawl systems you are authorised to access.[/dim]",
                expand=False,
                style="bold white on black",
            )
        )

    def log_info(self, message: str) -> None:
        """Print a standard informational message (supports Rich markup)."""
        console.print(f"[dim]\\[*][/dim] {message}")

    def log_error(self, message: str) -> None:
        """Print an error message (supports Rich markup)."""
        console.print(f"[bold red]\\[!][/bold red] {message}")

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, result: CrawlResult, screenshots: Optional[list[dict]] = None) -> bool:
        """Serialise *result* (and stored screenshot records) to the report file.

        Returns *False* if the file could not be written.
        """
        data = result.to_dict()
        if screenshots is not None:
            data["screenshots"] = screenshots
        try:
            Path(self.output_file).write_text(json.dumps(data, indent=2))
        except OSError as exc:
            console.print(f"[red]\\[!][/red] Failed to save report: {exc}")
            return False
        console.print(f"\n[green]\\[+][/green] Report saved: [bold]{self.output_file}[/bold]")
        return True

    # ------------------------------------------------------------------
    # Summary
    # ------------------------------------------------------------------

    def print_summary(self, result: CrawlResult) -> None:
        """Print totals, detected features and recorded errors."""
        summary = result.summary

        table = Table(title="Crawl Summary", box=box.ROUNDED, show_header=True)
        table.add_column("Metric", style="bold cyan", min_width=22)
        table.add_column("Value", style="white", justify="right")

        table.add_row("Pages crawled", str(summary.total_pages))
        table.add_row("Forms", str(summary.total_forms))
        table.add_row("Links", str(summary.total_links))
        table.add_row("Images", str(summary.total_images))

        if summary.errors:
            table.add_row("Errors", f"[bold red]{len(summary.errors)}[/bold red]")
        else:
            table.add_row("Errors", "[bold green]0[/bold green]")

        features = Table(title="Detected Features", box=box.ROUNDED, show_header=False)
        features.add_column("Feature", style="bold cyan", min_width=22)
        features.add_column("Present", justify="right")
        for attr, label in _FEATURE_LABELS:
            present = getattr(result.features, attr)
            features.add_row(label, "[green]yes[/green]" if present else "[dim]no[/dim]")

        console.print()
        console.print(table)
        console.print(features)

        for error in summary.errors:
            self.log_error(error)
