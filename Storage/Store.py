"""
Storage/Store.py — Screenshot persistence.

The crawler only depends on the :class:`ScreenshotStore` save/fetch
contract. :class:`FileScreenshotStore` implements it on the local
filesystem for the command-line tool.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

from Models import CrawlResult

logger = logging.getLogger(__name__)


class ScreenshotStore(Protocol):
    """Key-value store for captured screenshots."""

    def save(self, key: str, data: bytes, content_type: str = "image/jpeg") -> str:
        """Persist *data* under *key* and return the key it was stored as."""
        ...

    def fetch(self, key: str) -> bytes:
        """Return the bytes stored under *key*; raises :class:`KeyError` if absent."""
        ...


class FileScreenshotStore:
    """Stores screenshots as files below *root*; keys are relative paths."""

    def __init__(self, root: str) -> None:
        self.root = Path(root)

    def save(self, key: str, data: bytes, content_type: str = "image/jpeg") -> str:
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        logger.debug("Saved %d bytes (%s) to %s", len(data), content_type, path)
        return key

    def fetch(self, key: str) -> bytes:
        path = self._path(key)
        if not path.is_file():
            raise KeyError(key)
        return path.read_bytes()

    def _path(self, key: str) -> Path:
        path = (self.root / key).resolve()
        if not path.is_relative_to(self.root.resolve()):
            raise ValueError(f"Storage key escapes store root: {key!r}")
        return path


def persist_screenshots(
    result: CrawlResult, store: ScreenshotStore, crawl_id: str
) -> list[dict]:
    """Move every page screenshot of *result* into *store*.

    Each saved page's ``screenshot`` is replaced with its storage key. A
    page whose save fails keeps its bytes. Returns one
    ``{page_url, storage_path, page_title}`` record per stored screenshot.
    """
    records: list[dict] = []
    for index, page in enumerate(result.pages, start=1):
        if not isinstance(page.screenshot, bytes):
            continue
        key = f"{crawl_id}/page-{index}.jpg"
        try:
            stored = store.save(key, page.screenshot, "image/jpeg")
        except (OSError, ValueError) as exc:
            logger.error("Failed to store screenshot for %s: %s", page.url, exc)
            continue
        page.screenshot = stored
        records.append(
            {"page_url": page.url, "storage_path": stored, "page_title": page.title}
        )
    return records
