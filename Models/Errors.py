"""
Models/Errors.py — Fatal crawl errors.

Only failures that abort the whole crawl are raised. Page-scoped problems are
recorded as strings on :class:`~Models.Crawl.PageData` or in the crawl
summary and never propagate.
"""
from __future__ import annotations


class CrawlError(Exception):
    """The crawl could not produce a result (root page failure, bad target, …)."""


class AuthenticationError(CrawlError):
    """A login control could not be located or interacted with."""
