"""
Analyzer/Features.py — Feature inference and summary aggregation.

Feature detection is a table of ``(flag, predicate)`` rules evaluated once
per page after traversal. A flag is set when any page satisfies its rule and
is never cleared again.
"""
from __future__ import annotations

from typing import Callable, Iterable, Optional

from Models import CrawlSummary, FeatureFlags, PageData

Predicate = Callable[[PageData], bool]


def _text(page: PageData) -> str:
    return (page.content or "").lower()


def _text_has(*needles: str) -> Predicate:
    return lambda page: any(n in _text(page) for n in needles)


def _field_type_is(value: str) -> Predicate:
    return lambda page: any(
        (field.type or "").lower() == value for form in page.forms for field in form.fields
    )


def _field_name_has(needle: str) -> Predicate:
    return lambda page: any(
        needle in (field.name or "").lower() for form in page.forms for field in form.fields
    )


def _link_href_has(needle: str) -> Predicate:
    return lambda page: any(needle in link.href.lower() for link in page.links)


def _any_of(*predicates: Predicate) -> Predicate:
    return lambda page: any(p(page) for p in predicates)


#: Ordered rule table: attribute name on :class:`~Models.FeatureFlags` -> trigger.
FEATURE_RULES: tuple[tuple[str, Predicate], ...] = (
    ("has_login", _any_of(_field_type_is("password"), _text_has("login", "sign in"))),
    ("has_search", _any_of(_field_name_has("search"), _text_has("search"))),
    ("has_cart", _any_of(_text_has("cart", "shopping"), _link_href_has("cart"))),
    ("has_user_profile", _any_of(_text_has("profile", "account"), _link_href_has("profile"))),
    ("has_comments", _any_of(_text_has("comment", "review"), _field_name_has("comment"))),
    ("has_ratings", _text_has("rating", "star", "review")),
)


def analyze_features(
    pages: Iterable[PageData], flags: Optional[FeatureFlags] = None
) -> FeatureFlags:
    """OR-accumulate :data:`FEATURE_RULES` over *pages* into *flags*."""
    flags = flags if flags is not None else FeatureFlags()
    for page in pages:
        for name, predicate in FEATURE_RULES:
            if not getattr(flags, name) and predicate(page):
                setattr(flags, name, True)
    return flags


def build_summary(pages: list[PageData], errors: Iterable[str] = ()) -> CrawlSummary:
    """Aggregate page totals and collect every recorded error.

    Traversal errors come first, then each page's own errors prefixed with
    its URL.
    """
    collected = list(errors)
    for page in pages:
        collected.extend(f"{page.url}: {error}" for error in page.errors)

    return CrawlSummary(
        total_pages=len(pages),
        total_forms=sum(len(p.forms) for p in pages),
        total_links=sum(len(p.links) for p in pages),
        total_images=sum(len(p.images) for p in pages),
        errors=collected,
    )
