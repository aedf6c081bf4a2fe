"""
Models/Selectors.py — Ordered CSS selector tables.

Order is significant in every table: callers try entries first to last and
stop at the first match.
"""
from __future__ import annotations

# Cookie / privacy consent buttons, attribute-based first, then text-based
CONSENT_SELECTORS: tuple[str, ...] = (
    'button[id*="accept"]',
    'button[class*="accept"]',
    'button:has-text("Accept")',
    'button:has-text("Accept All")',
    'button:has-text("I Accept")',
    'button:has-text("Agree")',
    'button:has-text("OK")',
    ".cookie-consent button",
    "#cookie-consent button",
    '[data-testid*="accept"]',
)

USERNAME_SELECTORS: tuple[str, ...] = (
    'input[type="email"]',
    'input[name="username"]',
    'input[name="email"]',
    'input[id*="username"]',
    'input[id*="email"]',
)

PASSWORD_SELECTORS: tuple[str, ...] = (
    'input[type="password"]',
    'input[name="password"]',
    'input[id*="password"]',
)

SUBMIT_SELECTORS: tuple[str, ...] = (
    'button[type="submit"]',
    'input[type="submit"]',
    'button:has-text("Login")',
    'button:has-text("Sign In")',
)

# Any match after submitting the login form counts as a successful login
LOGOUT_SELECTORS: tuple[str, ...] = (
    'button:has-text("Logout")',
    'a:has-text("Logout")',
    'button:has-text("Sign Out")',
    'a:has-text("Sign Out")',
)

# URL fragments that indicate a post-login landing page
LOGIN_SUCCESS_URL_MARKERS: tuple[str, ...] = ("dashboard", "profile")

MAIN_NAV_SELECTORS: tuple[str, ...] = (
    "nav",
    ".navigation",
    ".nav",
    ".menu",
    "header nav",
    ".header nav",
)

FOOTER_NAV_SELECTORS: tuple[str, ...] = (
    "footer nav",
    ".footer nav",
    "footer .nav",
    ".footer .menu",
)

BREADCRUMB_SELECTORS: tuple[str, ...] = (
    ".breadcrumb",
    ".breadcrumbs",
    '[aria-label="breadcrumb"]',
    ".crumb",
)


def selector_list(selectors: tuple[str, ...]) -> str:
    """Join a table into one selector list; the first match wins in DOM order."""
    return ", ".join(selectors)
