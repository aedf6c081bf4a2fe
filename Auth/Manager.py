"""
Auth/Manager.py — Form-based login for the crawler.

Supports:
  - Credentials given directly or loaded from a JSON credentials file
  - Default fallback selector tables for username, password and submit
    controls, each overridable per crawl
  - Heuristic post-login verification (logout control or landing-page URL)
"""
from __future__ import annotations

import json
import logging
from pathlib import Path

from playwright.async_api import Error as PlaywrightError

from Browser import Navigator
from Models import AuthenticationError, LoginCredentials
from Models.Selectors import (
    LOGIN_SUCCESS_URL_MARKERS,
    LOGOUT_SELECTORS,
    PASSWORD_SELECTORS,
    SUBMIT_SELECTORS,
    USERNAME_SELECTORS,
    selector_list,
)

logger = logging.getLogger(__name__)

#: Fixed wait after clicking submit, in milliseconds.
LOGIN_SETTLE_MS: int = 3_000


class AuthManager:
    """Performs the optional login step of a crawl.

    Usage::

        manager = AuthManager(navigator)
        await manager.authenticate(credentials)
    """

    def __init__(self, navigator: Navigator) -> None:
        self.navigator = navigator

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    async def authenticate(self, credentials: LoginCredentials) -> bool:
        """Fill and submit the login form, then verify the outcome.

        Returns *True* when a success indicator was found. An unverified
        login is only logged as a warning, since the heuristic has false
        negatives. Failing to locate or interact with a control raises
        :class:`~Models.AuthenticationError`.
        """
        page = self.navigator.page
        try:
            if credentials.login_url:
                await self.navigator.navigate_to_url(credentials.login_url)

            username_sel, password_sel, submit_sel = self.resolve_selectors(credentials)

            await page.locator(username_sel).first.fill(credentials.username)
            logger.debug("Filled username field")

            await page.locator(password_sel).first.fill(credentials.password)
            logger.debug("Filled password field")

            await page.locator(submit_sel).first.click()
            logger.debug("Clicked submit button")

            await self.navigator.wait(LOGIN_SETTLE_MS)

            logout_count = await page.locator(selector_list(LOGOUT_SELECTORS)).count()
        except PlaywrightError as exc:
            logger.error("Login failed: %s", exc)
            raise AuthenticationError(f"Login failed: {exc}") from exc

        if self.is_login_success(page.url, logout_count):
            logger.info("Login appears successful")
            return True

        logger.warning("Login success uncertain — continuing with crawl")
        return False

    @staticmethod
    def resolve_selectors(credentials: LoginCredentials) -> tuple[str, str, str]:
        """Return ``(username, password, submit)`` selector lists for *credentials*.

        A selector given on the credentials replaces the default table for
        that control.
        """
        return (
            credentials.username_selector or selector_list(USERNAME_SELECTORS),
            credentials.password_selector or selector_list(PASSWORD_SELECTORS),
            credentials.submit_selector or selector_list(SUBMIT_SELECTORS),
        )

    @staticmethod
    def is_login_success(url: str, logout_count: int) -> bool:
        """Return *True* if a logout control exists or *url* looks post-login."""
        if logout_count > 0:
            return True
        lowered = url.lower()
        return any(marker in lowered for marker in LOGIN_SUCCESS_URL_MARKERS)

    # ------------------------------------------------------------------
    # Credentials file loading
    # ------------------------------------------------------------------

    @staticmethod
    def load_credentials(path: str) -> LoginCredentials:
        """Parse a JSON credentials file into :class:`~Models.LoginCredentials`.

        Required keys are ``username`` and ``password``; ``login_url`` and
        the three selector overrides are optional (camelCase accepted).
        Raises :class:`ValueError` on a missing file, bad JSON or missing
        keys.
        """
        try:
            data = json.loads(Path(path).read_text())
        except FileNotFoundError:
            raise ValueError(f"Credentials file not found: {path}") from None
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON in credentials file {path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError(f"Credentials file {path} must contain a JSON object")

        credentials = LoginCredentials.from_dict(data)
        logger.debug("Credentials loaded from %s", path)
        return credentials
