"""Selenium-based browser session for the ADP portal.

Thin adapter over a Chrome WebDriver. It exposes only the capabilities the
harvest needs (navigate, click, evaluate script, read markup, read cookies)
and maps Selenium failures onto the error classes in :mod:`adp_docs.errors`.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from selenium import webdriver
from selenium.common.exceptions import (
    ElementClickInterceptedException,
    NoSuchElementException,
    StaleElementReferenceException,
    WebDriverException,
)
from selenium.webdriver.chrome.options import Options
from selenium.webdriver.chrome.service import Service
from selenium.webdriver.common.by import By
from webdriver_manager.chrome import ChromeDriverManager

from .config import DownloaderConfig
from .errors import CookieExtractionFailed, InteractionFailed, NavigationFailed

logger = logging.getLogger(__name__)


class BrowserSession:
    """A single Chrome session, owned exclusively by one download run."""

    def __init__(
        self,
        config: Optional[DownloaderConfig] = None,
        driver: Optional[webdriver.Chrome] = None,
    ) -> None:
        """Initialise the session.

        Args:
            config: Configuration. Uses defaults when *None*.
            driver: Pre-built WebDriver (mainly for tests). When *None*, a
                    Chrome driver is created by :meth:`start`.
        """
        self.config: DownloaderConfig = config or DownloaderConfig()
        self.driver: Optional[webdriver.Chrome] = driver

    # ------------------------------------------------------------------
    # WebDriver management
    # ------------------------------------------------------------------

    def _setup_driver(self) -> webdriver.Chrome:
        """Configure and return a Chrome WebDriver instance."""
        options = Options()

        options.add_experimental_option("prefs", {
            "intl.accept_languages": "de-DE,de",
        })
        options.add_experimental_option("excludeSwitches", ["enable-automation"])
        options.add_experimental_option("useAutomationExtension", False)
        options.add_argument("--disable-blink-features=AutomationControlled")

        if self.config.headless:
            options.add_argument("--headless=new")

        options.add_argument("--incognito")
        options.add_argument("--lang=de-DE")
        options.add_argument("--disable-extensions")
        options.add_argument("--disable-default-apps")
        options.add_argument("--no-first-run")
        options.add_argument("--no-sandbox")
        options.add_argument("--disable-gpu")
        options.add_argument("--disable-dev-shm-usage")
        options.add_argument("--disable-background-timer-throttling")
        options.add_argument("--disable-backgrounding-occluded-windows")
        options.add_argument("--disable-renderer-backgrounding")
        options.add_argument("--window-size=1920,1080")
        options.add_argument(f"--user-agent={self.config.user_agent}")

        if self.config.use_webdriver_manager:
            service = Service(ChromeDriverManager().install())
            driver = webdriver.Chrome(service=service, options=options)
        else:
            driver = webdriver.Chrome(options=options)

        driver.set_page_load_timeout(self.config.page_load_timeout)
        driver.set_script_timeout(self.config.script_timeout)
        return driver

    def start(self) -> None:
        """Start the browser."""
        if self.driver is None:
            logger.info("[start] Starting Chrome browser...")
            try:
                self.driver = self._setup_driver()
            except WebDriverException as exc:
                raise NavigationFailed(f"could not start Chrome: {exc.msg or exc}") from exc

    def stop(self) -> None:
        """Stop the browser."""
        if self.driver:
            logger.info("[stop] Stopping Chrome browser...")
            try:
                self.driver.quit()
            except WebDriverException as exc:
                logger.debug(f"[stop] Error while quitting driver: {exc}")
            self.driver = None

    def _require_driver(self) -> webdriver.Chrome:
        if self.driver is None:
            raise NavigationFailed("browser session is not started")
        return self.driver

    # ------------------------------------------------------------------
    # Browser capabilities
    # ------------------------------------------------------------------

    def navigate(self, url: str) -> None:
        """Load *url* in the current tab."""
        logger.debug(f"[navigate] {url}")
        try:
            self._require_driver().get(url)
        except WebDriverException as exc:
            raise NavigationFailed(f"failed to navigate to {url}: {exc.msg or exc}") from exc

    def click(self, selector: str) -> None:
        """Click the first element matching the CSS *selector*."""
        logger.debug(f"[click] {selector}")
        try:
            self._require_driver().find_element(By.CSS_SELECTOR, selector).click()
        except NoSuchElementException as exc:
            raise InteractionFailed(f"element not found: {selector}") from exc
        except (StaleElementReferenceException, ElementClickInterceptedException) as exc:
            raise InteractionFailed(f"click on {selector} intercepted: {exc.msg or exc}") from exc
        except WebDriverException as exc:
            raise InteractionFailed(f"failed to click {selector}: {exc.msg or exc}") from exc

    def evaluate(self, script: str, *args: Any) -> Any:
        """Run *script* in the page and return its value.

        Selenium errors are not translated here: readiness waits retry them.
        """
        return self._require_driver().execute_script(script, *args)

    def outer_html(self) -> str:
        """Return the full rendered markup of the current page."""
        try:
            return self.evaluate("return document.documentElement.outerHTML;") or ""
        except WebDriverException as exc:
            raise InteractionFailed(f"failed to read page markup: {exc.msg or exc}") from exc

    def get_cookies(self) -> List[Dict[str, Any]]:
        """Return all cookies visible to the session."""
        try:
            return list(self._require_driver().get_cookies())
        except WebDriverException as exc:
            raise CookieExtractionFailed(
                f"failed to get cookies from browser: {exc.msg or exc}"
            ) from exc

    def user_agent(self) -> str:
        """User agent of the running browser, config value as fallback."""
        try:
            value = self.evaluate("return navigator.userAgent;")
        except WebDriverException as exc:
            logger.debug(f"[user_agent] Could not read navigator.userAgent: {exc}")
            value = None
        return value or self.config.user_agent

    # ------------------------------------------------------------------
    # Context manager
    # ------------------------------------------------------------------

    def __enter__(self) -> BrowserSession:
        self.start()
        return self

    def __exit__(self, exc_type: type | None, exc_val: BaseException | None, exc_tb: object) -> None:
        self.stop()
