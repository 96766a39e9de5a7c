"""
Tests for browser.py - Selenium adapter and error mapping.

A MagicMock replaces the Chrome WebDriver; no browser is started.
"""

from unittest.mock import MagicMock, patch

import pytest
from selenium.common.exceptions import (
    ElementClickInterceptedException,
    NoSuchElementException,
    WebDriverException,
)
from selenium.webdriver.common.by import By

from adp_docs.browser import BrowserSession
from adp_docs.config import DownloaderConfig
from adp_docs.errors import CookieExtractionFailed, InteractionFailed, NavigationFailed


@pytest.fixture
def driver():
    return MagicMock()


@pytest.fixture
def session(driver):
    return BrowserSession(DownloaderConfig(), driver=driver)


class TestLifecycle:

    @patch.object(BrowserSession, "_setup_driver")
    def test_start_builds_driver(self, mock_setup):
        browser = BrowserSession()
        browser.start()

        mock_setup.assert_called_once()
        assert browser.driver is mock_setup.return_value

    @patch.object(BrowserSession, "_setup_driver", side_effect=WebDriverException("chrome not found"))
    def test_start_failure(self, mock_setup):
        with pytest.raises(NavigationFailed, match="could not start Chrome"):
            BrowserSession().start()

    def test_stop_quits_once(self, session, driver):
        session.stop()
        session.stop()

        driver.quit.assert_called_once()
        assert session.driver is None

    def test_stop_ignores_quit_errors(self, session, driver):
        driver.quit.side_effect = WebDriverException("already gone")
        session.stop()
        assert session.driver is None

    def test_context_manager(self, driver):
        with BrowserSession(driver=driver) as browser:
            assert browser.driver is driver
        driver.quit.assert_called_once()

    def test_not_started(self):
        with pytest.raises(NavigationFailed, match="not started"):
            BrowserSession().navigate("https://adpworld.adp.com")


class TestCapabilities:

    def test_navigate(self, session, driver):
        session.navigate("https://adpworld.adp.com")
        driver.get.assert_called_once_with("https://adpworld.adp.com")

    def test_navigate_failure(self, session, driver):
        driver.get.side_effect = WebDriverException("net::ERR_NAME_NOT_RESOLVED")
        with pytest.raises(NavigationFailed, match="ERR_NAME_NOT_RESOLVED"):
            session.navigate("https://adpworld.adp.com")

    def test_click(self, session, driver):
        session.click("#signBtn")

        driver.find_element.assert_called_once_with(By.CSS_SELECTOR, "#signBtn")
        driver.find_element.return_value.click.assert_called_once()

    def test_click_missing_element(self, session, driver):
        driver.find_element.side_effect = NoSuchElementException("no such element")
        with pytest.raises(InteractionFailed, match="element not found: #signBtn"):
            session.click("#signBtn")

    def test_click_intercepted(self, session, driver):
        driver.find_element.return_value.click.side_effect = ElementClickInterceptedException("overlay")
        with pytest.raises(InteractionFailed, match="intercepted"):
            session.click("#verifUseridBtn")

    def test_evaluate_passes_arguments(self, session, driver):
        driver.execute_script.return_value = True

        assert session.evaluate("return arguments[0];", "#x") is True
        driver.execute_script.assert_called_once_with("return arguments[0];", "#x")

    def test_outer_html(self, session, driver):
        driver.execute_script.return_value = "<html></html>"
        assert session.outer_html() == "<html></html>"

    def test_get_cookies(self, session, driver, portal_cookies):
        driver.get_cookies.return_value = portal_cookies
        assert session.get_cookies() == portal_cookies

    def test_get_cookies_failure(self, session, driver):
        driver.get_cookies.side_effect = WebDriverException("session deleted")
        with pytest.raises(CookieExtractionFailed):
            session.get_cookies()

    def test_user_agent_from_browser(self, session, driver):
        driver.execute_script.return_value = "Mozilla/5.0 HeadlessChrome"
        assert session.user_agent() == "Mozilla/5.0 HeadlessChrome"

    def test_user_agent_fallback(self, session, driver):
        driver.execute_script.side_effect = WebDriverException("gone")
        assert session.user_agent() == session.config.user_agent
