"""
Tests for portal_downloader.py - the complete browser-driven download.

The browser is the scripted FakePortalBrowser from conftest; the cookie
bridge is patched to hand out a mocked HTTP session.
"""

from unittest.mock import MagicMock, patch

import pytest
from selenium.common.exceptions import WebDriverException

from adp_docs.models import DownloadResult
from adp_docs.portal_downloader import PortalDownloader
from adp_docs.readiness import Deadline

from conftest import FakePortalBrowser, make_listing_page


def pdf_response(content=b"%PDF-1.4"):
    response = MagicMock()
    response.status_code = 200
    response.reason = "OK"
    response.iter_content.return_value = iter([content])
    return response


@pytest.fixture
def http_session():
    session = MagicMock()
    session.get.side_effect = lambda url, **kwargs: pdf_response(url.encode())
    return session


@pytest.fixture
def bridge(http_session):
    with patch("adp_docs.portal_downloader.SessionBridge") as mock_bridge:
        mock_bridge.return_value.bridge.return_value = http_session
        yield mock_bridge


def make_downloader(tmp_path, config, browser):
    return PortalDownloader(tmp_path / "pdfs", config=config, browser_factory=lambda cfg: browser)


class TestDownload:

    def test_success(self, tmp_path, fast_config, bridge, http_session):
        browser = FakePortalBrowser([make_listing_page([1, 2]), make_listing_page([3])])
        downloader = make_downloader(tmp_path, fast_config, browser)

        result = downloader.download("max.mustermann", "geheim")

        assert isinstance(result, DownloadResult)
        assert result.success is True
        assert result.error is None
        assert result.link_count == 3
        assert [f.name for f in result.files] == ["adp_1.pdf", "adp_2.pdf", "adp_3.pdf"]
        assert (tmp_path / "pdfs" / "adp_3.pdf").read_bytes() == (
            b"https://adpworld.adp.com/AdpwAdpaWeb/DocDownload?docId=3"
        )
        assert http_session.get.call_count == 3
        assert browser.started and browser.stopped

    def test_login_sequence(self, tmp_path, fast_config, bridge):
        browser = FakePortalBrowser([make_listing_page([1])])
        selectors = fast_config.selectors

        make_downloader(tmp_path, fast_config, browser).download("max.mustermann", "geheim")

        assert browser.navigated == [fast_config.portal_url]
        assert browser.shadow_inputs == [
            (selectors.username_field, "max.mustermann"),
            (selectors.password_field, "geheim"),
        ]
        assert browser.clicks[:2] == [selectors.username_submit, selectors.password_submit]

    def test_cookies_bridged_from_portal_origin(self, tmp_path, fast_config, bridge):
        browser = FakePortalBrowser([make_listing_page([1])])

        make_downloader(tmp_path, fast_config, browser).download("u", "p")

        bridge.assert_called_once_with(fast_config)
        bridge.return_value.bridge.assert_called_once_with(browser, fast_config.portal_url)

    def test_no_documents(self, tmp_path, fast_config, bridge, http_session):
        browser = FakePortalBrowser([make_listing_page([])])

        result = make_downloader(tmp_path, fast_config, browser).download("u", "p")

        assert result.success is True
        assert result.files == []
        http_session.get.assert_not_called()

    @pytest.mark.parametrize("username,password", [("", "geheim"), ("max", ""), (None, None)])
    def test_missing_credentials(self, tmp_path, fast_config, username, password):
        factory = MagicMock()
        downloader = PortalDownloader(tmp_path, config=fast_config, browser_factory=factory)

        result = downloader.download(username, password)

        assert result.success is False
        assert "required" in result.error
        factory.assert_not_called()


class TestFailures:

    def test_username_field_without_input(self, tmp_path, fast_config, bridge):
        browser = FakePortalBrowser([make_listing_page([1])], shadow_input_ok=False)

        result = make_downloader(tmp_path, fast_config, browser).download("u", "p")

        assert result.success is False
        assert "failed to input username" in result.error
        assert browser.clicks == []
        assert browser.stopped

    def test_dashboard_never_loads(self, tmp_path, fast_config, bridge):
        fast_config.wait_timeout = 0.05
        browser = FakePortalBrowser([make_listing_page([1])], page_text="Anmeldung fehlgeschlagen")

        result = make_downloader(tmp_path, fast_config, browser).download("u", "p")

        assert result.success is False
        assert "Alle Dokumente" in result.error
        bridge.return_value.bridge.assert_not_called()
        assert browser.stopped

    def test_all_documents_button_missing(self, tmp_path, fast_config, bridge):
        browser = FakePortalBrowser([make_listing_page([1])], all_documents_ok=False)

        result = make_downloader(tmp_path, fast_config, browser).download("u", "p")

        assert result.success is False
        assert "Alle Dokumente" in result.error

    def test_download_error_reports_link_count(self, tmp_path, fast_config, bridge, http_session):
        forbidden = MagicMock(status_code=403, reason="Forbidden")
        http_session.get.side_effect = [pdf_response(), forbidden]
        browser = FakePortalBrowser([make_listing_page([1, 2, 3])])

        result = make_downloader(tmp_path, fast_config, browser).download("u", "p")

        assert result.success is False
        assert result.link_count == 3
        assert "403" in result.error
        assert browser.stopped

    def test_browser_crash(self, tmp_path, fast_config, bridge):
        browser = FakePortalBrowser([make_listing_page([1])])
        browser.navigate = MagicMock(side_effect=WebDriverException("chrome not reachable"))

        result = make_downloader(tmp_path, fast_config, browser).download("u", "p")

        assert result.success is False
        assert "chrome not reachable" in result.error
        assert browser.stopped

    def test_deadline_covers_browser_start(self, tmp_path, fast_config, bridge):
        """The overall timeout starts before Chrome is launched."""
        events = []
        browser = FakePortalBrowser([make_listing_page([1])])
        browser.start = lambda: events.append("start")

        def deadline(seconds):
            events.append("deadline")
            return Deadline(seconds)

        with patch("adp_docs.portal_downloader.Deadline", side_effect=deadline):
            make_downloader(tmp_path, fast_config, browser).download("u", "p")

        assert events == ["deadline", "start"]

    def test_slow_browser_start_times_out(self, tmp_path, fast_config, bridge):
        fast_config.overall_timeout_minutes = 0
        browser = FakePortalBrowser([make_listing_page([1])])

        result = make_downloader(tmp_path, fast_config, browser).download("u", "p")

        assert result.success is False
        assert "browser start" in result.error
        assert browser.navigated == []
        assert browser.stopped

    def test_download_directory_created(self, tmp_path, fast_config):
        PortalDownloader(tmp_path / "a" / "b", config=fast_config, browser_factory=MagicMock())
        assert (tmp_path / "a" / "b").is_dir()
