"""Download all documents from the ADP portal (adpworld.adp.com).

Architecture:
    - BrowserSession: Selenium Chrome adapter (navigate, click, evaluate).
    - ReadinessWaiter / Deadline: bounded polling gating every browser step.
    - SessionBridge: copies the session cookies into a requests.Session.
    - PaginatedLinkCollector: walks the "Alle Dokumente" table.
    - BulkDownloader: fetches the PDFs through the bridged session.

    Flow:
    1. Navigate to the portal login page
    2. Enter the user ID (shadow-DOM input), confirm
    3. Enter the password (shadow-DOM input), sign in
    4. Wait for the dashboard and open "Alle Dokumente"
    5. Bridge cookies, collect links over all pages
    6. Download every PDF as adp_<n>.pdf

    Every failure in this phase is fatal for the run; there is no
    partial-list recovery.
"""

from __future__ import annotations

import logging
import traceback
from pathlib import Path
from typing import Callable, Optional

from selenium.common.exceptions import WebDriverException

from .browser import BrowserSession
from .bulk_download import BulkDownloader
from .config import DownloaderConfig
from .errors import InteractionFailed, PortalError
from .link_collector import PaginatedLinkCollector
from .models import DownloadResult
from .readiness import Deadline, ReadinessWaiter
from .session_bridge import SessionBridge

logger = logging.getLogger(__name__)

# Fills the <input id="input"> inside the web component's shadow root.
SHADOW_INPUT_SCRIPT = """
const field = document.querySelector(arguments[0]);
if (field && field.shadowRoot) {
    const input = field.shadowRoot.querySelector("#input");
    if (input) {
        input.focus();
        input.value = arguments[1];
        input.dispatchEvent(new Event('input', { bubbles: true }));
        input.dispatchEvent(new Event('change', { bubbles: true }));
        return true;
    }
}
return false;
"""

CLICK_BY_TEXT_SCRIPT = """
const elements = document.querySelectorAll('button, a, [role="button"]');
for (const el of elements) {
    if (el.textContent.includes(arguments[0])) {
        el.click();
        return true;
    }
}
return false;
"""


class PortalDownloader:
    """Logs into the ADP portal and downloads all listed documents."""

    def __init__(
        self,
        download_dir: Path,
        config: Optional[DownloaderConfig] = None,
        browser_factory: Optional[Callable[[DownloaderConfig], BrowserSession]] = None,
    ) -> None:
        """Initialise the downloader.

        Args:
            download_dir: Directory where the PDFs are stored (created if absent).
            config: Optional configuration override. Uses defaults when *None*.
            browser_factory: Builds the browser session; defaults to
                             :class:`BrowserSession`.
        """
        self.config: DownloaderConfig = config or DownloaderConfig()
        self.download_dir: Path = Path(download_dir)
        self.download_dir.mkdir(parents=True, exist_ok=True)
        self.browser_factory = browser_factory or BrowserSession
        self.browser: Optional[BrowserSession] = None
        self.waiter: Optional[ReadinessWaiter] = None

    # ------------------------------------------------------------------
    # Public download entry point
    # ------------------------------------------------------------------

    def download(self, username: str, password: str) -> DownloadResult:
        """Log in and download every document of the account.

        Returns:
            :class:`DownloadResult` with the written files or an error message.
        """
        if not username or not password:
            return DownloadResult(success=False, error="username and password are required")

        logger.info(
            f"[download] Starting ADP PDF downloader (url={self.config.portal_url}, "
            f"download_path={self.download_dir}, "
            f"timeout_minutes={self.config.overall_timeout_minutes})"
        )

        deadline = Deadline(self.config.overall_timeout_seconds)
        self.browser = self.browser_factory(self.config)
        links = []
        try:
            self.browser.start()
            deadline.check("browser start")
            self.waiter = ReadinessWaiter(self.browser, self.config, deadline)

            self._login(username, password)
            self._open_all_documents()

            http_session = SessionBridge(self.config).bridge(self.browser, self.config.portal_url)

            links = PaginatedLinkCollector(self.browser, self.waiter, self.config).collect_all()
            deadline.check("link collection")
            logger.info(f"[download] Found {len(links)} PDF links")

            files = BulkDownloader(http_session, self.config).download_all(links, self.download_dir)

        except PortalError as exc:
            logger.error(f"[download] Error downloading PDFs: {exc}")
            return DownloadResult(success=False, link_count=len(links), error=str(exc))

        except WebDriverException as exc:
            logger.error(f"[download] Browser error: {exc.msg or exc}")
            logger.debug(traceback.format_exc())
            return DownloadResult(success=False, link_count=len(links), error=str(exc))

        finally:
            self.browser.stop()

        logger.info("[download] All PDFs downloaded successfully!")
        return DownloadResult(success=True, files=files, link_count=len(links))

    # ------------------------------------------------------------------
    # Login
    # ------------------------------------------------------------------

    def _login(self, username: str, password: str) -> None:
        """Run the two-step login form (user ID, then password)."""
        selectors = self.config.selectors

        logger.info("[_login] Navigating to login page")
        self.browser.navigate(self.config.portal_url)

        self.waiter.wait_for_element(selectors.username_field)
        logger.info("[_login] Entering username")
        self._fill_shadow_input(selectors.username_field, username, "username")
        self.browser.click(selectors.username_submit)

        self.waiter.wait_for_element(selectors.password_field)
        logger.info("[_login] Entering password")
        self._fill_shadow_input(selectors.password_field, password, "password")
        self.browser.click(selectors.password_submit)

        logger.info("[_login] Logged in successfully")

    def _fill_shadow_input(self, host_selector: str, value: str, what: str) -> None:
        """Type *value* into the shadow-root input of *host_selector*."""
        self.waiter.settle(self.config.input_delay, f"{what} input")
        try:
            filled = self.browser.evaluate(SHADOW_INPUT_SCRIPT, host_selector, value)
        except WebDriverException as exc:
            raise InteractionFailed(f"failed to input {what}: {exc.msg or exc}") from exc
        if not filled:
            raise InteractionFailed(f"failed to input {what}: no input in {host_selector}")
        self.waiter.settle(self.config.input_delay, f"{what} input")

    # ------------------------------------------------------------------
    # Document list
    # ------------------------------------------------------------------

    def _open_all_documents(self) -> None:
        """Wait for the dashboard and open the "Alle Dokumente" list."""
        selectors = self.config.selectors

        logger.info("[_open_all_documents] Waiting for dashboard to load")
        self.waiter.wait_for_text(selectors.all_documents_pattern)

        logger.info("[_open_all_documents] Navigating to All Documents page")
        self.waiter.settle(self.config.dashboard_settle_delay, "dashboard")
        try:
            clicked = self.browser.evaluate(CLICK_BY_TEXT_SCRIPT, selectors.all_documents_label)
        except WebDriverException as exc:
            raise InteractionFailed(
                f"failed to click '{selectors.all_documents_label}': {exc.msg or exc}"
            ) from exc
        if not clicked:
            raise InteractionFailed(
                f"no button or link containing '{selectors.all_documents_label}'"
            )
        self.waiter.settle(self.config.navigation_settle_delay, "document list")
