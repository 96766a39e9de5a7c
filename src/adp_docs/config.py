"""Zentrale Konfiguration fuer den ADP-Downloader.

All tuneable parameters (selectors, timeouts, delays, magic strings of the
portal markup) live in a single dataclass that is constructed once and
passed into every component.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Tuple

DEFAULT_PORTAL_URL = "https://adpworld.adp.com"

DEFAULT_DOWNLOAD_DIR: Path = Path.home() / "Downloads" / "adpworld.adp.com"
"""Default directory for downloaded and processed PDFs."""

USERNAME_ENV_VAR = "ADP_USERNAME"
PASSWORD_ENV_VAR = "ADP_PASSWORD"

# Cookies that carry the authenticated session (server affinity + SSO).
SESSION_COOKIE_NAMES: Tuple[str, ...] = (
    "BIGipServer_DE1_world-v2",
    "SERVERSESSIONID",
    "JSESSIONIDSSO",
    "EMEASMSESSION",
)


@dataclass
class PortalSelectors:
    """CSS selectors and text markers of the ADP portal markup."""

    username_field: str = "#login-form_username"
    username_submit: str = "#verifUseridBtn"
    password_field: str = "#login-form_password"
    password_submit: str = "#signBtn"
    all_documents_pattern: str = r"Alle Dokumente \(\d+\)"
    all_documents_label: str = "Alle Dokumente"
    document_table: str = (
        "#epaysliplist\\:ePayListForm\\:ePayslipDocs "
        "> div.ui-datatable-tablewrapper > table"
    )
    next_page: str = 'a[aria-label="Nächste Seite"]'
    disabled_class: str = "ui-state-disabled"
    document_link_marker: str = "/AdpwAdpaWeb/DocDownload"


@dataclass
class DownloaderConfig:
    """Central configuration for the download run.

    Replaces the magic numbers of the browser flow with a single,
    overridable object. Times are in seconds unless noted otherwise.
    """

    portal_url: str = DEFAULT_PORTAL_URL
    selectors: PortalSelectors = field(default_factory=PortalSelectors)
    session_cookie_names: Tuple[str, ...] = SESSION_COOKIE_NAMES

    # Overall deadline for the browser-driven phase (login + pagination).
    overall_timeout_minutes: int = 15
    wait_timeout: float = 30.0
    poll_interval: float = 0.5

    input_delay: float = 1.0
    dashboard_settle_delay: float = 3.0
    navigation_settle_delay: float = 2.0
    page_settle_delay: float = 2.0

    max_pages: int = 200

    page_load_timeout: int = 60
    script_timeout: int = 30
    request_timeout: float = 60.0
    chunk_size: int = 8192
    download_filename: str = "adp_{index}.pdf"

    headless: bool = True
    use_webdriver_manager: bool = True
    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/131.0.0.0 Safari/537.36"
    )

    @property
    def overall_timeout_seconds(self) -> float:
        return self.overall_timeout_minutes * 60.0
