"""
Shared fixtures for all adp_docs tests.

Provides a scripted stand-in for the browser session (no Chrome needed),
a fast configuration without settling pauses, listing-page markup
generators and sample document texts.
"""

from typing import Dict, List, Optional

import pytest

from adp_docs.config import DownloaderConfig
from adp_docs.link_collector import extract_document_links
from adp_docs.portal_downloader import CLICK_BY_TEXT_SCRIPT, SHADOW_INPUT_SCRIPT
from adp_docs.readiness import PAGE_TEXT_SCRIPT, VISIBILITY_SCRIPT

DOC_LINK = "/AdpwAdpaWeb/DocDownload?docId={}"


def make_listing_page(doc_ids: List[int], extra_links: Optional[List[str]] = None) -> str:
    """Builds the markup of one "Alle Dokumente" page."""
    rows = "\n".join(
        f'<tr><td><a href="{DOC_LINK.format(i)}">Dokument {i}</a></td></tr>'
        for i in doc_ids
    )
    extras = "\n".join(f'<a href="{href}">x</a>' for href in (extra_links or []))
    return f"""
    <html><body>
      <nav><a href="/AdpwAdpaWeb/Home">Startseite</a>{extras}</nav>
      <div id="epaysliplist:ePayListForm:ePayslipDocs">
        <div class="ui-datatable-tablewrapper"><table>{rows}</table></div>
      </div>
    </body></html>
    """


class FakePortalBrowser:
    """Scripted replacement for BrowserSession.

    Serves a fixed list of listing pages; clicking the next-page control
    advances to the following page. The next-page control counts as
    disabled on the last page.
    """

    def __init__(
        self,
        pages: List[str],
        cookies: Optional[List[Dict]] = None,
        page_text: str = "Willkommen - Alle Dokumente (12)",
        shadow_input_ok: bool = True,
        all_documents_ok: bool = True,
        next_selector: str = DownloaderConfig().selectors.next_page,
    ) -> None:
        self.pages = pages
        self.cookies = cookies or []
        self.page_text = page_text
        self.shadow_input_ok = shadow_input_ok
        self.all_documents_ok = all_documents_ok
        self.next_selector = next_selector

        self.current = 0
        self.started = False
        self.stopped = False
        self.navigated: List[str] = []
        self.clicks: List[str] = []
        self.shadow_inputs: List[tuple] = []

    def start(self) -> None:
        self.started = True

    def stop(self) -> None:
        self.stopped = True

    def navigate(self, url: str) -> None:
        self.navigated.append(url)

    def click(self, selector: str) -> None:
        self.clicks.append(selector)
        if selector == self.next_selector:
            self.current += 1

    def evaluate(self, script: str, *args):
        if script == VISIBILITY_SCRIPT:
            return True
        if script == PAGE_TEXT_SCRIPT:
            return self.page_text
        if script == SHADOW_INPUT_SCRIPT:
            self.shadow_inputs.append(args)
            return self.shadow_input_ok
        if script == CLICK_BY_TEXT_SCRIPT:
            return self.all_documents_ok
        if "nextBtn" in script:
            return self.current >= len(self.pages) - 1
        return None

    def outer_html(self) -> str:
        return self.pages[self.current]

    def get_cookies(self) -> List[Dict]:
        return list(self.cookies)

    def user_agent(self) -> str:
        return "TestAgent/1.0"

    def links_on_all_pages(self, marker: str) -> List[str]:
        return [link for page in self.pages for link in extract_document_links(page, marker)]


@pytest.fixture
def fast_config():
    """DownloaderConfig without settling pauses and with a short poll interval."""
    return DownloaderConfig(
        wait_timeout=1.0,
        poll_interval=0.01,
        input_delay=0,
        dashboard_settle_delay=0,
        navigation_settle_delay=0,
        page_settle_delay=0,
    )


@pytest.fixture
def portal_cookies():
    """Cookies as returned by WebDriver.get_cookies() after the login."""
    return [
        {"name": "SERVERSESSIONID", "value": "srv-123", "domain": "adpworld.adp.com", "path": "/"},
        {"name": "JSESSIONIDSSO", "value": "sso-456", "domain": ".adp.com", "path": "/"},
        {"name": "BIGipServer_DE1_world-v2", "value": "bigip", "domain": "adpworld.adp.com"},
        {"name": "EMEASMSESSION", "value": "emea", "domain": ".adp.com", "path": "/"},
        {"name": "_ga", "value": "GA1.2.3", "domain": ".adp.com", "path": "/"},
        {"name": "SERVERSESSIONID", "value": "other", "domain": "tracker.example.com", "path": "/"},
    ]


@pytest.fixture
def payslip_text():
    return (
        "ADP Employer Services GmbH\n"
        "Verdienstabrechnung\n"
        "Personalnummer 00042\n"
        "Abrechnungsmonat: Januar 2024\n"
        "Gesamtbrutto 4.250,00\n"
    )


@pytest.fixture
def correction_text():
    return (
        "Verdienstabrechnung\n"
        "Abrechnungsmonat: Januar 2024\n"
        "Rückrechnung: Dezember 2023\n"
        "Nachzahlung 120,00\n"
    )


@pytest.fixture
def social_insurance_text():
    return (
        "Meldebescheinigung zur Sozialversicherung\n"
        "für den Arbeitnehmer\n"
        "Abrechnungsmonat: März 2023\n"
    )


@pytest.fixture
def tax_certificate_text():
    return "Ausdruck der elektronischen Lohnsteuerbescheinigung für 2022"
