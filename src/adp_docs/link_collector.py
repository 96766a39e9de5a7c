"""Collect document download links from the paginated "Alle Dokumente" list.

Flow per page:
    1. Wait for the document table to be visible
    2. Read the rendered markup and extract all DocDownload anchors
    3. Check the "Naechste Seite" control; stop if it is missing or disabled
    4. Otherwise click it, let the table re-render and repeat
"""

from __future__ import annotations

import json
import logging
from typing import List, Optional

from bs4 import BeautifulSoup
from selenium.common.exceptions import WebDriverException

from .config import DownloaderConfig
from .errors import InteractionFailed
from .models import PageState
from .readiness import ReadinessWaiter

logger = logging.getLogger(__name__)


def extract_document_links(html: str, marker: str) -> List[str]:
    """Return every anchor ``href`` containing *marker*, in document order."""
    soup = BeautifulSoup(html, "html.parser")
    return [
        anchor["href"]
        for anchor in soup.find_all("a", href=True)
        if marker in anchor["href"]
    ]


def next_page_script(selector: str, disabled_class: str) -> str:
    """JS returning ``true`` when there is no usable next-page control."""
    return (
        f"const nextBtn = document.querySelector({json.dumps(selector)});\n"
        f"return !nextBtn || nextBtn.classList.contains({json.dumps(disabled_class)});"
    )


class PaginatedLinkCollector:
    """Walks the document list page by page and collects download links."""

    def __init__(
        self,
        browser,
        waiter: ReadinessWaiter,
        config: Optional[DownloaderConfig] = None,
    ) -> None:
        self.browser = browser
        self.waiter = waiter
        self.config = config or DownloaderConfig()

    def collect_all(self) -> List[str]:
        """Collect the links of all pages.

        Returns:
            Links in page order, duplicates kept.

        Raises:
            TimedOut: The table did not render in time.
            InteractionFailed: Paging failed or exceeded ``max_pages``.
        """
        selectors = self.config.selectors
        links: List[str] = []
        state = PageState()

        while state.has_next:
            logger.info(f"[collect_all] Processing document page {state.page_number}")
            self.waiter.wait_for_element(selectors.document_table)

            html = self.browser.outer_html()
            page_links = extract_document_links(html, selectors.document_link_marker)
            logger.info(
                f"[collect_all] Found {len(page_links)} PDF links on page {state.page_number}"
            )
            links.extend(page_links)

            state.has_next = self._has_next_page()
            if not state.has_next:
                logger.info(f"[collect_all] Reached last page (total_pages={state.page_number})")
                break

            if state.page_number >= self.config.max_pages:
                raise InteractionFailed(
                    f"pagination did not end after {self.config.max_pages} pages"
                )

            self._advance()
            state.page_number += 1

        logger.info(f"[collect_all] Total PDF links found across all pages: {len(links)}")
        return links

    def _has_next_page(self) -> bool:
        selectors = self.config.selectors
        script = next_page_script(selectors.next_page, selectors.disabled_class)
        try:
            next_disabled = self.browser.evaluate(script)
        except WebDriverException as exc:
            raise InteractionFailed(f"failed to check next page button: {exc.msg or exc}") from exc
        return not next_disabled

    def _advance(self) -> None:
        logger.info("[_advance] Navigating to next page")
        self.browser.click(self.config.selectors.next_page)
        self.waiter.settle(self.config.page_settle_delay, "next page")
        self.waiter.wait_for_element(self.config.selectors.document_table)
