"""Transfer the authenticated browser session to a requests.Session.

The portal's pages need JavaScript, the PDF downloads do not. After the
login, the session-identity cookies are copied from the browser into a plain
HTTP client so the documents can be fetched without driving the browser.
Only allow-listed cookies for the portal's own domain are transferred.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Optional
from urllib.parse import urlsplit

import requests
from selenium.common.exceptions import WebDriverException

from .config import DownloaderConfig
from .errors import CookieExtractionFailed
from .models import CookieSet, SessionCookie

logger = logging.getLogger(__name__)


def origin_of(url: str) -> str:
    """Reduce *url* to ``scheme://host[:port]``."""
    parts = urlsplit(url)
    if not parts.scheme or not parts.netloc:
        raise ValueError(f"not an absolute URL: {url!r}")
    return f"{parts.scheme}://{parts.netloc}"


def domain_matches(host: str, cookie_domain: str) -> bool:
    """RFC 6265 domain match; an empty cookie domain means host-only."""
    if not cookie_domain:
        return True
    domain = cookie_domain.lstrip(".").lower()
    host = host.lower()
    return host == domain or host.endswith("." + domain)


def filter_session_cookies(
    raw_cookies: Iterable[Dict[str, Any]],
    allowed_names: Iterable[str],
    host: str,
) -> CookieSet:
    """Keep only allow-listed cookies that belong to *host*."""
    allowed = set(allowed_names)
    kept = []

    for raw in raw_cookies:
        name = raw.get("name")
        if name not in allowed:
            continue
        domain = raw.get("domain") or ""
        if not domain_matches(host, domain):
            logger.debug(f"[filter_session_cookies] Skipping {name} for foreign domain {domain}")
            continue
        kept.append(SessionCookie(
            name=name,
            value=str(raw.get("value", "")),
            domain=domain or host,
            path=raw.get("path") or "/",
        ))

    return CookieSet(tuple(kept))


def build_http_session(cookies: CookieSet, user_agent: Optional[str] = None) -> requests.Session:
    """Create a fresh requests.Session holding *cookies*."""
    session = requests.Session()
    if user_agent:
        session.headers.update({"User-Agent": user_agent})
    for cookie in cookies:
        session.cookies.set(cookie.name, cookie.value, domain=cookie.domain, path=cookie.path)
    return session


class SessionBridge:
    """Extracts session cookies from a browser and installs them in an HTTP client."""

    def __init__(self, config: Optional[DownloaderConfig] = None) -> None:
        self.config = config or DownloaderConfig()

    def extract(self, browser, origin_url: str) -> CookieSet:
        """Read and filter the browser cookies for *origin_url*."""
        host = urlsplit(origin_of(origin_url)).hostname or ""
        try:
            raw_cookies = browser.get_cookies()
        except WebDriverException as exc:
            raise CookieExtractionFailed(f"failed to get cookies from browser: {exc}") from exc

        cookies = filter_session_cookies(raw_cookies, self.config.session_cookie_names, host)
        logger.debug(
            f"[extract] {len(raw_cookies)} browser cookies, kept {cookies.names()}"
        )
        return cookies

    def bridge(self, browser, origin_url: str) -> requests.Session:
        """Return an HTTP session authenticated like *browser*.

        Raises:
            CookieExtractionFailed: The browser cookies could not be read.
        """
        logger.info("[bridge] Getting cookies for document access")
        cookies = self.extract(browser, origin_url)

        if not cookies:
            logger.warning(
                "[bridge] No session cookies found - downloads will most likely fail"
            )

        session = build_http_session(cookies, browser.user_agent())
        logger.info(f"[bridge] Cookie setup complete (cookie_count={len(cookies)})")
        return session
