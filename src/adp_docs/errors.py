"""Fehlerklassen fuer Download- und Verarbeitungsphase."""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class PortalError(Exception):
    """Base class for all errors raised by adp_docs."""


class TimedOut(PortalError):
    """A readiness wait or the overall run deadline was exceeded."""

    def __init__(self, target: str, elapsed: float, message: Optional[str] = None) -> None:
        self.target = target
        self.elapsed = elapsed
        super().__init__(
            message or f"timed out after {elapsed:.1f}s waiting for: {target}"
        )


class NavigationFailed(PortalError):
    """The browser could not load a page."""


class InteractionFailed(PortalError):
    """A click or form input in the browser could not be completed."""


class CookieExtractionFailed(PortalError):
    """The browser cookies could not be read."""


class DownloadFailed(PortalError):
    """A document could not be downloaded. Aborts the whole batch."""

    def __init__(self, link: str, cause: object) -> None:
        self.link = link
        self.cause = cause
        super().__init__(f"failed to download {link}: {cause}")


class ExtractionFailed(PortalError):
    """Text extraction from a single PDF failed."""

    def __init__(self, path: Path, cause: object) -> None:
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"failed to extract text from {self.path.name}: {cause}")
