"""
ADP-Dokumente - Download und Umbenennung der Lohnunterlagen von adpworld.adp.com.

Module:
- config: Zentrale Konfiguration (Selektoren, Timeouts, Cookie-Allowlist)
- browser: Selenium-Session fuer das Portal
- readiness: Wartebedingungen und Gesamt-Deadline
- session_bridge: Browser-Cookies -> requests.Session
- link_collector: Dokumentlinks ueber alle Seiten sammeln
- bulk_download: PDFs sequentiell herunterladen
- portal_downloader: Orchestrierung des Download-Laufs
- pdf_text: Textextraktion (pdfplumber)
- classifier: Dokumentart und Zielname bestimmen
- filenames: Kollisionsfreie Dateinamen
- processor: PDFs eines Verzeichnisses umbenennen
"""

from .classifier import DocumentClassifier
from .config import DownloaderConfig, PortalSelectors
from .errors import (
    CookieExtractionFailed,
    DownloadFailed,
    ExtractionFailed,
    InteractionFailed,
    NavigationFailed,
    PortalError,
    TimedOut,
)
from .filenames import FilenameAllocator, ensure_unique_filename
from .models import ClassificationResult, DocumentCategory, DownloadResult, Period, ProcessingSummary
from .portal_downloader import PortalDownloader
from .processor import DocumentProcessor

__version__ = "1.0.0"
__all__ = [
    "DocumentClassifier",
    "DownloaderConfig",
    "PortalSelectors",
    "PortalError",
    "TimedOut",
    "NavigationFailed",
    "InteractionFailed",
    "CookieExtractionFailed",
    "DownloadFailed",
    "ExtractionFailed",
    "FilenameAllocator",
    "ensure_unique_filename",
    "ClassificationResult",
    "DocumentCategory",
    "DownloadResult",
    "Period",
    "ProcessingSummary",
    "PortalDownloader",
    "DocumentProcessor",
]
