"""
ADP-Dokumente - Kommandozeile

Befehle:
1. download: Alle PDFs von adpworld.adp.com herunterladen
2. process: Heruntergeladene PDFs klassifizieren und umbenennen
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from .config import (
    DEFAULT_DOWNLOAD_DIR,
    DEFAULT_PORTAL_URL,
    PASSWORD_ENV_VAR,
    USERNAME_ENV_VAR,
    DownloaderConfig,
)
from .portal_downloader import PortalDownloader
from .processor import DocumentProcessor

logger = logging.getLogger("adp_docs")

NOISY_LOGGERS = ("selenium", "urllib3", "WDM", "pdfminer")


def setup_logging(verbose: bool = False, log_file: Optional[str] = None) -> None:
    """Konfiguriert das Logging fuer die Kommandozeile."""
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - ADP - %(levelname)s - %(message)s",
        handlers=handlers,
        force=True,
    )
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def build_parser() -> argparse.ArgumentParser:
    """Erzeugt den Argument-Parser mit den Unterbefehlen."""
    parser = argparse.ArgumentParser(
        prog="adp-docs",
        description="ADP document downloader and processor",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug-Ausgaben aktivieren")
    parser.add_argument("--log-file", help="Log zusaetzlich in diese Datei schreiben")

    subparsers = parser.add_subparsers(dest="command", help="Verfuegbare Befehle")

    # Download
    download_parser = subparsers.add_parser(
        "download", help="Alle PDFs von adpworld.adp.com herunterladen"
    )
    download_parser.add_argument("--url", default=DEFAULT_PORTAL_URL, help="ADP website URL")
    download_parser.add_argument(
        "-u", "--username", default=os.environ.get(USERNAME_ENV_VAR),
        help=f"ADP username (required if {USERNAME_ENV_VAR} env var not set)",
    )
    download_parser.add_argument(
        "-p", "--password", default=os.environ.get(PASSWORD_ENV_VAR),
        help=f"ADP password (required if {PASSWORD_ENV_VAR} env var not set)",
    )
    download_parser.add_argument(
        "--download-path", type=Path, default=DEFAULT_DOWNLOAD_DIR,
        help=f"Zielverzeichnis (default: {DEFAULT_DOWNLOAD_DIR})",
    )
    download_parser.add_argument(
        "--headless", action=argparse.BooleanOptionalAction, default=True,
        help="Browser ohne sichtbares Fenster starten (default: an)",
    )
    download_parser.add_argument(
        "--timeout", type=int, default=15,
        help="Timeout in Minuten fuer den gesamten Browser-Lauf (default: 15)",
    )

    # Process
    process_parser = subparsers.add_parser(
        "process", help="Heruntergeladene PDFs klassifizieren und umbenennen"
    )
    process_parser.add_argument(
        "--path", type=Path, default=DEFAULT_DOWNLOAD_DIR,
        help=f"Verzeichnis mit den PDFs (default: {DEFAULT_DOWNLOAD_DIR})",
    )
    process_parser.add_argument("--dry", action="store_true", help="Dry-Run: nichts umbenennen")

    return parser


def run_download(args: argparse.Namespace) -> int:
    config = DownloaderConfig(
        portal_url=args.url.rstrip("/"),
        headless=args.headless,
        overall_timeout_minutes=args.timeout,
    )
    downloader = PortalDownloader(args.download_path, config=config)
    result = downloader.download(args.username, args.password)

    if not result.success:
        logger.error(f"Error downloading PDFs: {result.error}")
        return 1

    logger.info(f"{len(result.files)} PDFs gespeichert in {args.download_path}")
    return 0


def run_process(args: argparse.Namespace) -> int:
    if not args.path.is_dir():
        logger.error(f"Directory does not exist: {args.path}")
        return 1

    logger.info(f"Starting PDF processing (path={args.path}, dry_run={args.dry})")
    summary = DocumentProcessor().process(args.path, dry_run=args.dry)

    logger.info(
        f"All PDFs processed: {summary.renamed} umbenannt, "
        f"{summary.unrecognized} nicht erkannt, "
        f"{summary.extraction_failed} nicht lesbar"
    )
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """CLI-Entrypoint."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    if args.command == "download":
        missing = [
            flag for flag, value in (("--username", args.username), ("--password", args.password))
            if not value
        ]
        if missing:
            parser.error(
                f"{' and '.join(missing)} required "
                f"(or set {USERNAME_ENV_VAR} / {PASSWORD_ENV_VAR})"
            )

    setup_logging(args.verbose, args.log_file)

    if args.command == "download":
        return run_download(args)
    return run_process(args)


if __name__ == "__main__":
    sys.exit(main())
