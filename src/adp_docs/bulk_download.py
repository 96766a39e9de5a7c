"""Sequential PDF download through the bridged HTTP session.

Files are written under placeholder names (``adp_<n>.pdf``); the semantic
names are assigned later by the process step. The first failure aborts the
batch, because the remaining downloads depend on the same session cookies.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Sequence
from urllib.parse import urljoin, urlsplit

import requests
from tqdm import tqdm

from .config import DownloaderConfig
from .errors import DownloadFailed
from .filenames import ensure_unique_filename

logger = logging.getLogger(__name__)


def absolute_url(link: str, origin_url: str) -> str:
    """Resolve *link* against the portal origin unless it is already absolute."""
    if urlsplit(link).scheme in ("http", "https"):
        return link
    return urljoin(origin_url, link)


class BulkDownloader:
    """Downloads a list of links one after another."""

    def __init__(self, http_session: requests.Session, config: Optional[DownloaderConfig] = None) -> None:
        self.session = http_session
        self.config = config or DownloaderConfig()

    def download_all(self, links: Sequence[str], destination_dir: Path) -> List[Path]:
        """Download every link into *destination_dir*.

        Returns:
            Paths of the written files, in link order.

        Raises:
            DownloadFailed: On the first non-200 response or transport error.
        """
        destination_dir = Path(destination_dir)
        destination_dir.mkdir(parents=True, exist_ok=True)
        written: List[Path] = []

        with tqdm(links, desc="Downloads", unit="PDF") as pbar:
            for index, link in enumerate(pbar, start=1):
                pbar.set_postfix_str(f"{index}/{len(links)}")
                url = absolute_url(link, self.config.portal_url)
                target = ensure_unique_filename(
                    destination_dir / self.config.download_filename.format(index=index)
                )
                logger.info(f"[download_all] Downloading PDF {index}/{len(links)}")
                written.append(self.download_file(url, target))

        return written

    def download_file(self, url: str, target: Path) -> Path:
        """Stream *url* into *target*. The file is only created after a 200."""
        logger.debug(f"[download_file] GET {url}")
        created = False
        size = 0
        try:
            response = self.session.get(url, stream=True, timeout=self.config.request_timeout)
            try:
                if response.status_code != requests.codes.ok:
                    raise DownloadFailed(url, f"bad status: {response.status_code} {response.reason}")

                with open(target, "xb") as fh:
                    created = True
                    for chunk in response.iter_content(chunk_size=self.config.chunk_size):
                        if chunk:
                            fh.write(chunk)
                            size += len(chunk)
            finally:
                response.close()
        except (requests.RequestException, OSError) as exc:
            if created:
                self._discard_partial(target)
            raise DownloadFailed(url, exc) from exc

        logger.info(f"[download_file] Successfully downloaded {target.name} ({size} bytes)")
        return target

    @staticmethod
    def _discard_partial(target: Path) -> None:
        try:
            target.unlink(missing_ok=True)
        except OSError as exc:
            logger.debug(f"[_discard_partial] Could not remove {target}: {exc}")
