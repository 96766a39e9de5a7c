"""Kollisionsfreie Dateinamen im Zielverzeichnis."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Set

logger = logging.getLogger(__name__)

DISAMBIGUATION_SUFFIX = "_2"


def with_suffix_marker(path: Path) -> Path:
    """``dir/name.pdf`` -> ``dir/name_2.pdf``"""
    return path.with_name(f"{path.stem}{DISAMBIGUATION_SUFFIX}{path.suffix}")


def ensure_unique_filename(path: Path) -> Path:
    """Return *path*, or *path* with ``_2`` before the extension if it exists.

    Only one level of disambiguation: the suffixed name is not checked again.
    """
    path = Path(path)
    if not path.exists():
        return path
    return with_suffix_marker(path)


class FilenameAllocator:
    """Allocates target paths that do not clobber existing files.

    Besides the filesystem, the allocator knows about moves decided earlier
    in the same run (:meth:`record_move`). A dry run therefore reaches the
    same decisions as a live run, where those moves have already happened.
    """

    def __init__(self) -> None:
        self._claimed: Set[Path] = set()
        self._vacated: Set[Path] = set()

    def is_taken(self, path: Path) -> bool:
        path = Path(path)
        if path in self._claimed:
            return True
        if path in self._vacated:
            return False
        return path.exists()

    def allocate(self, proposed: Path) -> Path:
        """Return *proposed* unchanged if free, otherwise the ``_2`` variant."""
        proposed = Path(proposed)
        if not self.is_taken(proposed):
            return proposed

        candidate = with_suffix_marker(proposed)
        logger.debug(f"[allocate] {proposed.name} exists, using {candidate.name}")
        return candidate

    def record_move(self, source: Path, target: Path) -> None:
        """Remember that *source* was (or would be) renamed to *target*."""
        source, target = Path(source), Path(target)
        self._claimed.discard(source)
        self._vacated.add(source)
        self._vacated.discard(target)
        self._claimed.add(target)
