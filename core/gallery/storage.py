# Path: core/gallery/storage.py
# Purpose: Provide the read-only filesystem capability consumed by the gallery core.
# Layer: core/gallery.
# Details: Live builds and the manifest job inject the same adapter so their semantics cannot drift.

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DirEntry:
    """Name and type of one directory entry (symlinks are followed)."""

    name: str
    is_dir: bool
    is_file: bool


class GalleryStorage(Protocol):
    """Capability interface: list directories, read control files, identify directories."""

    def list_dir(self, path: Path) -> List[DirEntry]:
        """Return the entries of ``path``, or an empty list when it cannot be read."""

    def read_text(self, path: Path) -> Optional[str]:
        """Return the UTF-8 content of ``path``, or None when it is missing or unreadable."""

    def identity(self, path: Path) -> Optional[Tuple[int, int]]:
        """Return a canonical ``(device, inode)`` identity for ``path`` if it can be stat'ed."""


class LocalStorage:
    """GalleryStorage backed by the local filesystem."""

    def list_dir(self, path: Path) -> List[DirEntry]:
        entries: List[DirEntry] = []
        try:
            with os.scandir(path) as iterator:
                for entry in iterator:
                    try:
                        entries.append(DirEntry(entry.name, entry.is_dir(), entry.is_file()))
                    except OSError:
                        # Broken symlinks and vanished entries are skipped.
                        continue
        except OSError as exc:
            logger.debug("Cannot list %s: %s", path, exc)
            return []
        return entries

    def read_text(self, path: Path) -> Optional[str]:
        try:
            return Path(path).read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as exc:
            logger.debug("Cannot read %s: %s", path, exc)
            return None

    def identity(self, path: Path) -> Optional[Tuple[int, int]]:
        try:
            stat = os.stat(path)
        except OSError:
            return None
        return (stat.st_dev, stat.st_ino)


class CachedStorage:
    """Memoize directory listings for the lifetime of one traversal.

    Case-correction and subtree search rescan the same directories many times
    during a build; a fresh instance is created per build so nothing leaks
    between builds.
    """

    def __init__(self, inner: GalleryStorage) -> None:
        self._inner = inner
        self._listings: Dict[Path, List[DirEntry]] = {}

    def list_dir(self, path: Path) -> List[DirEntry]:
        key = Path(path)
        if key not in self._listings:
            self._listings[key] = self._inner.list_dir(key)
        return list(self._listings[key])

    def read_text(self, path: Path) -> Optional[str]:
        return self._inner.read_text(path)

    def identity(self, path: Path) -> Optional[Tuple[int, int]]:
        return self._inner.identity(path)
