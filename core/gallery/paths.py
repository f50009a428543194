# Path: core/gallery/paths.py
# Purpose: Classify media files, derive URL-safe identifiers, and build public addresses.
# Layer: core/gallery.
# Details: Directory listing goes through the injected storage and never raises.

from __future__ import annotations

import os
from pathlib import Path
from typing import List, Optional, Sequence
from urllib.parse import quote, unquote

from .storage import DirEntry, GalleryStorage, LocalStorage

MEDIA_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".webp", ".gif", ".avif", ".bmp", ".tiff"})

# Characters URI-component encoding leaves untouched besides alphanumerics and "-_.~".
_SLUG_SAFE = "!*'()"


def is_media(filename: str) -> bool:
    """Return True if the filename carries a recognised raster image extension."""

    return os.path.splitext(filename)[1].lower() in MEDIA_EXTENSIONS


def slugify(name: str) -> str:
    return quote(name, safe=_SLUG_SAFE)


def unslugify(slug: str) -> str:
    return unquote(slug)


def public_address(root_marker: str, parts: Sequence[str]) -> str:
    """Return ``/<root_marker>/<part>/...`` for path segments below the collection root."""

    return "/" + "/".join([root_marker, *parts])


def filename_from_address(address: Optional[str]) -> Optional[str]:
    if not address:
        return None
    return address.rsplit("/", 1)[-1] or None


class PathResolver:
    """Map path segments below the collection root to disk paths and public addresses."""

    def __init__(self, root: Path, root_marker: str = "Portfolio", storage: Optional[GalleryStorage] = None) -> None:
        self.root = Path(root)
        self.root_marker = root_marker
        self.storage: GalleryStorage = storage or LocalStorage()

    is_media = staticmethod(is_media)
    slugify = staticmethod(slugify)

    def list_directory(self, path: Path) -> List[DirEntry]:
        return self.storage.list_dir(path)

    def path_for(self, parts: Sequence[str]) -> Path:
        return self.root.joinpath(*parts)

    def address_for(self, parts: Sequence[str]) -> str:
        return public_address(self.root_marker, parts)
