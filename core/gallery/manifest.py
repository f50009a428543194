# Path: core/gallery/manifest.py
# Purpose: Precompute the gallery tree offline and persist it with the fallback listing files.
# Layer: core/gallery.
# Details: Reuses GalleryTreeBuilder so snapshot decisions match live scans; writes are idempotent.

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

from tqdm import tqdm

from core.errors import CollectionNotFoundError
from core.models.domain import GalleryNode

from .builder import GalleryTreeBuilder
from .listing import DirectoryListing
from .order import ListKind, OrderResolver, natural_sort
from .storage import GalleryStorage, LocalStorage

logger = logging.getLogger(__name__)


@dataclass
class ManifestResult:
    """Outcome of one manifest run."""

    root: GalleryNode
    manifest_path: Path
    manifest_written: bool = False
    written: int = 0
    removed: int = 0
    unchanged: int = 0


def write_if_changed(path: Path, content: str) -> bool:
    """Write ``content`` unless the file already holds exactly these bytes."""

    data = content.encode("utf-8")
    try:
        if path.read_bytes() == data:
            return False
    except FileNotFoundError:
        pass
    path.write_bytes(data)
    return True


def remove_if_exists(path: Path) -> bool:
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    return True


class ManifestGenerator:
    """Batch job producing the snapshot and the .folders/.images convenience files.

    Invariants:
    - .folders only where subdirectories exist.
    - .images only where media files exist, and never at the collection root.
    Stale files violating either rule are removed. The job assumes exclusive
    access to the collection while it runs.
    """

    def __init__(
        self,
        root: Path | str,
        output_path: Path | str,
        root_marker: str = "Portfolio",
        storage: Optional[GalleryStorage] = None,
        write_listing_files: bool = True,
        show_progress: bool = False,
    ) -> None:
        self.root = Path(root)
        self.output_path = Path(output_path)
        self.root_marker = root_marker
        self.storage: GalleryStorage = storage or LocalStorage()
        self.write_listing_files = write_listing_files
        self.show_progress = show_progress

    def generate(self) -> ManifestResult:
        """
        Build the tree, then persist listing files and the snapshot.

        External calls:
        - core/gallery/builder.py::GalleryTreeBuilder.build - same traversal as live requests.
        """

        if not self.root.is_dir():
            raise CollectionNotFoundError(f"Collection root {self.root} not found")

        listings: List[Tuple[Path, Tuple[str, ...], DirectoryListing]] = []
        builder = GalleryTreeBuilder(
            self.root,
            self.root_marker,
            self.storage,
            visitor=lambda directory, parts, listing: listings.append((directory, parts, listing)),
        )
        root = builder.build()
        result = ManifestResult(root=root, manifest_path=self.output_path)

        if self.write_listing_files:
            for directory, parts, listing in tqdm(
                listings, desc="Writing listing files", unit="dir", disable=not self.show_progress
            ):
                self._sync_listing_files(directory, parts, listing, result)
            if result.written or result.removed:
                # Later live scans read the files just written.
                result.root = GalleryTreeBuilder(self.root, self.root_marker, self.storage).build()

        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        result.manifest_written = write_if_changed(self.output_path, self.render(result.root))
        logger.info(
            "Manifest %s %s (%d listing files written, %d removed, %d unchanged)",
            self.output_path,
            "written" if result.manifest_written else "unchanged",
            result.written,
            result.removed,
            result.unchanged,
        )
        return result

    @staticmethod
    def render(root: GalleryNode) -> str:
        return json.dumps(root.to_dict(), indent=2, ensure_ascii=False) + "\n"

    def _sync_listing_files(
        self,
        directory: Path,
        parts: Tuple[str, ...],
        listing: DirectoryListing,
        result: ManifestResult,
    ) -> None:
        """Rewrite .folders/.images from .order and natural order; existing listing files are not consulted."""

        order = OrderResolver(self.storage)
        override = order.read_order_override(directory)
        folders = order.apply_order(natural_sort(listing.folders), override)
        media = order.apply_order(natural_sort(listing.media_files), override) if parts else []
        self._sync(directory / ListKind.FOLDERS.value, folders, result)
        self._sync(directory / ListKind.MEDIA.value, media, result)

    @staticmethod
    def _sync(path: Path, names: List[str], result: ManifestResult) -> None:
        if not names:
            if remove_if_exists(path):
                logger.debug("Removed %s", path)
                result.removed += 1
            return
        if write_if_changed(path, "\n".join(names) + "\n"):
            logger.debug("Updated %s", path)
            result.written += 1
        else:
            result.unchanged += 1
