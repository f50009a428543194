# Path: core/gallery/index.py
# Purpose: Select the tree source (snapshot or live scan) and compose pages for consumers.
# Layer: core/gallery.
# Details: High-level service bridging the API and scripts with the builder and alias resolver.

from __future__ import annotations

import logging
from typing import Optional, Sequence

from config.settings import GallerySettings
from core.models.domain import GalleryNode, GalleryPage

from .aliases import AliasResolver
from .builder import GalleryTreeBuilder, empty_root, get_node_by_address, limit_top_level, read_snapshot
from .storage import GalleryStorage, LocalStorage

logger = logging.getLogger(__name__)


def load_gallery_index(settings: GallerySettings, storage: Optional[GalleryStorage] = None) -> GalleryNode:
    """Return the gallery root, from the snapshot when enabled and present, else from a live scan.

    External calls:
    - core/gallery/builder.py::read_snapshot - replays the persisted tree verbatim.
    - core/gallery/builder.py::GalleryTreeBuilder.build - full live traversal.
    """

    if settings.use_manifest and settings.manifest_path.is_file():
        logger.debug("Loading gallery snapshot from %s", settings.manifest_path)
        root = read_snapshot(settings.manifest_path, settings.root_marker)
    elif not settings.collection_root.is_dir():
        logger.warning("Collection root %s not found; serving an empty gallery", settings.collection_root)
        root = empty_root(settings.collection_root, settings.root_marker)
    else:
        root = GalleryTreeBuilder(settings.collection_root, settings.root_marker, storage).build()
    return limit_top_level(root, settings.effective_limit)


class GalleryIndex:
    """Read-side service: one fresh tree per call, no state kept between calls."""

    def __init__(self, settings: GallerySettings, storage: Optional[GalleryStorage] = None) -> None:
        self.settings = settings
        self.storage: GalleryStorage = storage or LocalStorage()

    def root(self) -> GalleryNode:
        return load_gallery_index(self.settings, self.storage)

    def node(self, segments: Sequence[str]) -> Optional[GalleryNode]:
        return get_node_by_address(self.root(), segments)

    def page(self, segments: Sequence[str]) -> Optional[GalleryPage]:
        """Return the node at ``segments`` with child summaries and alias tiles, or None."""

        root = self.root()
        node = get_node_by_address(root, segments)
        if node is None:
            return None
        aliases = AliasResolver(root, self.settings.root_marker, self.storage)
        return GalleryPage(node=node, children=aliases.summarize_children(node), aliases=aliases.resolve(node))
