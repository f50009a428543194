# Path: core/gallery/builder.py
# Purpose: Build the gallery node tree from a live scan or from a persisted snapshot.
# Layer: core/gallery.
# Details: Both sources produce structurally identical trees; lookup descends by slug or decoded name.

from __future__ import annotations

import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import Any, Callable, Dict, FrozenSet, Optional, Sequence, Set, Tuple

from core.errors import SnapshotError
from core.models.domain import GalleryNode

from .addresses import AddressGrammar
from .cover import CoverResolver
from .listing import DirectoryListing, DirectoryLister
from .order import OrderResolver
from .paths import PathResolver, filename_from_address, public_address, slugify, unslugify
from .storage import CachedStorage, GalleryStorage, LocalStorage

logger = logging.getLogger(__name__)

# Called once per visited directory with (directory, parts, listing).
ListingVisitor = Callable[[Path, Tuple[str, ...], DirectoryListing], None]


class GalleryTreeBuilder:
    """Recursively compose listing, ordering and cover resolution into a GalleryNode tree.

    Every call to :meth:`build` is an independent read-only traversal with its
    own listing cache and its own set of visited directory identities.
    """

    def __init__(
        self,
        root: Path | str,
        root_marker: str = "Portfolio",
        storage: Optional[GalleryStorage] = None,
        visitor: Optional[ListingVisitor] = None,
    ) -> None:
        self.root = Path(root)
        self.root_marker = root_marker
        self.storage: GalleryStorage = storage or LocalStorage()
        self.visitor = visitor

    def build(self) -> GalleryNode:
        storage = CachedStorage(self.storage)
        traversal = _Traversal(
            paths=PathResolver(self.root, self.root_marker, storage),
            lister=DirectoryLister(storage, OrderResolver(storage)),
            covers=CoverResolver(self.root, storage, AddressGrammar(self.root_marker)),
            visitor=self.visitor,
        )
        return traversal.build_node(self.root, ())


class _Traversal:
    """State of a single build: visited identities and per-build collaborators."""

    def __init__(
        self,
        paths: PathResolver,
        lister: DirectoryLister,
        covers: CoverResolver,
        visitor: Optional[ListingVisitor],
    ) -> None:
        self.paths = paths
        self.lister = lister
        self.covers = covers
        self.visitor = visitor
        self.visited: Set[Tuple[int, int]] = set()

    def build_node(
        self,
        directory: Path,
        parts: Tuple[str, ...],
        inherited_ignore: FrozenSet[str] = frozenset(),
    ) -> GalleryNode:
        name = directory.name
        slug = self.paths.slugify(name)
        address = self.paths.address_for(parts)
        identity = self.paths.storage.identity(directory)
        if identity is not None and identity in self.visited:
            logger.debug("Refusing to re-enter %s (already visited)", directory)
            return GalleryNode(name=name, slug=slug, fs_path=str(directory), address=address)
        if identity is not None:
            self.visited.add(identity)

        listing = self.lister.list(directory, inherited_ignore)
        if self.visitor is not None:
            self.visitor(directory, parts, listing)

        # Children first: the cover fallback walks already-resolved children.
        children = tuple(
            self.build_node(directory / folder, (*parts, folder), listing.ignored) for folder in listing.folders
        )
        distinct_media = list(dict.fromkeys(listing.media))
        cover = self.covers.resolve(directory, parts, distinct_media, children)

        media: Optional[Tuple[str, ...]] = None
        if not children and listing.media:
            media = listing.media
            if cover is None:
                cover = f"{address}/{media[0]}"

        return GalleryNode(
            name=name,
            slug=slug,
            fs_path=str(directory),
            address=address,
            cover=cover,
            media=media,
            children=children or None,
        )


def _pick(raw: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if raw.get(key) is not None:
            return raw[key]
    return None


def normalize_snapshot(raw: Any) -> GalleryNode:
    """Rebuild a GalleryNode tree from a persisted snapshot structure.

    Leaf status is derived from whether ``children`` is populated; explicit
    leaf flags in the snapshot are ignored. A leaf without media but with a
    known cover gets a one-item media list built from the cover filename.
    """

    if not isinstance(raw, dict):
        raise SnapshotError(f"Snapshot node must be an object, got {type(raw).__name__}")

    name = str(_pick(raw, "name", "dirName") or "")
    slug = str(_pick(raw, "slug") or slugify(name))
    fs_path = str(_pick(raw, "fs_path", "fsPath") or "")
    address = str(_pick(raw, "address", "webPath") or "")
    cover = _pick(raw, "cover", "coverWebPath") or None
    if cover is not None and not isinstance(cover, str):
        raise SnapshotError(f"Snapshot cover of {address or name!r} must be a string")

    raw_children = _pick(raw, "children")
    if raw_children is not None and not isinstance(raw_children, list):
        raise SnapshotError(f"Snapshot children of {address or name!r} must be a list")
    children = tuple(normalize_snapshot(child) for child in raw_children) if raw_children else None

    raw_media = _pick(raw, "media", "images")
    if raw_media is not None and (
        not isinstance(raw_media, list) or not all(isinstance(item, str) for item in raw_media)
    ):
        raise SnapshotError(f"Snapshot media of {address or name!r} must be a list of filenames")

    media: Optional[Tuple[str, ...]] = None
    if not children:
        if raw_media:
            media = tuple(raw_media)
        else:
            filename = filename_from_address(cover)
            if filename:
                media = (filename,)

    return GalleryNode(
        name=name,
        slug=slug,
        fs_path=fs_path,
        address=address,
        cover=cover,
        media=media,
        children=children,
    )


def read_snapshot(path: Path | str, root_marker: str = "Portfolio") -> GalleryNode:
    """Load and normalize a snapshot file; any read or parse failure raises SnapshotError."""

    snapshot_path = Path(path)
    try:
        payload = json.loads(snapshot_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as exc:
        raise SnapshotError(f"Cannot read snapshot {snapshot_path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise SnapshotError(f"Snapshot {snapshot_path} is not valid JSON: {exc}") from exc

    root = normalize_snapshot(payload)
    if root.address == public_address(root_marker, ()):
        return root
    # Some snapshots wrap the collection in a container node.
    for child in root.children or ():
        if unslugify(child.slug) == root_marker or child.name == root_marker:
            return child
    return root


def empty_root(root: Path | str, root_marker: str = "Portfolio") -> GalleryNode:
    """Placeholder root used when the collection directory does not exist."""

    return GalleryNode(
        name=root_marker,
        slug=root_marker,
        fs_path=str(root),
        address=public_address(root_marker, ()),
    )


def limit_top_level(root: GalleryNode, limit: Optional[int]) -> GalleryNode:
    """Truncate the root's children to ``limit``; nested levels are never touched."""

    if not limit or not root.children or len(root.children) <= limit:
        return root
    return replace(root, children=root.children[:limit])


def get_node_by_address(root: GalleryNode, segments: Sequence[str]) -> Optional[GalleryNode]:
    """Descend one segment at a time; any unmatched segment yields None."""

    node = root
    for segment in segments:
        decoded = unslugify(segment)
        match = None
        for child in node.children or ():
            if child.slug == segment or child.name == decoded or child.name == segment:
                match = child
                break
        if match is None:
            return None
        node = match
    return node
