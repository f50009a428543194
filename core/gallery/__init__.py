# Path: core/gallery/__init__.py
# Purpose: Package initializer for the gallery indexing engine.
# Layer: core/gallery.
# Details: Exposes the tree builder, resolvers, manifest job, and the read-side index service.

from .addresses import AddressGrammar, ResolvedAddress
from .aliases import AliasResolver
from .builder import GalleryTreeBuilder, get_node_by_address, normalize_snapshot, read_snapshot
from .cover import CoverResolver
from .index import GalleryIndex, load_gallery_index
from .listing import DirectoryLister, DirectoryListing
from .manifest import ManifestGenerator, ManifestResult
from .order import ListKind, OrderResolver
from .paths import PathResolver, is_media, slugify, unslugify
from .storage import CachedStorage, DirEntry, GalleryStorage, LocalStorage

__all__ = [
    "AddressGrammar",
    "AliasResolver",
    "CachedStorage",
    "CoverResolver",
    "DirEntry",
    "DirectoryLister",
    "DirectoryListing",
    "GalleryIndex",
    "GalleryStorage",
    "GalleryTreeBuilder",
    "ListKind",
    "LocalStorage",
    "ManifestGenerator",
    "ManifestResult",
    "OrderResolver",
    "PathResolver",
    "ResolvedAddress",
    "get_node_by_address",
    "is_media",
    "load_gallery_index",
    "normalize_snapshot",
    "read_snapshot",
    "slugify",
    "unslugify",
]
