# Path: core/models/__init__.py
# Purpose: Package initializer for domain model definitions.
# Layer: core/models.
# Details: Exposes the node variants and page structures used across the gallery core and API.

from .domain import AliasNode, ChildSummary, GalleryNode, GalleryPage, NodeKind, TileNode

__all__ = ["AliasNode", "ChildSummary", "GalleryNode", "GalleryPage", "NodeKind", "TileNode"]
