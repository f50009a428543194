# Path: core/models/domain.py
# Purpose: Define domain models shared across tree building, alias resolution, and the API layer.
# Layer: core/models.
# Details: Immutable dataclasses; real and alias nodes are distinct variants tagged by NodeKind.

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional, Tuple, Union


class NodeKind(str, Enum):
    """Discriminator for the node variants a gallery page can show."""

    REAL = "real"
    ALIAS = "alias"


@dataclass(frozen=True)
class GalleryNode:
    """One directory of the collection.

    ``media`` holds filenames only (never paths) and is set for leaves only.
    ``children`` is ``None`` for leaves, never an empty tuple.
    """

    kind: ClassVar[NodeKind] = NodeKind.REAL

    name: str
    slug: str
    fs_path: str
    address: str
    cover: Optional[str] = None
    media: Optional[Tuple[str, ...]] = None
    children: Optional[Tuple["GalleryNode", ...]] = None

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def segments(self) -> List[str]:
        """Return the path segments below the collection root (root marker dropped)."""

        return self.address.strip("/").split("/")[1:]

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "name": self.name,
            "slug": self.slug,
            "fs_path": self.fs_path,
            "address": self.address,
        }
        if self.cover is not None:
            payload["cover"] = self.cover
        if self.media is not None:
            payload["media"] = list(self.media)
        if self.children is not None:
            payload["children"] = [child.to_dict() for child in self.children]
        return payload


@dataclass(frozen=True)
class AliasNode:
    """Virtual child pointing at another node of the tree.

    The tile is displayed under ``context_address`` but navigates to
    ``redirect_address``, the target's real public address.
    """

    kind: ClassVar[NodeKind] = NodeKind.ALIAS

    target: GalleryNode
    context_address: str
    segments: Tuple[str, ...]

    @property
    def name(self) -> str:
        return self.target.name

    @property
    def slug(self) -> str:
        return f"{self.target.slug}__alias"

    @property
    def redirect_address(self) -> str:
        return self.target.address

    @property
    def cover(self) -> Optional[str]:
        if self.target.cover:
            return self.target.cover
        if self.target.media:
            return f"{self.target.address}/{self.target.media[0]}"
        return None


TileNode = Union[GalleryNode, AliasNode]


@dataclass(frozen=True)
class ChildSummary:
    """A real child together with the number of aliases its own directory declares."""

    node: GalleryNode
    alias_children_count: int = 0

    @property
    def child_count(self) -> int:
        return len(self.node.children or ()) + self.alias_children_count


@dataclass(frozen=True)
class GalleryPage:
    """Everything a consumer needs to present one node."""

    node: GalleryNode
    children: List[ChildSummary] = field(default_factory=list)
    aliases: List[AliasNode] = field(default_factory=list)

    @property
    def tiles(self) -> List[TileNode]:
        """Real children in display order, then alias tiles in alias-file order."""

        tiles: List[TileNode] = [summary.node for summary in self.children]
        tiles.extend(self.aliases)
        return tiles
