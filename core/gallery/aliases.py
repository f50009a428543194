# Path: core/gallery/aliases.py
# Purpose: Augment a node's children with virtual cross-references declared in .aliases files.
# Layer: core/gallery.
# Details: Lines keep file order, resolve through the shared address grammar and the already-built tree.

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Set

from core.models.domain import AliasNode, ChildSummary, GalleryNode, TileNode

from .addresses import AddressGrammar
from .builder import get_node_by_address
from .storage import GalleryStorage, LocalStorage

logger = logging.getLogger(__name__)

ALIASES_FILE = ".aliases"


class AliasResolver:
    """Resolve alias tiles against a built tree."""

    def __init__(
        self,
        root: GalleryNode,
        root_marker: str = "Portfolio",
        storage: Optional[GalleryStorage] = None,
    ) -> None:
        self.root = root
        self.grammar = AddressGrammar(root_marker)
        self.storage: GalleryStorage = storage or LocalStorage()

    def read_alias_lines(self, node: GalleryNode) -> List[str]:
        if not node.fs_path:
            return []
        return self.grammar.meaningful_lines(self.storage.read_text(Path(node.fs_path) / ALIASES_FILE))

    def resolve(self, node: GalleryNode) -> List[AliasNode]:
        """Return alias tiles for ``node`` in alias-file order.

        Lines that do not resolve to an existing node, that point at one of the
        node's real children, or that repeat an earlier alias are skipped.
        """

        parts = node.segments()
        taken: Set[str] = {child.address for child in node.children or ()}
        aliases: List[AliasNode] = []
        for line in self.read_alias_lines(node):
            resolved = self.grammar.parse(line, parts)
            if resolved is None:
                continue
            target = get_node_by_address(self.root, resolved.parts)
            if target is None:
                logger.debug("Alias %r in %s has no target", line, node.address)
                continue
            if target.address in taken:
                continue
            taken.add(target.address)
            aliases.append(AliasNode(target=target, context_address=node.address, segments=resolved.parts))
        return aliases

    def alias_count(self, node: GalleryNode) -> int:
        return len(self.resolve(node))

    def child_count(self, node: GalleryNode) -> int:
        """Real children plus surviving aliases."""

        return len(node.children or ()) + self.alias_count(node)

    def summarize_children(self, node: GalleryNode) -> List[ChildSummary]:
        """Annotate each real child, in display order, with its own alias count."""

        return [ChildSummary(node=child, alias_children_count=self.alias_count(child)) for child in node.children or ()]

    def tiles(self, node: GalleryNode) -> List[TileNode]:
        tiles: List[TileNode] = list(node.children or ())
        tiles.extend(self.resolve(node))
        return tiles
