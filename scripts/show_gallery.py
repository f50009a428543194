# Path: scripts/show_gallery.py
# Purpose: Simple CLI to print the gallery tree or a single page.
# Layer: scripts.
# Details: Demonstrates address lookup and alias resolution through GalleryIndex.

from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Ensure project root is on sys.path when running as a script.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from config import AppSettings, configure_logging
from core.errors import GalleryError
from core.gallery.index import GalleryIndex
from core.models.domain import GalleryNode


def print_tree(node: GalleryNode, depth: int, indent: int = 0) -> None:
    media = f" [{len(node.media)} media]" if node.media else ""
    print(f"{'  ' * indent}{node.name}{media}  cover={node.cover or '-'}")
    if depth == 0:
        return
    for child in node.children or ():
        print_tree(child, depth - 1, indent + 1)


def main(argv: list[str] | None = None) -> int:
    """Print a gallery page from the live scan or the snapshot."""

    parser = argparse.ArgumentParser(description="Show the gallery tree")
    parser.add_argument("--address", default="", help="Slash-separated segments below the root, e.g. Watches/Blue")
    parser.add_argument("--use-manifest", action="store_true", help="Read the snapshot instead of scanning")
    parser.add_argument("--depth", type=int, default=1, help="Levels of children to print (-1 for all)")
    args = parser.parse_args(argv)

    settings = AppSettings.from_env()
    configure_logging(settings.log_level)
    if args.use_manifest:
        settings.gallery.use_manifest = True

    index = GalleryIndex(settings.gallery)
    segments = [segment for segment in args.address.split("/") if segment]
    try:
        page = index.page(segments)
    except GalleryError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    if page is None:
        print(f"Not found: {args.address}", file=sys.stderr)
        return 1

    print_tree(page.node, args.depth)
    for alias in page.aliases:
        print(f"  {alias.name} -> {alias.redirect_address}  (alias)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
