# Path: scripts/generate_manifest.py
# Purpose: CLI tool to precompute the gallery snapshot and refresh listing files.
# Layer: scripts.
# Details: Wires settings, logging, and ManifestGenerator together for batch runs.

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
from core.gallery.manifest import ManifestGenerator


def main(argv: list[str] | None = None) -> int:
    """Generate the snapshot for the configured collection."""

    settings = AppSettings.from_env()

    parser = argparse.ArgumentParser(description="Generate the gallery manifest snapshot")
    parser.add_argument("--root", type=Path, default=settings.gallery.collection_root, help="Collection root folder")
    parser.add_argument("--output", type=Path, default=settings.gallery.manifest_path, help="Snapshot output path")
    parser.add_argument("--root-marker", default=settings.gallery.root_marker, help="First segment of public addresses")
    parser.add_argument("--no-listing-files", action="store_true", help="Do not write .folders/.images files")
    parser.add_argument("--quiet", action="store_true", help="Hide the progress bar")
    args = parser.parse_args(argv)

    configure_logging("DEBUG" if settings.manifest.debug else settings.log_level)

    generator = ManifestGenerator(
        root=args.root,
        output_path=args.output,
        root_marker=args.root_marker,
        write_listing_files=settings.manifest.write_listing_files and not args.no_listing_files,
        show_progress=settings.manifest.show_progress and not args.quiet,
    )
    try:
        result = generator.generate()
    except (GalleryError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    state = "Wrote" if result.manifest_written else "Unchanged"
    print(f"{state} {result.manifest_path} ({result.written} listing files written, {result.removed} removed)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
