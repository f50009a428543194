# Path: core/gallery/listing.py
# Purpose: Split one directory into ordered subfolders and media files.
# Layer: core/gallery.
# Details: Applies hidden/ignore rules and OrderResolver; shared by live builds and the manifest job.

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import FrozenSet, List, Tuple

from .order import OrderResolver, is_comment, split_lines
from .paths import is_media
from .storage import GalleryStorage

IGNORE_FILE = ".ignore"
DEFAULT_IGNORED_DIRS = frozenset({"thumbnails", "thumbnail", "thumbs", "thumb", "proofs", "proof"})
HIDDEN_PREFIXES = (".", "@")


@dataclass(frozen=True)
class DirectoryListing:
    """Ordered view of one directory.

    ``media`` may repeat a filename when the order override repeats it;
    ``media_files`` is the distinct set of media files on disk.
    """

    folders: Tuple[str, ...]
    media: Tuple[str, ...]
    media_files: FrozenSet[str]
    dot_dirs: Tuple[str, ...]
    ignored: FrozenSet[str]


def read_ignore(storage: GalleryStorage, directory: Path) -> FrozenSet[str]:
    """Return the lower-cased names listed in ``directory/.ignore``."""

    text = storage.read_text(Path(directory) / IGNORE_FILE)
    if not text:
        return frozenset()
    names = set()
    for raw in split_lines(text.replace("\ufeff", "")):
        line = raw.strip()
        if line and not is_comment(line):
            names.add(line.lower())
    return frozenset(names)


def is_hidden(name: str, ignored: FrozenSet[str] = frozenset()) -> bool:
    lowered = name.lower()
    return name.startswith(HIDDEN_PREFIXES) or lowered in ignored or lowered in DEFAULT_IGNORED_DIRS


class DirectoryLister:
    """Produce DirectoryListing objects through the injected storage."""

    def __init__(self, storage: GalleryStorage, order: OrderResolver) -> None:
        self.storage = storage
        self.order = order

    def read_ignore(self, directory: Path) -> FrozenSet[str]:
        return read_ignore(self.storage, directory)

    is_hidden = staticmethod(is_hidden)

    def list(self, directory: Path, inherited_ignore: FrozenSet[str] = frozenset()) -> DirectoryListing:
        directory = Path(directory)
        ignored = inherited_ignore | self.read_ignore(directory)

        folders: List[str] = []
        media: List[str] = []
        dot_dirs: List[str] = []
        for entry in self.storage.list_dir(directory):
            if entry.is_dir:
                if entry.name.startswith("."):
                    dot_dirs.append(entry.name)
                elif not self.is_hidden(entry.name, ignored):
                    folders.append(entry.name)
            elif entry.is_file and is_media(entry.name) and not self.is_hidden(entry.name, ignored):
                media.append(entry.name)

        return DirectoryListing(
            folders=tuple(self.order.order_folders(directory, folders)),
            media=tuple(self.order.order_media(directory, media)),
            media_files=frozenset(media),
            dot_dirs=tuple(sorted(dot_dirs)),
            ignored=ignored,
        )
