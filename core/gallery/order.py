# Path: core/gallery/order.py
# Purpose: Read ordering control files and merge explicit order with natural order.
# Layer: core/gallery.
# Details: Precedence for folders and media alike is .order > .folders/.images > natural order.

from __future__ import annotations

import re
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Sequence, Tuple, Union

from .storage import GalleryStorage

ORDER_FILE = ".order"
COMMENT_PREFIXES = ("#", "//")

_LINE_BREAK = re.compile(r"\r?\n")
_DIGITS = re.compile(r"(\d+)")


class ListKind(str, Enum):
    """Kind of fallback listing file maintained by the manifest job."""

    FOLDERS = ".folders"
    MEDIA = ".images"


def split_lines(text: str) -> List[str]:
    return _LINE_BREAK.split(text)


def is_comment(line: str) -> bool:
    return line.startswith(COMMENT_PREFIXES)


def natural_key(name: str) -> Tuple[List[Union[int, str]], str]:
    """Case-insensitive, numeric-aware sort key ("img2" sorts before "IMG10")."""

    tokens: List[Union[int, str]] = []
    for index, token in enumerate(_DIGITS.split(name)):
        # split() with a capture group alternates text/number, so positions stay comparable.
        tokens.append(int(token) if index % 2 else token.casefold())
    return tokens, name


def natural_sort(names: Iterable[str]) -> List[str]:
    return sorted(names, key=natural_key)


class OrderResolver:
    """Resolve display order for the folders and media of one directory."""

    def __init__(self, storage: GalleryStorage) -> None:
        self.storage = storage

    def read_order_override(self, directory: Path) -> List[str]:
        """Return names listed in the authoritative .order file.

        BOM characters, blank lines and lines starting with ``#`` or ``//`` are
        dropped. Missing, unreadable or all-comment files yield an empty list.
        """

        text = self.storage.read_text(Path(directory) / ORDER_FILE)
        if not text:
            return []
        names: List[str] = []
        for raw in split_lines(text.replace("\ufeff", "")):
            line = raw.strip()
            if line and not is_comment(line):
                names.append(line)
        return names

    def read_fallback_list(self, directory: Path, kind: ListKind) -> List[str]:
        """Return the raw trimmed non-empty lines of a .folders/.images file (no comments)."""

        text = self.storage.read_text(Path(directory) / kind.value)
        if not text:
            return []
        return [line.strip() for line in split_lines(text.replace("\ufeff", "")) if line.strip()]

    @staticmethod
    def apply_order(items: Sequence[str], desired: Sequence[str], allow_repeats: bool = False) -> List[str]:
        """Stable merge of ``items`` with an explicit ``desired`` order.

        Items named in ``desired`` come first in that relative order; the rest
        follow in their original order. Unknown names in ``desired`` are ignored.
        With ``allow_repeats`` a name listed twice in ``desired`` is emitted twice.
        """

        if not desired:
            return list(items)
        present = set(items)
        head: List[str] = []
        emitted = set()
        for name in desired:
            if name not in present:
                continue
            if name in emitted and not allow_repeats:
                continue
            head.append(name)
            emitted.add(name)
        wanted = set(desired)
        return head + [name for name in items if name not in wanted]

    def _desired(self, directory: Path, kind: ListKind) -> List[str]:
        override = self.read_order_override(directory)
        return override or self.read_fallback_list(directory, kind)

    def order_folders(self, directory: Path, folders: Iterable[str]) -> List[str]:
        return self.apply_order(natural_sort(folders), self._desired(directory, ListKind.FOLDERS))

    def order_media(self, directory: Path, media: Iterable[str]) -> List[str]:
        return self.apply_order(natural_sort(media), self._desired(directory, ListKind.MEDIA), allow_repeats=True)
