# Path: core/gallery/addresses.py
# Purpose: Parse address lines from .cover and .aliases files into path segments.
# Layer: core/gallery.
# Details: Supports rooted ("Portfolio/A/b.jpg"), relative ("../B/c.jpg") and bare filename forms.

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from .order import is_comment, split_lines

logger = logging.getLogger(__name__)

# BOM, word joiner and zero-width space sneak into hand-edited control files.
_INVISIBLE_PREFIX = re.compile("^[\ufeff\u2060\u200b]+")


def strip_invisible(text: str) -> str:
    return _INVISIBLE_PREFIX.sub("", text)


def normalize_parts(parts: Iterable[str]) -> Optional[List[str]]:
    """Collapse ``.``/``..``/empty segments; None if ``..`` climbs above the collection root."""

    out: List[str] = []
    for part in parts:
        if not part or part == ".":
            continue
        if part == "..":
            if not out:
                return None
            out.pop()
        else:
            out.append(part)
    return out


@dataclass(frozen=True)
class ResolvedAddress:
    """Segments below the collection root, plus whether the line was rooted at it."""

    parts: Tuple[str, ...]
    rooted: bool


class AddressGrammar:
    """Address grammar shared by cover overrides and alias lists."""

    def __init__(self, root_marker: str = "Portfolio") -> None:
        self.root_marker = root_marker

    def meaningful_lines(self, text: Optional[str]) -> List[str]:
        """Return non-blank, non-comment lines with invisible prefixes removed, in file order."""

        if not text:
            return []
        lines: List[str] = []
        for raw in split_lines(strip_invisible(text)):
            line = strip_invisible(raw).strip()
            if line and not is_comment(line):
                lines.append(line)
        return lines

    def first_line(self, text: Optional[str]) -> Optional[str]:
        lines = self.meaningful_lines(text)
        return lines[0] if lines else None

    def parse(self, raw_line: str, current_parts: Sequence[str]) -> Optional[ResolvedAddress]:
        """Resolve one address line against the directory at ``current_parts``.

        Returns None for blank/comment lines, for absolute paths outside the
        collection and for addresses escaping the collection root.
        """

        line = strip_invisible(raw_line).strip()
        if not line or is_comment(line):
            return None
        line = line.replace("\\", "/")
        cleaned = line.lstrip("/")
        marker = self.root_marker.lower()

        head, sep, rest = cleaned.partition("/")
        if sep and head.lower() == marker:
            parts = normalize_parts(rest.split("/"))
            if parts is None:
                logger.debug("Rooted address escapes the collection: %r", raw_line)
                return None
            return ResolvedAddress(tuple(parts), rooted=True)

        if line.startswith("/"):
            logger.debug("Absolute address outside the collection rejected: %r", raw_line)
            return None

        segments = cleaned.split("/")
        if segments and segments[0].lower() == marker:
            segments = segments[1:]
        parts = normalize_parts([*current_parts, *segments])
        if parts is None:
            logger.debug("Relative address escapes the collection: %r", raw_line)
            return None
        return ResolvedAddress(tuple(parts), rooted=False)
