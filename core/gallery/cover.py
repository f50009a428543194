# Path: core/gallery/cover.py
# Purpose: Resolve the single representative cover address of a directory.
# Layer: core/gallery.
# Details: .cover override (case-corrected, subtree search) > single direct media > first child result.

from __future__ import annotations

import logging
from collections import deque
from pathlib import Path
from typing import Deque, FrozenSet, List, Optional, Sequence, Set, Tuple

from core.models.domain import GalleryNode

from .addresses import AddressGrammar
from .listing import is_hidden, read_ignore
from .order import natural_key
from .paths import is_media, public_address
from .storage import DirEntry, GalleryStorage

logger = logging.getLogger(__name__)

COVER_FILE = ".cover"


def _ci_key(name: str) -> Tuple[str, str]:
    return name.casefold(), name


class CoverResolver:
    """Cover precedence for one directory.

    1. First meaningful line of ``.cover``: a media address is case-corrected
       against the real tree; a relative line that does not resolve directly
       falls back to a breadth-first search of the current subtree. A
       directory address yields that directory's first media file. Anything
       unresolvable is ignored.
    2. Exactly one media file directly inside the directory.
    3. The first child, in display order, with a cover or a first media file.
    """

    def __init__(self, root: Path, storage: GalleryStorage, grammar: AddressGrammar) -> None:
        self.root = Path(root)
        self.storage = storage
        self.grammar = grammar

    def address(self, parts: Sequence[str]) -> str:
        return public_address(self.grammar.root_marker, parts)

    def read_override_line(self, directory: Path) -> Optional[str]:
        return self.grammar.first_line(self.storage.read_text(Path(directory) / COVER_FILE))

    def correct_case(self, parts: Sequence[str], want_file: Optional[bool] = None) -> Optional[List[str]]:
        """Return ``parts`` with each segment's on-disk casing, or None if the path does not exist.

        ``want_file`` constrains the final segment to a file (True) or a directory (False).
        """

        directory = self.root
        corrected: List[str] = []
        for index, segment in enumerate(parts):
            entries = sorted(self.storage.list_dir(directory), key=lambda e: natural_key(e.name))
            match = self._match(entries, segment)
            if match is None:
                return None
            corrected.append(match.name)
            if index < len(parts) - 1:
                if not match.is_dir:
                    return None
                directory = directory / match.name
            elif want_file is True and not match.is_file:
                return None
            elif want_file is False and not match.is_dir:
                return None
        return corrected

    @staticmethod
    def _match(entries: List[DirEntry], segment: str) -> Optional[DirEntry]:
        for entry in entries:
            if entry.name == segment:
                return entry
        lowered = segment.lower()
        for entry in entries:
            if entry.name.lower() == lowered:
                return entry
        return None

    def find_in_subtree(self, start_parts: Sequence[str], filename: str) -> Optional[List[str]]:
        """Breadth-first search below ``start_parts`` for ``filename``.

        Each level checks its files for an exact match, then a case-insensitive
        one, before queueing its non-dot subdirectories in case-insensitive
        alphabetical order.
        """

        start = self.correct_case(start_parts, want_file=False)
        if start is None:
            return None
        wanted = filename.lower()
        queue: Deque[List[str]] = deque([start])
        visited: Set[Tuple[int, int]] = set()

        while queue:
            parts = queue.popleft()
            directory = self.root.joinpath(*parts)
            identity = self.storage.identity(directory)
            if identity is not None:
                if identity in visited:
                    continue
                visited.add(identity)

            entries = self.storage.list_dir(directory)
            files = sorted((e.name for e in entries if e.is_file), key=_ci_key)
            dirs = sorted((e.name for e in entries if e.is_dir and not e.name.startswith(".")), key=_ci_key)

            for name in files:
                if name == filename:
                    return [*parts, name]
            for name in files:
                if name.lower() == wanted:
                    return [*parts, name]
            for name in dirs:
                queue.append([*parts, name])
        return None

    def ignored_at(self, parts: Sequence[str]) -> FrozenSet[str]:
        """Union of the .ignore names from the collection root down to ``parts``."""

        ignored = read_ignore(self.storage, self.root)
        for depth in range(1, len(parts) + 1):
            ignored |= read_ignore(self.storage, self.root.joinpath(*parts[:depth]))
        return ignored

    def first_media_in(self, parts: Sequence[str]) -> Optional[str]:
        """Natural-order first media file of ``parts`` that a listing would show."""

        entries = self.storage.list_dir(self.root.joinpath(*parts))
        ignored = self.ignored_at(parts)
        media = [e.name for e in entries if e.is_file and is_media(e.name) and not is_hidden(e.name, ignored)]
        if not media:
            return None
        return min(media, key=natural_key)

    def resolve_override(self, directory: Path, parts: Sequence[str]) -> Optional[str]:
        """Return the cover address named by ``directory/.cover`` if it points at something real."""

        line = self.read_override_line(directory)
        if line is None:
            return None
        resolved = self.grammar.parse(line, parts)
        if resolved is None or not resolved.parts:
            return None

        target = resolved.parts
        if is_media(target[-1]):
            corrected = self.correct_case(target, want_file=True)
            if corrected is not None:
                return self.address(corrected)
            if not resolved.rooted:
                found = self.find_in_subtree(parts, target[-1])
                if found is not None:
                    return self.address(found)
            logger.debug("Cover override %r in %s does not resolve to a file", line, directory)
            return None

        corrected_dir = self.correct_case(target, want_file=False)
        if corrected_dir is not None:
            first = self.first_media_in(corrected_dir)
            if first is not None:
                return self.address([*corrected_dir, first])
        logger.debug("Cover override %r in %s names no usable directory", line, directory)
        return None

    def resolve(
        self,
        directory: Path,
        parts: Sequence[str],
        media_files: Sequence[str],
        children: Sequence[GalleryNode],
    ) -> Optional[str]:
        """Resolve the cover for ``directory``; ``children`` must already be built in display order."""

        override = self.resolve_override(directory, parts)
        if override is not None:
            return override

        if len(media_files) == 1:
            return self.address([*parts, media_files[0]])

        for child in children:
            if child.cover:
                return child.cover
            if child.media:
                return f"{child.address}/{child.media[0]}"
        return None
