# Path: tests/conftest.py
# Purpose: Shared fixtures for building throw-away collections on disk.
# Layer: tests.
# Details: Layouts are nested dicts; dict values become folders, strings/None become files.

from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, Optional, Union

import pytest

from core.gallery.builder import GalleryTreeBuilder
from core.models.domain import GalleryNode

Layout = Dict[str, Union["Layout", str, None]]


def write_layout(base: Path, layout: Layout) -> Path:
    for name, content in layout.items():
        path = base / name
        if isinstance(content, dict):
            path.mkdir(parents=True, exist_ok=True)
            write_layout(path, content)
        else:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content or "", encoding="utf-8")
    return base


@pytest.fixture
def collection(tmp_path: Path) -> Path:
    root = tmp_path / "Portfolio"
    root.mkdir()
    return root


@pytest.fixture
def make_tree(collection: Path) -> Callable[[Layout], Path]:
    def _make(layout: Layout) -> Path:
        return write_layout(collection, layout)

    return _make


@pytest.fixture
def build(collection: Path, make_tree) -> Callable[[Optional[Layout]], GalleryNode]:
    def _build(layout: Optional[Layout] = None) -> GalleryNode:
        if layout:
            make_tree(layout)
        return GalleryTreeBuilder(collection).build()

    return _build


def child(node: GalleryNode, name: str) -> GalleryNode:
    for candidate in node.children or ():
        if candidate.name == name:
            return candidate
    raise AssertionError(f"{node.address} has no child {name!r}")
