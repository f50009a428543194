# Path: core/errors.py
# Purpose: Define the exception hierarchy raised by the gallery core.
# Layer: core.
# Details: Only unrecoverable conditions surface as exceptions; access failures degrade locally.

from __future__ import annotations


class GalleryError(Exception):
    """Base class for all errors raised by the gallery core."""


class SnapshotError(GalleryError):
    """Raised when a persisted snapshot cannot be read or has an invalid structure."""


class CollectionNotFoundError(GalleryError):
    """Raised by batch jobs when the collection root directory does not exist."""
