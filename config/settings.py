# Path: config/settings.py
# Purpose: Provide typed application configuration models.
# Layer: config.
# Details: Centralizes collection paths, snapshot switch, development cap, manifest and logging options.

from __future__ import annotations

import logging
import math
import os
from pathlib import Path
from typing import Iterable, Mapping, Optional

from pydantic import BaseModel, Field

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
DEV_LIMIT_FILE = ".dev-limit"


class GallerySettings(BaseModel):
    """Settings describing where the collection lives and how the tree is sourced."""

    collection_root: Path = Field(default=Path("public/Portfolio"), description="Root folder of the browsable collection.")
    root_marker: str = Field(default="Portfolio", description="First segment of every public address.")
    manifest_path: Path = Field(
        default=Path("public/portfolio-manifest.json"), description="Path to the persisted snapshot."
    )
    use_manifest: bool = Field(default=False, description="Serve the snapshot instead of scanning when it exists.")
    dev_mode: bool = Field(default=False, description="Flag enabling development-only behaviour.")
    gallery_limit: Optional[int] = Field(default=None, description="Development cap on top-level children.")

    @property
    def effective_limit(self) -> Optional[int]:
        """Return the top-level cap only when running in development mode."""

        if not self.dev_mode or not self.gallery_limit or self.gallery_limit < 1:
            return None
        return self.gallery_limit


class ManifestSettings(BaseModel):
    """Settings for the offline manifest job."""

    write_listing_files: bool = Field(default=True, description="Maintain .folders/.images files next to the media.")
    show_progress: bool = Field(default=True, description="Display a progress bar while writing listing files.")
    debug: bool = Field(default=False, description="Log every listing-file change.")


class AppSettings(BaseModel):
    """Top-level application settings shared across services and interfaces."""

    gallery: GallerySettings = Field(default_factory=GallerySettings)
    manifest: ManifestSettings = Field(default_factory=ManifestSettings)
    log_level: str = Field(default="INFO", description="Verbosity level for application logs.")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, cwd: Optional[Path] = None) -> "AppSettings":
        """Instantiate settings from environment variables.

        This is the only place ambient state is read; the result is passed
        explicitly into builds so they stay deterministic and test-isolated.
        """

        env = os.environ if environ is None else environ
        base = Path.cwd() if cwd is None else Path(cwd)

        collection_root = Path(env.get("GALLERY_ROOT") or base / "public" / "Portfolio")
        manifest_path = Path(env.get("GALLERY_MANIFEST_PATH") or base / "public" / "portfolio-manifest.json")

        gallery = GallerySettings(
            collection_root=collection_root,
            root_marker=env.get("GALLERY_ROOT_MARKER") or "Portfolio",
            manifest_path=manifest_path,
            use_manifest=env.get("GALLERY_USE_MANIFEST") == "true",
            dev_mode=_is_dev_runtime(env),
            gallery_limit=_resolve_limit(env.get("GALLERY_LIMIT"), [base / DEV_LIMIT_FILE, collection_root / DEV_LIMIT_FILE]),
        )
        manifest = ManifestSettings(debug=env.get("MANIFEST_DEBUG") in ("1", "true"))
        return cls(gallery=gallery, manifest=manifest, log_level=env.get("LOG_LEVEL") or "INFO")


def _is_dev_runtime(env: Mapping[str, str]) -> bool:
    flag = env.get("GALLERY_DEV")
    if flag == "0":
        return False
    if flag == "1":
        return True
    return env.get("GALLERY_ENV", "development") != "production"


def parse_limit(text: Optional[str]) -> Optional[int]:
    """Parse a positive finite number, truncating fractions; anything else is None."""

    if not text:
        return None
    try:
        value = float(text.strip())
    except ValueError:
        return None
    if not math.isfinite(value) or int(value) < 1:
        return None
    return int(value)


def _resolve_limit(env_value: Optional[str], candidates: Iterable[Path]) -> Optional[int]:
    limit = parse_limit(env_value)
    if limit is not None:
        return limit
    for path in candidates:
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            continue
        limit = parse_limit(text)
        if limit is not None:
            return limit
    return None


def configure_logging(level: str = "INFO") -> None:
    """Install the process-wide log format; only the command-line scripts call this."""

    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)


__all__ = ["AppSettings", "GallerySettings", "ManifestSettings", "configure_logging", "parse_limit"]
