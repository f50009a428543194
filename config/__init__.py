# Path: config/__init__.py
# Purpose: Package initializer for configuration module.
# Layer: config.
# Details: Exposes settings models and the logging bootstrap for application-wide configuration.

from .settings import AppSettings, GallerySettings, ManifestSettings, configure_logging

__all__ = ["AppSettings", "GallerySettings", "ManifestSettings", "configure_logging"]
