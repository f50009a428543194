# Path: api/__init__.py
# Purpose: Package initializer for HTTP API layer.
# Layer: api.
# Details: Exposes the FastAPI application factory and page serializer.

from .app import create_app, page_payload

__all__ = ["create_app", "page_payload"]
