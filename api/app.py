# Path: api/app.py
# Purpose: Expose a FastAPI application for read-only gallery lookups.
# Layer: api.
# Details: Provides health checks and page endpoints delegating to the core GalleryIndex service.

from __future__ import annotations

from typing import Any, Dict, Optional

from core.gallery.index import GalleryIndex
from core.models.domain import AliasNode, GalleryPage


def page_payload(page: GalleryPage) -> Dict[str, Any]:
    """Serialize a page: the node itself, then its real children and alias tiles in display order."""

    node = page.node.to_dict()
    node.pop("children", None)
    tiles = []
    for summary in page.children:
        child = summary.node
        tiles.append(
            {
                "kind": child.kind.value,
                "name": child.name,
                "slug": child.slug,
                "address": child.address,
                "cover": child.cover,
                "child_count": summary.child_count,
                "media_count": len(child.media or ()),
            }
        )
    for alias in page.aliases:
        tiles.append(_alias_payload(alias))
    return {"node": node, "tiles": tiles}


def _alias_payload(alias: AliasNode) -> Dict[str, Any]:
    return {
        "kind": alias.kind.value,
        "name": alias.name,
        "slug": alias.slug,
        "address": alias.context_address,
        "redirect_address": alias.redirect_address,
        "cover": alias.cover,
        "child_count": len(alias.target.children or ()),
        "media_count": len(alias.target.media or ()),
    }


def create_app(index: Optional[GalleryIndex] = None):
    """Create a FastAPI app instance configured with the provided gallery index."""

    from fastapi import FastAPI, HTTPException

    app = FastAPI(title="Gallery Index API", version="0.1.0")

    def _page(path: str) -> Dict[str, Any]:
        if index is None:
            raise HTTPException(status_code=500, detail="Gallery index is not configured.")

        segments = [segment for segment in path.split("/") if segment]
        # core/gallery/index.py::GalleryIndex.page - rebuilds the tree and resolves aliases.
        page = index.page(segments)
        if page is None:
            raise HTTPException(status_code=404, detail=f"No gallery at {path!r}.")
        return page_payload(page)

    @app.get("/health")
    def health() -> Dict[str, str]:
        """Return a simple health status payload."""

        return {"status": "ok"}

    @app.get("/gallery")
    def gallery_root() -> Dict[str, Any]:
        """Return the collection root page."""

        return _page("")

    @app.get("/gallery/{path:path}")
    def gallery_page(path: str) -> Dict[str, Any]:
        """Return the page addressed by slash-separated segments."""

        return _page(path)

    return app
