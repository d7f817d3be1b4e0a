"""
Catalog package for the entity viewer.

This package holds the data side of the viewer: the async client for the
public catalog service, the list and detail fetchers that keep only the
latest request's result, the image fallback chains and the view-state
controller the browser renders from.  ``catalog_router`` exposes the
derived views over HTTP.
"""

from .router import router as catalog_router  # noqa: F401
