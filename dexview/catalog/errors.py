"""
Error types for the catalog core.

Fetch errors are raised at the network boundary and caught by the
fetchers, which turn them into a failed status with a readable message.
``ImageResourceExhausted`` is raised by the pure fallback transition and
handled by the image slot that owns the state; it never reaches the
application level.
"""

from __future__ import annotations

from typing import Optional


class CatalogError(Exception):
    """Base class for catalog failures that carry an optional HTTP status."""

    default_message = "Catalog request failed."
    status_prefix = "Request failed"

    def __init__(self, message: Optional[str] = None, http_status: Optional[int] = None) -> None:
        if not message:
            if http_status is not None:
                message = f"{self.status_prefix}: {http_status}"
            else:
                message = self.default_message
        super().__init__(message)
        self.message = message
        self.http_status = http_status


class ListFetchError(CatalogError):
    default_message = "Could not load list."
    status_prefix = "List request failed"


class DetailFetchError(CatalogError):
    default_message = "Could not load details."
    status_prefix = "Detail request failed"


class ImageResourceExhausted(Exception):
    """Every fallback tier of one image failed to load."""

    def __init__(self, candidates) -> None:
        super().__init__(f"all {len(candidates)} image candidates failed")
        self.candidates = list(candidates)
