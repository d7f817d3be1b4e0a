"""
Image candidate chains and the per-image fallback state.

``ResourceResolver`` turns an entity into an ordered list of image URLs,
best source first and the shared placeholder last.  The grid thumbnail
and the detail dialog use two separate chains: the thumbnail is built
purely from URL templates keyed by id, the dialog puts the record's own
sprite links in front of those templates.

The fallback itself is a value (``ImageFallbackState``) with a pure
``advance`` transition.  ``ImageSlot`` is the rendering site that owns
one such value and reacts to load failures.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from ..config import ARTWORK_URL_TEMPLATE, PLACEHOLDER_IMG, SPRITE_URL_TEMPLATE
from .errors import ImageResourceExhausted
from .schemas import EntityDetail


logger = logging.getLogger(__name__)


class ResolverConfig(BaseModel):
    """Templates for the thumbnail chain.  ``{id}`` is substituted."""

    model_config = ConfigDict(frozen=True)

    templates: List[str] = Field(
        default_factory=lambda: [ARTWORK_URL_TEMPLATE, SPRITE_URL_TEMPLATE]
    )
    placeholder: str = PLACEHOLDER_IMG


class ImageFallbackState(BaseModel):
    """Which candidate an image is currently showing."""

    model_config = ConfigDict(frozen=True)

    candidates: List[str] = Field(default_factory=list)
    tier_index: int = Field(default=0, ge=0)

    @property
    def current(self) -> Optional[str]:
        if self.tier_index < len(self.candidates):
            return self.candidates[self.tier_index]
        return None

    @property
    def exhausted(self) -> bool:
        return self.tier_index >= len(self.candidates)


def advance(state: ImageFallbackState) -> ImageFallbackState:
    """Return the state for the next tier.

    Raises ``ImageResourceExhausted`` when ``state`` is already on the last
    candidate (or has none), so the caller can stop rendering the image.
    """
    next_index = state.tier_index + 1
    if next_index >= len(state.candidates):
        raise ImageResourceExhausted(state.candidates)
    return state.model_copy(update={"tier_index": next_index})


def _unique(urls: Sequence[Optional[str]]) -> List[str]:
    seen = set()
    result: List[str] = []
    for url in urls:
        if not url or url in seen:
            continue
        seen.add(url)
        result.append(url)
    return result


class ResourceResolver:
    def __init__(self, config: Optional[ResolverConfig] = None) -> None:
        self.config = config or ResolverConfig()

    def resolve(self, entity_id) -> List[str]:
        """Thumbnail chain for ``entity_id``: templates in order, then placeholder."""
        templated = [t.format(id=entity_id) for t in self.config.templates]
        return _unique(templated + [self.config.placeholder])

    def resolve_detail(self, detail: EntityDetail, entity_id=None) -> List[str]:
        """Dialog chain: the record's own sprites, then the thumbnail chain.

        ``entity_id`` falls back to the id carried by the record.  Without
        any id only the record sprites and the placeholder are offered.
        """
        if entity_id is None:
            entity_id = detail.id
        tail = self.resolve(entity_id) if entity_id is not None else [self.config.placeholder]
        return _unique(list(detail.sprite_candidates) + tail)


class ImageSlot:
    """One rendered image and its fallback bookkeeping.

    The presentation layer reads ``src`` and calls ``on_error()`` whenever
    the current source fails to load.  Each candidate is tried once; after
    the last one fails the slot is hidden and stops reacting.
    """

    def __init__(self, candidates: Sequence[str]) -> None:
        self.state = ImageFallbackState(candidates=list(candidates))
        self.visible = not self.state.exhausted

    @property
    def src(self) -> Optional[str]:
        return self.state.current if self.visible else None

    def on_error(self) -> Optional[str]:
        """Move to the next tier and return its URL, or ``None`` once hidden."""
        if not self.visible:
            return None
        try:
            self.state = advance(self.state)
        except ImageResourceExhausted as exc:
            logger.debug("Hiding image: %s", exc)
            self.visible = False
            return None
        logger.debug("Image fell back to tier %d: %s", self.state.tier_index, self.state.current)
        return self.state.current
