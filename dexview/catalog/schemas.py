"""
Pydantic schema definitions for the catalog module.

Two groups of models live here.  The first mirrors what the catalog
service returns once it has been cleaned up: ``CatalogSummary`` for one
entry of a list page, ``CatalogPage`` for a whole page and
``EntityDetail`` for a single record.  The second group is the view
snapshot handed to the presentation layer (``ListView``, ``DialogView``
and ``CatalogView``); those are what the browser renders and what the
router returns.
"""

from math import ceil
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field

from ..config import PAGE_SIZE


class CatalogSummary(BaseModel):
    """One entry in a list page.

    The service only hands out ``name`` and ``url``; the numeric id is the
    last path segment of the url and is derived on access.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    url: str

    @computed_field  # type: ignore[misc]
    @property
    def id(self) -> str:
        trimmed = self.url[:-1] if self.url.endswith("/") else self.url
        return trimmed.split("/")[-1]


class CatalogPage(BaseModel):
    """A single page of summaries plus the overall entry count."""

    model_config = ConfigDict(frozen=True)

    total_count: int = Field(default=0, ge=0)
    items: List[CatalogSummary] = Field(default_factory=list)
    page_size: int = Field(default=PAGE_SIZE, ge=1)

    @computed_field  # type: ignore[misc]
    @property
    def total_pages(self) -> int:
        return count_pages(self.total_count, self.page_size)


class EntityType(BaseModel):
    name: str


class EntityStat(BaseModel):
    name: str
    base_value: int = 0


class EntityDetail(BaseModel):
    """Full record of one entity as shown in the detail dialog.

    ``sprite_candidates`` holds the record's own sprite links in display
    priority with missing entries already dropped.
    """

    name: str
    id: Optional[int] = None
    height: int = 0
    weight: int = 0
    types: List[EntityType] = Field(default_factory=list)
    stats: List[EntityStat] = Field(default_factory=list)
    sprite_candidates: List[str] = Field(default_factory=list)


class ListView(BaseModel):
    """What the list grid renders."""

    page_number: int = 1
    total_pages: int = 0
    items: List[CatalogSummary] = Field(default_factory=list)
    is_loading: bool = False
    error_message: Optional[str] = None


class DialogView(BaseModel):
    """What the detail dialog renders.

    ``detail`` is only populated once the record has loaded, so a loading
    or failed dialog never shows a previous entity's data.
    """

    open: bool = False
    selected_name: str = ""
    detail: Optional[EntityDetail] = None
    image_candidates: List[str] = Field(default_factory=list)
    is_loading: bool = False
    error_message: Optional[str] = None


class CatalogView(BaseModel):
    listing: ListView = Field(default_factory=ListView)
    dialog: DialogView = Field(default_factory=DialogView)


def count_pages(total_count: int, page_size: int = PAGE_SIZE) -> int:
    """Return the number of pages needed for ``total_count`` entries."""
    if total_count <= 0:
        return 0
    return ceil(total_count / page_size)
