"""
View state for the catalog page.

``ViewStateController`` is the single object the presentation layer
talks to.  It tracks two independent axes:

* the list axis: current page number and the list fetcher's status;
* the dialog axis: closed, or open for one selected entity together with
  the detail fetcher's status.

``view()`` collapses both into a ``CatalogView`` snapshot.  Listeners
registered with ``subscribe()`` get a fresh snapshot after every change.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, List, Optional

from ..config import PAGE_SIZE
from .fetchers import DetailFetcher, ListFetcher
from .pokeapi_service import PokeApiClient
from .resolver import ResourceResolver
from .schemas import CatalogView, DialogView, ListView
from .status import FetchStatus


logger = logging.getLogger(__name__)

ViewListener = Callable[[CatalogView], None]


class ViewStateController:
    def __init__(
        self,
        client: PokeApiClient,
        resolver: Optional[ResourceResolver] = None,
        page_size: int = PAGE_SIZE,
    ) -> None:
        self.resolver = resolver or ResourceResolver()
        self.list_fetcher = ListFetcher(client, page_size=page_size)
        self.detail_fetcher = DetailFetcher(client)
        self.page_number = 1
        self.dialog_open = False
        self.selected_name = ""
        self._started = False
        self._listeners: List[ViewListener] = []
        self.list_fetcher.subscribe(self._on_status)
        self.detail_fetcher.subscribe(self._on_status)

    def subscribe(self, listener: ViewListener) -> None:
        self._listeners.append(listener)

    def _on_status(self, _status: FetchStatus) -> None:
        self._notify()

    def _notify(self) -> None:
        if not self._listeners:
            return
        snapshot = self.view()
        for listener in list(self._listeners):
            listener(snapshot)

    # -- list axis ---------------------------------------------------------

    def start(self) -> Optional["asyncio.Task[FetchStatus]"]:
        """Issue the initial load for the current page (page 1 by default)."""
        if self._started:
            return None
        self._started = True
        return self.list_fetcher.load(self.page_number)

    def go_to_page(self, page_number: int) -> Optional["asyncio.Task[FetchStatus]"]:
        """Switch to ``page_number``; does nothing if it is already shown."""
        if page_number < 1:
            raise ValueError(f"page_number must be >= 1, got {page_number}")
        if self._started and page_number == self.page_number:
            return None
        logger.debug("Page change %d -> %d", self.page_number, page_number)
        self.page_number = page_number
        self._started = True
        return self.list_fetcher.load(page_number)

    # -- dialog axis -------------------------------------------------------

    def open_detail(self, name: str) -> "asyncio.Task[FetchStatus]":
        """Open the dialog for ``name`` and start loading its record."""
        if not name or not name.strip():
            raise ValueError("entity name must not be empty")
        self.dialog_open = True
        self.selected_name = name
        return self.detail_fetcher.load(name)

    def close_detail(self) -> None:
        """Close the dialog, even if its record is still loading."""
        self.dialog_open = False
        self.selected_name = ""
        self.detail_fetcher.reset()

    # -- derived view ------------------------------------------------------

    def list_view(self) -> ListView:
        status = self.list_fetcher.status
        page = self.list_fetcher.page
        return ListView(
            page_number=self.page_number,
            total_pages=page.total_pages if page is not None else 0,
            items=list(status.payload.items) if status.is_success else [],
            is_loading=status.is_loading,
            error_message=status.message if status.is_failed else None,
        )

    def dialog_view(self) -> DialogView:
        if not self.dialog_open:
            return DialogView()
        status = self.detail_fetcher.status
        detail = self.detail_fetcher.detail
        return DialogView(
            open=True,
            selected_name=self.selected_name,
            detail=detail,
            image_candidates=self.resolver.resolve_detail(detail) if detail is not None else [],
            is_loading=status.is_loading,
            error_message=status.message if status.is_failed else None,
        )

    def view(self) -> CatalogView:
        return CatalogView(listing=self.list_view(), dialog=self.dialog_view())
