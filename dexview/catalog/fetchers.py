"""
List and detail fetchers.

Each fetcher owns exactly one ``FetchStatus`` and lets only its most
recently started request commit.  A request captures the fetcher's
generation number when it starts; if another request (or a ``reset``)
has bumped the number by the time the response arrives, the result is
dropped without touching the status.  The network call itself is not
aborted.
"""

from __future__ import annotations

import asyncio
import functools
import logging
from typing import Awaitable, Callable, List, Optional, Type

from ..config import PAGE_SIZE
from .errors import CatalogError, DetailFetchError, ListFetchError
from .pokeapi_service import PokeApiClient
from .schemas import CatalogPage, EntityDetail
from .status import FetchStatus


logger = logging.getLogger(__name__)

StatusListener = Callable[[FetchStatus], None]

CANCELLED_MESSAGE = "Request was cancelled."


class _LatestOnlyFetcher:
    """Shared bookkeeping for fetchers where the last request wins."""

    error_cls: Type[CatalogError] = CatalogError

    def __init__(self, client: PokeApiClient) -> None:
        self.client = client
        self.status = FetchStatus.idle()
        self._generation = 0
        self._listeners: List[StatusListener] = []
        # Most recently started request, finished or not.
        self.task: Optional["asyncio.Task[FetchStatus]"] = None

    def subscribe(self, listener: StatusListener) -> None:
        self._listeners.append(listener)

    def is_current(self, token: int) -> bool:
        return token == self._generation

    def _set_status(self, status: FetchStatus) -> None:
        self.status = status
        for listener in list(self._listeners):
            listener(status)

    def _start(self, request: Callable[[], Awaitable]) -> "asyncio.Task[FetchStatus]":
        loop = asyncio.get_running_loop()
        self._generation += 1
        token = self._generation
        self._set_status(FetchStatus.loading())
        task = loop.create_task(self._run(token, request))
        task.add_done_callback(functools.partial(self._settle_cancelled, token))
        self.task = task
        return task

    def _settle_cancelled(self, token: int, task: "asyncio.Task[FetchStatus]") -> None:
        # A cancelled task may never have entered _run, so its status is settled here.
        if task.cancelled() and self.is_current(token):
            logger.debug("%s request %d was cancelled", type(self).__name__, token)
            self._commit(FetchStatus.failed(CANCELLED_MESSAGE))

    async def _run(self, token: int, request: Callable[[], Awaitable]) -> FetchStatus:
        try:
            outcome = FetchStatus.success(await request())
        except CatalogError as exc:
            outcome = FetchStatus.failed(exc.message, exc.http_status)
        except Exception as exc:
            logger.exception("Unexpected error in %s", type(self).__name__)
            outcome = FetchStatus.failed(str(exc) or self.error_cls.default_message)
        if self.is_current(token):
            self._commit(outcome)
        else:
            logger.debug(
                "%s dropped stale result (request %d, latest %d)",
                type(self).__name__, token, self._generation,
            )
        return outcome

    def _commit(self, outcome: FetchStatus) -> None:
        self._set_status(outcome)


class ListFetcher(_LatestOnlyFetcher):
    """Loads one page of summaries at a time.

    ``page`` keeps the last successfully loaded ``CatalogPage`` until the
    next successful load replaces it.
    """

    error_cls = ListFetchError

    def __init__(self, client: PokeApiClient, page_size: int = PAGE_SIZE) -> None:
        super().__init__(client)
        self.page_size = page_size
        self.page: Optional[CatalogPage] = None

    def load(self, page_number: int) -> "asyncio.Task[FetchStatus]":
        """Start loading ``page_number`` (1-based).

        The status switches to loading before this returns.  The returned
        task resolves to this request's outcome whether or not it was
        committed.
        """
        if page_number < 1:
            raise ValueError(f"page_number must be >= 1, got {page_number}")
        offset = (page_number - 1) * self.page_size
        return self._start(lambda: self.client.fetch_page(limit=self.page_size, offset=offset))

    def _commit(self, outcome: FetchStatus) -> None:
        if outcome.is_success:
            self.page = outcome.payload
        super()._commit(outcome)


class DetailFetcher(_LatestOnlyFetcher):
    """Loads the full record of one entity at a time."""

    error_cls = DetailFetchError

    @property
    def detail(self) -> Optional[EntityDetail]:
        return self.status.payload if self.status.is_success else None

    def load(self, name: str) -> "asyncio.Task[FetchStatus]":
        """Start loading the record for ``name``.

        Any previously loaded record is dropped immediately.
        """
        if not name or not name.strip():
            raise ValueError("entity name must not be empty")
        return self._start(lambda: self.client.fetch_detail(name))

    def reset(self) -> None:
        """Go back to idle and stop every in-flight request from committing."""
        self._generation += 1
        self._set_status(FetchStatus.idle())
