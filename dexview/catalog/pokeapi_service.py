"""
PokeAPI integration for the catalogue.  This module is the only place
that talks to the network.  It exposes ``PokeApiClient`` with two
coroutines:

* ``fetch_page()``: retrieve one page of entity summaries given a
  ``limit`` and ``offset``.  Missing ``count``/``results`` fields are
  read as zero/empty rather than rejected.

* ``fetch_detail()``: retrieve the full record of a single entity by
  name or numeric id.

Requests go through ``httpx.AsyncClient`` so they never block the event
loop.  Failures are raised as ``ListFetchError``/``DetailFetchError``;
callers (the fetchers) decide what to do with them.  Successful
responses are kept in small per-client caches so that returning to a
page or reopening an entity does not hit the service again.  Failed
responses are never cached.
"""

from __future__ import annotations

import logging
import urllib.parse
from collections import OrderedDict
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Type

import httpx
from pydantic import ValidationError

from ..config import (
    API_BASE,
    CACHE_SIZE,
    DETAIL_SPRITE_PATHS,
    PAGE_SIZE,
    REQUEST_TIMEOUT,
    USER_AGENT,
)
from .errors import CatalogError, DetailFetchError, ListFetchError
from .schemas import CatalogPage, CatalogSummary, EntityDetail, EntityStat, EntityType


logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


def _dig(data: Any, path: Iterable[str]) -> Any:
    """Follow ``path`` through nested dicts, returning ``None`` on any gap."""
    node = data
    for key in path:
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    return node


def _as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def parse_page(data: Dict[str, Any], page_size: int = PAGE_SIZE) -> CatalogPage:
    """Build a ``CatalogPage`` from a list response.

    Entries without a name or url are skipped; a missing or non-numeric
    ``count`` is read as 0 and a non-list ``results`` as empty.
    """
    count = data.get("count") or 0
    if not isinstance(count, int) or count < 0:
        count = 0
    items: List[CatalogSummary] = []
    for entry in _as_list(data.get("results")):
        if not isinstance(entry, dict):
            continue
        name = entry.get("name")
        url = entry.get("url")
        if not name or not url:
            continue
        items.append(CatalogSummary(name=str(name), url=str(url)))
    return CatalogPage(total_count=count, items=items, page_size=page_size)


def parse_detail(
    data: Dict[str, Any],
    sprite_paths: Sequence[Sequence[str]] = DETAIL_SPRITE_PATHS,
) -> EntityDetail:
    """Build an ``EntityDetail`` from a record response.

    ``sprite_paths`` lists the sprite fields to probe, best first.  Null
    or missing sprite fields are dropped; non-list ``types``/``stats`` are
    read as empty.
    """
    types = []
    for entry in _as_list(data.get("types")):
        name = _dig(entry, ("type", "name"))
        if name:
            types.append(EntityType(name=name))

    stats = []
    for entry in _as_list(data.get("stats")):
        name = _dig(entry, ("stat", "name"))
        if not name:
            continue
        stats.append(EntityStat(name=name, base_value=entry.get("base_stat") or 0))

    sprites = data.get("sprites") or {}
    candidates: List[str] = []
    for path in sprite_paths:
        url = _dig(sprites, path)
        if isinstance(url, str) and url and url not in candidates:
            candidates.append(url)

    return EntityDetail(
        name=data.get("name") or "",
        id=data.get("id"),
        height=data.get("height") or 0,
        weight=data.get("weight") or 0,
        types=types,
        stats=stats,
        sprite_candidates=candidates,
    )


class PokeApiClient:
    """Async client for the two catalog endpoints.

    Pass ``http_client`` to reuse an existing ``httpx.AsyncClient`` (tests
    hand in one built on ``httpx.MockTransport``); otherwise the client
    creates and owns its own.
    """

    def __init__(
        self,
        base_url: str = API_BASE,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = REQUEST_TIMEOUT,
        use_cache: bool = True,
        cache_size: int = CACHE_SIZE,
        sprite_paths: Sequence[Sequence[str]] = DETAIL_SPRITE_PATHS,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.use_cache = use_cache
        self.cache_size = cache_size
        self.sprite_paths = tuple(tuple(p) for p in sprite_paths)
        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient(
            timeout=timeout,
            headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
        )
        self._page_cache: "OrderedDict[Tuple[int, int], CatalogPage]" = OrderedDict()
        self._detail_cache: "OrderedDict[str, EntityDetail]" = OrderedDict()

    async def __aenter__(self) -> "PokeApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    def clear_cache(self) -> None:
        self._page_cache.clear()
        self._detail_cache.clear()

    @property
    def cached_entries(self) -> int:
        return len(self._page_cache) + len(self._detail_cache)

    def _cache_get(self, cache: OrderedDict, key: Any) -> Any:
        if not self.use_cache or key not in cache:
            return None
        cache.move_to_end(key)
        return cache[key]

    def _cache_put(self, cache: OrderedDict, key: Any, value: Any) -> None:
        if not self.use_cache or self.cache_size <= 0:
            return
        cache[key] = value
        cache.move_to_end(key)
        while len(cache) > self.cache_size:
            cache.popitem(last=False)

    async def _get_json(
        self,
        url: str,
        error_cls: Type[CatalogError],
        params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Perform a GET and return the decoded JSON object.

        Transport errors, non-success statuses and undecodable bodies are
        all raised as ``error_cls``.
        """
        try:
            response = await self._http.get(url, params=params)
        except httpx.HTTPError as exc:
            logger.error("Error fetching %s: %s", url, exc)
            raise error_cls(str(exc)) from exc
        if not response.is_success:
            logger.warning("Request to %s returned status %s", url, response.status_code)
            raise error_cls(http_status=response.status_code)
        try:
            data = response.json()
        except ValueError as exc:
            logger.error("Invalid JSON from %s: %s", url, exc)
            raise error_cls(f"Invalid response from {url}") from exc
        if not isinstance(data, dict):
            raise error_cls(f"Unexpected response from {url}")
        return data

    async def fetch_page(self, limit: int = PAGE_SIZE, offset: int = 0) -> CatalogPage:
        """Return the page of summaries starting at ``offset``.

        Pages past the end of the catalog are returned but not cached.
        """
        cache_key = (limit, offset)
        cached = self._cache_get(self._page_cache, cache_key)
        if cached is not None:
            return cached
        data = await self._get_json(
            f"{self.base_url}/pokemon",
            ListFetchError,
            params={"limit": limit, "offset": offset},
        )
        try:
            page = parse_page(data, page_size=limit)
        except ValidationError as exc:
            raise ListFetchError(f"Malformed list response: {exc.error_count()} errors") from exc
        except (TypeError, ValueError) as exc:
            raise ListFetchError(f"Malformed list response: {exc}") from exc
        if offset < page.total_count:
            self._cache_put(self._page_cache, cache_key, page)
        return page

    async def fetch_detail(self, name: str) -> EntityDetail:
        """Return the full record for ``name`` (a name or numeric id)."""
        key = name.strip().lower()
        cached = self._cache_get(self._detail_cache, key)
        if cached is not None:
            return cached
        data = await self._get_json(
            f"{self.base_url}/pokemon/{urllib.parse.quote(name.strip(), safe='')}",
            DetailFetchError,
        )
        try:
            detail = parse_detail(data, self.sprite_paths)
        except ValidationError as exc:
            raise DetailFetchError(f"Malformed detail response: {exc.error_count()} errors") from exc
        except (TypeError, ValueError) as exc:
            raise DetailFetchError(f"Malformed detail response: {exc}") from exc
        self._cache_put(self._detail_cache, key, detail)
        return detail
