"""
Shared fixtures: an in-memory catalog service behind ``httpx.MockTransport``.

Responses can be held back per request with ``hold()`` so tests decide
the order in which in-flight requests complete.
"""

import asyncio
from typing import Any, Dict, List, Optional, Tuple

import httpx
import pytest

from dexview.catalog.pokeapi_service import PokeApiClient

BASE_URL = "https://pokeapi.test/api/v2"


def make_results(count: int, start: int = 1) -> List[Dict[str, str]]:
    return [
        {"name": f"mon-{i}", "url": f"{BASE_URL}/pokemon/{i}/"}
        for i in range(start, start + count)
    ]


def make_record(name: str, entity_id: int, artwork: Optional[str] = "art", home: Optional[str] = None) -> Dict[str, Any]:
    return {
        "name": name,
        "id": entity_id,
        "height": 4,
        "weight": 60,
        "types": [{"slot": 1, "type": {"name": "electric", "url": "x"}}],
        "stats": [
            {"base_stat": 35, "stat": {"name": "hp"}},
            {"base_stat": 55, "stat": {"name": "attack"}},
        ],
        "sprites": {
            "front_default": f"https://img.test/{name}/front.png",
            "other": {
                "official-artwork": {"front_default": f"https://img.test/{name}/{artwork}.png" if artwork else None},
                "home": {"front_default": home},
                "dream_world": {"front_default": None},
            },
        },
    }


class FakeCatalog:
    """Answers list and detail requests from dictionaries."""

    def __init__(self) -> None:
        self.pages: Dict[int, Tuple[int, Any]] = {}
        self.records: Dict[str, Tuple[int, Any]] = {}
        self.failures: Dict[Tuple[str, Any], Exception] = {}
        self.requests: List[httpx.URL] = []
        self._gates: Dict[Tuple[str, Any], asyncio.Event] = {}

    def add_page(self, offset: int, body: Any, status: int = 200) -> None:
        self.pages[offset] = (status, body)

    def add_record(self, name: str, body: Any, status: int = 200) -> None:
        self.records[name] = (status, body)

    def hold(self, kind: str, key: Any) -> asyncio.Event:
        """Block matching requests until the returned event is set."""
        gate = asyncio.Event()
        self._gates[(kind, key)] = gate
        return gate

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request.url)
        path = request.url.path
        if path.endswith("/pokemon"):
            key: Tuple[str, Any] = ("list", int(request.url.params["offset"]))
            table: Dict[Any, Tuple[int, Any]] = self.pages
        else:
            key = ("detail", path.rsplit("/", 1)[-1])
            table = self.records
        gate = self._gates.get(key)
        if gate is not None:
            await gate.wait()
        if key in self.failures:
            raise self.failures[key]
        if key[1] not in table:
            return httpx.Response(404, json={"detail": "Not found"})
        status, body = table[key[1]]
        if isinstance(body, (bytes, str)):
            return httpx.Response(status, content=body)
        return httpx.Response(status, json=body)

    def client(self, **kwargs) -> PokeApiClient:
        http = httpx.AsyncClient(transport=httpx.MockTransport(self.handler))
        return PokeApiClient(base_url=BASE_URL, http_client=http, **kwargs)


@pytest.fixture
def fake() -> FakeCatalog:
    return FakeCatalog()
