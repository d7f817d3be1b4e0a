"""
Route definitions for the catalogue API.

Endpoints under /api/catalog:
- GET  /pokemon               : one page of the list view
- GET  /pokemon/{name}        : the detail dialog view for one entity
- GET  /images/{entity_id}    : thumbnail candidate chain, best first

Every request drives its own ``ViewStateController`` over a shared
``PokeApiClient`` (and therefore a shared response cache).  Fetch
failures are part of the returned view (``error_message``) rather than
HTTP errors, so the browser keeps its pagination and close controls.
"""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Path, Query, Request

from .controller import ViewStateController
from .pokeapi_service import PokeApiClient
from .resolver import ResourceResolver
from .schemas import DialogView, ListView


router = APIRouter(prefix="/api/catalog", tags=["catalog"])

_resolver = ResourceResolver()


async def get_client(request: Request) -> PokeApiClient:
    """Return the app-wide client, creating it on first use."""
    client = getattr(request.app.state, "catalog_client", None)
    if client is None:
        client = PokeApiClient()
        request.app.state.catalog_client = client
    return client


def get_resolver() -> ResourceResolver:
    return _resolver


@router.get("/pokemon", response_model=ListView)
async def list_page(
    page: int = Query(default=1, ge=1, description="Current page (1-based)"),
    client: PokeApiClient = Depends(get_client),
    resolver: ResourceResolver = Depends(get_resolver),
) -> ListView:
    controller = ViewStateController(client, resolver=resolver)
    task = controller.go_to_page(page)
    if task is not None:
        await task
    return controller.list_view()


@router.get("/pokemon/{name}", response_model=DialogView)
async def entity_detail(
    name: str = Path(..., min_length=1),
    client: PokeApiClient = Depends(get_client),
    resolver: ResourceResolver = Depends(get_resolver),
) -> DialogView:
    controller = ViewStateController(client, resolver=resolver)
    await controller.open_detail(name)
    return controller.dialog_view()


@router.get("/images/{entity_id}", response_model=List[str])
def image_candidates(
    entity_id: str,
    resolver: ResourceResolver = Depends(get_resolver),
) -> List[str]:
    return resolver.resolve(entity_id)
