# dexview/main.py
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .catalog import catalog_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    client = getattr(app.state, "catalog_client", None)
    if client is not None:
        await client.aclose()


app = FastAPI(
    title="dexview",
    description=(
        "Browser-facing catalog viewer: paginated entity list, per-entity "
        "detail view and image fallback chains over PokeAPI."
    ),
    version="1.0.0",
    lifespan=lifespan,
)


# Quick liveness check
@app.get("/")
def health_check():
    return {"status": "ok"}


app.include_router(catalog_router)
