"""HTTP list routes for the entity queries.

``GET /api/customer/list?name=ros&email=acme`` returns the matching
customers as camelCase records, ordered like the grid.  Every entity in
:data:`~reflex_entity_grid.entities.ENTITIES` is reachable at
``/api/<route>``; query parameters name filter fields and unknown ones
are ignored.

The router can be mounted next to a Reflex app through
``rx.App(api_transformer=create_api())``.
"""

from typing import Any

import polars as pl
from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request

from reflex_entity_grid.entities import ENTITIES, get_entity_store, set_entity_store
from reflex_entity_grid.queries import EntityQuery, EntityStore, run_list_query, to_records

router = APIRouter(prefix="/api", tags=["entities"])


def _resolve_entity(segment: str) -> EntityQuery:
    # Accept the route segment ("customer") as well as the entity name
    # ("customers").
    for query in ENTITIES.values():
        if query.route == f"{segment}/list" or query.name == segment:
            return query
    raise HTTPException(status_code=404, detail=f"Unknown entity: {segment}")


def entity_store() -> EntityStore:
    """FastAPI dependency returning the installed entity store."""
    try:
        return get_entity_store()
    except (LookupError, FileNotFoundError) as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc


@router.get("/{segment}/list")
def list_entities(
    segment: str,
    request: Request,
    store: EntityStore = Depends(entity_store),
) -> list[dict[str, Any]]:
    query = _resolve_entity(segment)
    filters = dict(request.query_params)
    try:
        rows = run_list_query(query, store, filters)
    except (KeyError, pl.exceptions.PolarsError) as exc:
        print(f"[EntityAPI] {query.name}: query failed: {exc!r}")
        raise HTTPException(status_code=500, detail=f"Query failed: {exc}") from exc
    return to_records(query, rows)


def create_api(store: EntityStore | None = None) -> FastAPI:
    """Build a FastAPI app serving the entity list routes.

    Args:
        store: Store to install; when ``None`` the already installed store
            (or ``ENTITY_GRID_DATA_DIR``) is used at request time.
    """
    if store is not None:
        set_entity_store(store)
    api = FastAPI(title="Entity lists")
    api.include_router(router)
    return api
