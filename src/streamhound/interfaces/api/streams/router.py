"""Stream lookup API endpoints."""

from __future__ import annotations

from typing import cast, get_args

import structlog
from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse

from streamhound.domain.entities.streams import AdapterQuery, MediaType
from streamhound.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

router = APIRouter(tags=["streams"])

_MEDIA_TYPES: frozenset[str] = frozenset(get_args(MediaType))


@router.get("/streams/{media_type}/{catalog_id}")
async def get_streams(
    request: Request,
    media_type: str,
    catalog_id: str,
    season: int | None = Query(default=None, ge=0),
    episode: int | None = Query(default=None, ge=0),
) -> JSONResponse:
    """Ranked stream descriptors from every enabled adapter."""
    state = cast(AppState, request.app.state)

    if media_type not in _MEDIA_TYPES:
        return JSONResponse(
            status_code=400,
            content={"detail": f"Unknown media type: {media_type!r}"},
        )

    use_case = getattr(state, "stream_lookup_uc", None)
    if use_case is None:
        log.warning("streams_use_case_unavailable")
        return JSONResponse(content={"streams": []})

    query = AdapterQuery(
        catalog_id=catalog_id,
        media_type=cast(MediaType, media_type),
        season=season,
        episode=episode,
    )
    try:
        streams = await use_case.execute(query)
    except Exception:
        log.error(
            "streams_lookup_failed",
            catalog_id=catalog_id,
            media_type=media_type,
            exc_info=True,
        )
        return JSONResponse(content={"streams": []})

    return JSONResponse(content={"streams": [s.to_dict() for s in streams]})


@router.get("/adapters")
async def list_adapters(request: Request) -> JSONResponse:
    """Names of all loadable, enabled adapters."""
    state = cast(AppState, request.app.state)
    registry = getattr(state, "adapters", None)
    names = registry.list_names() if registry is not None else []
    return JSONResponse(content={"adapters": names})
