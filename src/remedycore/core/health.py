"""
src/remedycore/core/health.py

Health + readiness probe endpoints.

GET /health/live   liveness, always 200 while the process runs
GET /health/ready  readiness, 200 once the reference data has loaded, 503 if it
                   cannot be loaded
"""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from remedycore.engine import DataLoadError, RemedyEngine
from remedycore.pipeline.engine_wrapper import get_engine

_log = logging.getLogger("remedycore.health")

router = APIRouter(tags=["health"])


@router.get("/health/live")
async def health_live() -> JSONResponse:
    """Liveness probe: 200 whenever the process is up."""
    return JSONResponse(status_code=200, content={"status": "ok", "probe": "live"})


@router.get("/health/ready")
def health_ready(engine: RemedyEngine = Depends(get_engine)) -> JSONResponse:
    """
    Readiness probe: 200 only once the reference data is loaded.

    Triggers the store's first load if nothing has requested it yet.
    """
    try:
        snapshot = engine.store.load()
    except DataLoadError as exc:
        _log.error("health_ready: reference data unavailable: %s", exc)
        return JSONResponse(
            status_code=503,
            content={"status": "error", "probe": "ready", "data": "unavailable"},
        )
    return JSONResponse(
        status_code=200,
        content={
            "status": "ok",
            "probe": "ready",
            "data": "loaded",
            "categories": len(snapshot.categories),
            "rubrics": snapshot.rubric_count,
        },
    )
