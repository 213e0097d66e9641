# src/remedycore/api/main.py
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, FastAPI, Request

from remedycore import __version__
from remedycore.api.schemas import SuggestRequest, SuggestResponse, SuggestionOut
from remedycore.config import get_settings
from remedycore.core.error_handlers import register_error_handlers
from remedycore.core.health import router as health_router
from remedycore.core.logging import setup_json_logging
from remedycore.core.middleware import RequestIDMiddleware
from remedycore.engine import RemedyEngine
from remedycore.pipeline.engine_wrapper import get_engine

log = logging.getLogger("remedycore.api")

ENGINE_VERSION = "remedy_suggestion_engine_v1"

router = APIRouter(tags=["remedies"])


@router.get("/version")
async def version():
    return {"api_version": __version__, "engine_version": ENGINE_VERSION}


@router.post("/remedies/suggest", response_model=SuggestResponse)
def suggest(req: SuggestRequest, request: Request, engine: RemedyEngine = Depends(get_engine)):
    results = engine.suggest_remedies(
        [s.to_engine() for s in req.symptoms],
        req.profile.to_engine(),
        limit=min(req.limit, get_settings().MAX_LIMIT),
    )
    if not results:
        log.info("no suggestions symptoms=%d", len(req.symptoms))
    return {
        "results": [SuggestionOut.from_engine(s) for s in results],
        "request_id": getattr(request.state, "request_id", None),
    }


def create_app() -> FastAPI:
    settings = get_settings()
    setup_json_logging(settings.LOG_LEVEL)

    app = FastAPI(title=settings.APP_NAME, version=__version__, debug=settings.DEBUG)
    app.add_middleware(RequestIDMiddleware)
    register_error_handlers(app)

    app.include_router(health_router)
    app.include_router(router)
    return app


app = create_app()
