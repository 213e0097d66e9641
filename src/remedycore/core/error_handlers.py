"""
src/remedycore/core/error_handlers.py

Unified exception handlers. Every error response has the shape

    {"error": "<short message>", "request_id": "<uuid | null>", "code": <http status>}

Tracebacks never reach the response body; they are logged server-side.
Validation errors additionally carry ``detail`` outside production.
"""
from __future__ import annotations

import logging
from typing import Dict, Tuple, Type

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from remedycore.config import get_settings
from remedycore.engine.errors import ComputationError, DataLoadError, EngineError

_log = logging.getLogger("remedycore.errors")

# engine error -> (HTTP status, public message)
ENGINE_ERROR_STATUS: Dict[Type[EngineError], Tuple[int, str]] = {
    DataLoadError: (503, "Reference data unavailable"),
    ComputationError: (500, "Remedy computation failed"),
}


def _request_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)


def _error_response(message: str, status: int, request: Request, **extra) -> JSONResponse:
    body = {"error": message, "request_id": _request_id(request), "code": status}
    body.update(extra)
    return JSONResponse(status_code=status, content=body)


def register_error_handlers(app: FastAPI) -> None:
    production = get_settings().ENV.lower() in {"production", "prod"}

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        detail = str(exc.detail) if exc.detail else "Request error"
        if exc.status_code >= 500:
            _log.error("HTTP %d %s path=%s", exc.status_code, detail, request.url.path)
        return _error_response(detail, exc.status_code, request)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        _log.warning("validation error path=%s errors=%d", request.url.path, len(exc.errors()))
        if production:
            return _error_response("Invalid request body or parameters", 422, request)
        return _error_response("Invalid request body or parameters", 422, request, detail=jsonable_encoder(exc.errors()))

    @app.exception_handler(EngineError)
    async def engine_error_handler(request: Request, exc: EngineError) -> JSONResponse:
        status, message = ENGINE_ERROR_STATUS.get(type(exc), (500, "Remedy engine error"))
        _log.error("%s path=%s: %s", exc.code, request.url.path, exc)
        return _error_response(message, status, request)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        _log.exception("unhandled exception path=%s", request.url.path)
        return _error_response("Unexpected server error", 500, request)
