"""
src/remedycore/core/middleware.py

Request ID middleware: reuses a client X-Request-ID or mints a UUID4, exposes it
through ``request.state.request_id`` and ``request_id_ctx`` (so every log line of
the request carries it) and echoes it on the response.
"""
from __future__ import annotations

import logging
import time
import uuid
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from remedycore.core.logging import request_id_ctx

_log = logging.getLogger("remedycore.access")

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER, "").strip() or str(uuid.uuid4())
        request.state.request_id = request_id
        token = request_id_ctx.set(request_id)

        start = time.perf_counter()
        try:
            response: Response = await call_next(request)
            elapsed_ms = round((time.perf_counter() - start) * 1000.0, 2)
            _log.info(
                "%s %s %d",
                request.method,
                request.url.path,
                response.status_code,
                extra={"status": response.status_code, "duration_ms": elapsed_ms},
            )
        except Exception:
            _log.error(
                "unhandled exception %s %s",
                request.method,
                request.url.path,
                extra={"duration_ms": round((time.perf_counter() - start) * 1000.0, 2)},
            )
            raise
        finally:
            request_id_ctx.reset(token)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
