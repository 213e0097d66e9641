"""
src/remedycore/core/logging.py

JSON structured logging for RemedyCore (API and CLI).

Usage:
    from remedycore.core.logging import setup_json_logging, request_id_ctx

    setup_json_logging("DEBUG")  # once at startup

    log.info("suggested", extra={"remedies": 5, "case_type": "acute"})

Every line written to stderr is a single JSON object.
"""
from __future__ import annotations

import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Optional

from remedycore.config import get_settings

__all__ = [
    "request_id_ctx",
    "setup_json_logging",
]

request_id_ctx: ContextVar[str] = ContextVar("request_id", default="")

# Attributes every LogRecord carries; anything else came in through ``extra=``.
_RESERVED = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}


class _JsonFormatter(logging.Formatter):
    """
    Fields: timestamp, level, logger, message, request_id, plus any ``extra``
    keys. Records with exc_info get ``exc`` {type, detail[, traceback]}; the
    traceback is left out in production.
    """

    def __init__(self, production: bool = False) -> None:
        super().__init__()
        self._production = production

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": request_id_ctx.get(""),
        }
        for key, value in vars(record).items():
            if key not in _RESERVED and not key.startswith("_"):
                payload[key] = value

        if record.exc_info:
            exc_type, exc_val, _ = record.exc_info
            payload["exc"] = {
                "type": exc_type.__name__ if exc_type else "Unknown",
                "detail": str(exc_val),
            }
            if not self._production:
                payload["exc"]["traceback"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


def setup_json_logging(level: Optional[str] = None, production: Optional[bool] = None) -> None:
    """Attach the JSON handler to the root logger. Repeated calls are no-ops."""
    root = logging.getLogger()
    if any(isinstance(h.formatter, _JsonFormatter) for h in root.handlers):
        return

    settings = get_settings()
    if production is None:
        production = settings.ENV.lower() in {"production", "prod"}

    root.setLevel((level or settings.LOG_LEVEL).upper())
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(_JsonFormatter(production=production))
    root.addHandler(handler)
