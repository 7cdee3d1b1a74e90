"""
Structured logging configuration for the course portal.
- one JSON object per line, with the whitelisted `extra` keys copied in
- request_id propagation via contextvars (set per API request)
- aiohttp is held at WARNING: link checks and uptime rounds already log one
  line per URL, and its per-connection debug output would drown those
"""
from __future__ import annotations

import json
import logging
import sys
from contextvars import ContextVar
from typing import Any, Dict, Union

# Context variable for request_id
_request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)

_EXTRA_KEYS = (
    "path", "count", "query", "hits", "url", "status", "errors", "warnings", "suggestions",
    "course_id", "resource_id", "step", "response_time_ms",
)


def set_request_id(request_id: str | None) -> None:
    _request_id_var.set(request_id)


def get_request_id() -> str | None:
    return _request_id_var.get()


class RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        rid = get_request_id()
        setattr(record, "request_id", rid or "-")
        return True


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        base: Dict[str, Any] = {
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", "-"),
        }
        # Optional extras
        for key in _EXTRA_KEYS:
            if hasattr(record, key):
                base[key] = getattr(record, key)
        if record.exc_info:
            base["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(base, ensure_ascii=False, default=str)


def configure_logging(level: Union[int, str] = logging.INFO) -> None:
    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(JsonFormatter())
    handler.addFilter(RequestIdFilter())

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)
    root.addHandler(handler)

    logging.getLogger("uvicorn").setLevel(level)
    logging.getLogger("uvicorn.error").setLevel(level)
    logging.getLogger("uvicorn.access").setLevel(level)
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
