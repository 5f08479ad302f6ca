"""
Structured Logging

JSON log records carrying the request ID and, for records emitted from
inside a hook callback, the chain of hooks being dispatched. The access
middleware logs one line per request with the number of actions and
filters the request dispatched.
"""

from __future__ import annotations

import json
import logging
import time
import uuid
from collections.abc import Callable
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from hookpress.hooks.registry import DispatchTally, track_dispatches

if TYPE_CHECKING:
    from hookpress.config import Settings
    from hookpress.hooks.registry import HookRegistry

request_id_var: ContextVar[str] = ContextVar("request_id", default="")

# Record attributes copied into the JSON payload when present.
_EXTRA_FIELDS = ("method", "path", "status_code", "duration_ms", "error_code", "actions", "filters")

_QUIET_PATHS = frozenset({"/health"})


class RequestIdFilter(logging.Filter):
    """Attach the current request ID to every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get("")
        return True


class CurrentHookFilter(logging.Filter):
    """Attach the innermost running hook and the full dispatch chain of *hooks*."""

    def __init__(self, hooks: HookRegistry) -> None:
        super().__init__()
        self.hooks = hooks

    def filter(self, record: logging.LogRecord) -> bool:
        stack = self.hooks.stack
        record.hook = stack[-1] if stack else ""
        record.hook_stack = list(stack)
        return True


class StructuredFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", ""),
        }
        if getattr(record, "hook", ""):
            payload["hook"] = record.hook
            payload["hook_stack"] = getattr(record, "hook_stack", [record.hook])
        for key in _EXTRA_FIELDS:
            if hasattr(record, key):
                payload[key] = getattr(record, key)
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class StructuredLoggingMiddleware(BaseHTTPMiddleware):
    """
    Access log middleware.

    Assigns (or propagates) X-Request-ID and logs method, path, status,
    duration and how many actions and filters were dispatched while
    handling the request, including from threadpool dependencies.
    """

    def __init__(self, app: ASGIApp, logger_name: str = "hookpress.access"):
        super().__init__(app)
        self.logger = logging.getLogger(logger_name)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request_id_var.set(request_id)
        started = time.perf_counter()

        with track_dispatches() as tally:
            try:
                response = await call_next(request)
            except Exception:
                self._log(request, 500, started, tally)
                raise

        response.headers["X-Request-ID"] = request_id
        self._log(request, response.status_code, started, tally)
        return response

    def _log(self, request: Request, status_code: int, started: float, tally: DispatchTally) -> None:
        if request.url.path in _QUIET_PATHS:
            return
        duration_ms = round((time.perf_counter() - started) * 1000, 2)
        self.logger.log(
            _level_for(status_code),
            "%s %s %d (%.2fms)",
            request.method,
            request.url.path,
            status_code,
            duration_ms,
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": status_code,
                "duration_ms": duration_ms,
                "actions": tally.actions,
                "filters": tally.filters,
            },
        )


def _level_for(status_code: int) -> int:
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    return logging.INFO


def setup_structured_logging(
    log_level: str = "INFO",
    json_format: bool = True,
    log_file: str | None = None,
    hooks: HookRegistry | None = None,
) -> logging.Handler:
    """
    Replace the root handlers with a single structured handler.

    Args:
        log_level:   Level for the root and ``hookpress`` loggers.
        json_format: JSON output when True, a plain text line otherwise.
        log_file:    Write to this file instead of stderr.
        hooks:       Registry whose running hook is stamped on each record.

    Returns:
        The installed handler.
    """
    level = logging.getLevelName(log_level.upper())
    handler: logging.Handler = logging.FileHandler(log_file) if log_file else logging.StreamHandler()
    if json_format:
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s [%(request_id)s] %(message)s"))
    handler.addFilter(RequestIdFilter())
    if hooks is not None:
        handler.addFilter(CurrentHookFilter(hooks))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)
    logging.getLogger("hookpress").setLevel(level)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    return handler


def configure_logging(settings: Settings, hooks: HookRegistry | None = None) -> logging.Handler:
    """setup_structured_logging() driven by the application settings."""
    return setup_structured_logging(log_level=settings.log_level, json_format=settings.log_json, hooks=hooks)


def get_request_id() -> str:
    return request_id_var.get("")
