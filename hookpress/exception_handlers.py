"""
Exception handlers for the HookPress HTTP shell.

Every error leaves the service in the same envelope:

    {"error": {"status_code": 409,
               "message": "Cannot deactivate plugin 'formatting': ...",
               "type": "Conflict",
               "error_code": "PLUGIN_OPERATION_INVALID",
               "details": {"plugin": "formatting", "operation": "deactivate"},
               "path": "/api/v1/plugins/formatting/deactivate"}}

``error_code``, ``details`` and ``path`` are omitted when empty. Hook
callbacks that raise anything other than a HookPressError end up in the
catch-all handler as a 500; the traceback goes to the log, not the client.
"""

import logging
from http import HTTPStatus
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from hookpress.exceptions import ErrorCode, HookPressError

logger = logging.getLogger(__name__)

_TYPE_OVERRIDES = {422: "Validation Error"}

_HTTP_ERROR_CODES = {
    400: ErrorCode.VALIDATION_FAILED,
    403: ErrorCode.AUTH_PERMISSION_DENIED,
    404: ErrorCode.RESOURCE_NOT_FOUND,
    422: ErrorCode.VALIDATION_FAILED,
    500: ErrorCode.INTERNAL_ERROR,
}


def get_error_type(status_code: int) -> str:
    """Reason phrase for *status_code*, or "Error" for non-standard codes."""
    if status_code in _TYPE_OVERRIDES:
        return _TYPE_OVERRIDES[status_code]
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Error"


def get_http_error_code(status_code: int) -> str:
    """ErrorCode value for a plain HTTPException with *status_code*."""
    return _HTTP_ERROR_CODES.get(status_code, ErrorCode.UNKNOWN_ERROR).value


def create_error_response(
    status_code: int,
    message: str,
    error_code: str | ErrorCode | None = None,
    details: dict[str, Any] | None = None,
    path: str | None = None,
) -> JSONResponse:
    body: dict[str, Any] = {
        "status_code": status_code,
        "message": message,
        "type": get_error_type(status_code),
    }
    if error_code:
        body["error_code"] = error_code.value if isinstance(error_code, ErrorCode) else error_code
    if details:
        body["details"] = details
    if path:
        body["path"] = path
    return JSONResponse(status_code=status_code, content={"error": body})


async def hookpress_exception_handler(request: Request, exc: HookPressError) -> JSONResponse:
    level = logging.ERROR if exc.status_code >= 500 else logging.WARNING
    logger.log(
        level,
        "%s on %s: %s",
        exc.error_code.value,
        request.url.path,
        exc.message,
        extra={"status_code": exc.status_code, "error_code": exc.error_code.value},
    )
    return create_error_response(exc.status_code, exc.message, exc.error_code, exc.details, request.url.path)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return create_error_response(
        exc.status_code,
        str(exc.detail),
        get_http_error_code(exc.status_code),
        path=request.url.path,
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {
            "field": ".".join(str(part) for part in error["loc"] if part != "body"),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]
    return create_error_response(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "Validation failed",
        ErrorCode.VALIDATION_FAILED,
        {"errors": errors},
        request.url.path,
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all for errors that escaped a route, hook callbacks included."""
    logger.exception("Unhandled %s on %s", type(exc).__name__, request.url.path)
    return create_error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "An unexpected error occurred",
        ErrorCode.INTERNAL_ERROR,
        path=request.url.path,
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(HookPressError, hookpress_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
