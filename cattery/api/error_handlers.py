"""Error Handlers — render every failure as the Cattery JSON error envelope.

Invariants:
    - CatteryError → its own http_status and to_response() body
    - RequestValidationError (path/query params) → 400, same envelope as body validation
    - Anything else → 500 INTERNAL_ERROR, message never includes exception text
    - Field-level validation details are dropped when expose_details is False

Design Decisions:
    - Three layers registered from one function so main.py stays declarative
    - Domain refusals (4xx) log at WARNING, infrastructure failures at ERROR,
      both tagged with the entity ids from the error context
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from cattery.core.errors import (
    CatteryError, ErrorCategory, ErrorSeverity, InputValidationError,
)

logger = logging.getLogger(__name__)

INTERNAL_ERROR_BODY = {
    "error": {
        "code": "INTERNAL_ERROR",
        "message": "An unexpected error occurred",
        "category": ErrorCategory.INTERNAL.value,
        "severity": ErrorSeverity.CRITICAL.value,
    },
}


def register_error_handlers(app: FastAPI, expose_details: bool = True) -> None:
    """Install the domain, request-validation and catch-all handlers."""

    @app.exception_handler(CatteryError)
    async def cattery_error_handler(request: Request, exc: CatteryError):
        return _render(request, exc, expose_details)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError,
    ):
        return _render(request, _from_request_validation(exc), expose_details)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error(
            f"Unhandled exception: {exc}",
            exc_info=True,
            extra={"path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=INTERNAL_ERROR_BODY,
        )


def _render(
    request: Request, exc: CatteryError, expose_details: bool,
) -> JSONResponse:
    logger.log(
        logging.WARNING if exc.http_status < 500 else logging.ERROR,
        f"{exc.code}: {exc.message}",
        extra={
            "error_code": exc.code,
            "path": request.url.path,
            "operation": exc.context.operation,
            "cat_id": exc.context.cat_id,
            "user_id": exc.context.user_id,
        },
    )
    content = exc.to_response()
    if not expose_details:
        content["error"].pop("details", None)
    return JSONResponse(status_code=exc.http_status, content=content)


def _from_request_validation(exc: RequestValidationError) -> InputValidationError:
    """Reshape FastAPI's param errors; the leading 'path'/'query' segment is dropped."""
    return InputValidationError([
        {
            "field": ".".join(str(loc) for loc in e["loc"][1:]) or str(e["loc"][0]),
            "message": e["msg"],
            "type": e["type"],
        }
        for e in exc.errors()
    ])
