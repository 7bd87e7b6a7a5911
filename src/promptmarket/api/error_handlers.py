"""Global exception handlers mapping domain errors to HTTP responses.

    - MarketplaceError        -> its own status, ``{"message", "code"}``
    - RequestValidationError  -> 400 with field-level details
    - Exception (catch-all)   -> 500, never leaks internal details
"""

from __future__ import annotations

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from promptmarket.errors import InternalConsistencyError, MarketplaceError

log = structlog.get_logger()


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    app.add_exception_handler(MarketplaceError, _marketplace_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(Exception, _generic_error_handler)


async def _marketplace_error_handler(request: Request, exc: MarketplaceError) -> JSONResponse:
    if isinstance(exc, InternalConsistencyError):
        log.error(
            "internal_consistency_error",
            path=request.url.path,
            error=exc.message,
        )
        return JSONResponse(
            status_code=exc.http_status,
            content={"message": "Internal server error", "code": exc.code},
        )

    log.info(
        "request_rejected",
        path=request.url.path,
        code=exc.code,
        status=exc.http_status,
        error=exc.message,
    )
    headers = {"WWW-Authenticate": "Bearer"} if exc.http_status == 401 else None
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_response(),
        headers=headers,
    )


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    log.warning("validation_error", path=request.url.path, errors=len(exc.errors()))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "message": "Invalid data",
            "code": "VALIDATION_ERROR",
            "errors": [
                {
                    "field": ".".join(str(loc) for loc in e["loc"]),
                    "message": e["msg"],
                    "type": e["type"],
                }
                for e in exc.errors()
            ],
        },
    )


async def _generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    log.error("unhandled_exception", path=request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal server error", "code": "INTERNAL_ERROR"},
    )
