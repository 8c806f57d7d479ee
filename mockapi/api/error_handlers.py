"""Error Handlers: global exception handlers for the mock API.

Invariants:
    - MockApiError → its http_status with {"error": message}
    - Exception (catch-all) → 500 with a generic message, never internal details
    - A failing request never stops the server

Design Decisions:
    - Two-layer handler: domain (MockApiError) and catch-all (Exception)
    - Caller-side errors (4xx) log at warning, server-side at error
    - The catch-all runs outside the CORS middleware and adds the CORS
      headers itself when CORS is enabled
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from mockapi.api.cors import cors_headers
from mockapi.core.errors import MockApiError

logger = logging.getLogger(__name__)

INTERNAL_ERROR_BODY = {"error": "Internal server error"}


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_mockapi_error_handler(app)
    _register_generic_error_handler(app)


def _register_mockapi_error_handler(app: FastAPI) -> None:

    @app.exception_handler(MockApiError)
    async def mockapi_error_handler(request: Request, exc: MockApiError):
        """Handle all mockapi domain/storage errors."""
        level = logging.WARNING if exc.http_status < 500 else logging.ERROR
        logger.log(
            level,
            f"{request.method} {request.url.path}: {exc.message}",
            extra={
                "error_code": exc.code, "method": request.method,
                "path": request.url.path, "status_code": exc.http_status,
            },
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all: never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
            extra={"method": request.method, "path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=INTERNAL_ERROR_BODY,
            headers=cors_headers(request),
        )
