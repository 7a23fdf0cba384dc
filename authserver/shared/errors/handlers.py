"""
Centralized error handlers for FastAPI.

Every exception that reaches the application boundary is translated
into a canonical AppError and rendered as the error envelope.
Stack traces and diagnostic traces are logged, never sent to clients.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from authserver.shared.errors import taxonomy
from authserver.shared.errors.app_error import AppError
from authserver.shared.errors.translate import translate

logger = logging.getLogger(__name__)

HTTP_500 = 500

JSON_INVALID = "json_invalid"


def error_response(error: AppError) -> JSONResponse:
    """Log a canonical error and render it as a JSON envelope response."""
    log_extra = {"errno": int(error.errno)}
    if error.status_code >= HTTP_500:
        logger.error(
            "Request failed: %s\nstack: %s\ntrace: %s",
            error.message,
            error.stack,
            error.diagnostic_trace,
            extra=log_extra,
        )
    else:
        logger.warning("Request rejected: %s", error.message, extra=log_extra)
    return JSONResponse(
        status_code=error.status_code,
        content=error.payload,
        headers=dict(error.headers),
    )


def is_malformed_json(exc: RequestValidationError) -> bool:
    """Whether the request body could not be decoded as JSON at all."""
    return any(err.get("type") == JSON_INVALID for err in exc.errors())


def register_error_handlers(app: FastAPI) -> None:
    """Register the canonical error handlers on the FastAPI application.

    Args:
        app: The FastAPI application instance.
    """

    @app.exception_handler(AppError)
    async def handle_app_error(_request: Request, exc: AppError) -> JSONResponse:
        """Render errors raised directly by routes."""
        return error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def handle_validation(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Handle request validation failures."""
        if is_malformed_json(exc):
            return error_response(taxonomy.invalid_request_body())
        return error_response(translate(exc))

    @app.exception_handler(StarletteHTTPException)
    async def handle_http(
        _request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        """Handle framework HTTP errors (authentication, not found, ...)."""
        return error_response(translate(exc))

    @app.exception_handler(Exception)
    async def handle_unexpected(_request: Request, exc: Exception) -> JSONResponse:
        """Catch-all for unexpected errors. Never exposes internals."""
        return error_response(translate(exc))
