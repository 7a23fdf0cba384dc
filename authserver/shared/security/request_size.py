"""
Request size limiting middleware.

Rejects requests whose declared content-length exceeds the configured
maximum before the body is read. The rejection is raised in the same
wording the framework uses for oversized payloads and goes through the
translator like any other upstream failure. An unparseable
content-length is reported as a missing one.
"""

from starlette.exceptions import HTTPException
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from authserver.shared.errors.handlers import error_response
from authserver.shared.errors.taxonomy import missing_content_length
from authserver.shared.errors.translate import translate

TOO_LARGE_MESSAGE = "Payload content length greater than maximum allowed: {max_bytes}"


class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    """Middleware that rejects requests declaring an oversized body."""

    def __init__(self, app: ASGIApp, max_bytes: int) -> None:
        super().__init__(app)
        self.max_bytes = max_bytes

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Check content-length, then pass the request on."""
        declared = request.headers.get("content-length")
        if declared is not None:
            try:
                length = int(declared)
            except ValueError:
                return error_response(missing_content_length())
            if length > self.max_bytes:
                rejected = HTTPException(
                    status_code=400,
                    detail=TOO_LARGE_MESSAGE.format(max_bytes=self.max_bytes),
                )
                return error_response(translate(rejected))
        return await call_next(request)
