"""
Rate limiting configuration and setup.

Uses slowapi to enforce per-endpoint rate limits. The default limit
applies to every route through the ASGI middleware installed by
``create_app``; decorated routes use their own limit instead.
Exceeded limits are reported as the canonical throttling error with a
retry-after hint.
"""

from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.requests import Request
from starlette.responses import JSONResponse

from authserver.core.config import settings
from authserver.shared.errors.handlers import error_response
from authserver.shared.errors.taxonomy import too_many_requests

limiter = Limiter(key_func=get_remote_address, default_limits=[settings.rate_limit_default])


def retry_after_seconds(exc: RateLimitExceeded) -> int | None:
    """Length of the exceeded limit's window in seconds, if known."""
    item = getattr(getattr(exc, "limit", None), "limit", None)
    if item is None:
        return None
    return int(item.get_expiry())


async def rate_limit_exceeded_handler(
    _request: Request, exc: RateLimitExceeded
) -> JSONResponse:
    """Handle rate limit exceeded errors with the throttling envelope.

    Args:
        _request: The incoming HTTP request.
        exc: The rate limit exceeded exception.

    Returns:
        A 429 JSON response with a ``retry-after`` header.
    """
    return error_response(too_many_requests(retry_after=retry_after_seconds(exc)))
