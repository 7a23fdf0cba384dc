"""
Application entry point.

Creates the FastAPI application and wires together:
- Routers
- Error handlers (every failure rendered as the canonical envelope)
- Request size and rate limiting
- Logging configuration

No business logic belongs here.
"""

from fastapi import FastAPI
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIASGIMiddleware

from authserver.core.config import settings
from authserver.interfaces.health import router as health_router
from authserver.shared.errors.handlers import register_error_handlers
from authserver.shared.logging import configure_logging
from authserver.shared.security.rate_limiting import limiter, rate_limit_exceeded_handler
from authserver.shared.security.request_size import RequestSizeLimitMiddleware


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Registers routers, error handlers, and security middleware.
    This is the composition root of the application.

    Returns:
        A fully configured FastAPI application instance.
    """
    configure_logging(level=settings.log_level)

    app = FastAPI(
        title=settings.project_name,
        version=settings.version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )

    # --- Rate Limiting ---
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIASGIMiddleware)

    # --- Request Size ---
    app.add_middleware(
        RequestSizeLimitMiddleware, max_bytes=settings.max_request_size_bytes
    )

    # --- Error Handlers ---
    register_error_handlers(app)

    # --- Routers ---
    app.include_router(health_router, prefix="/api/v1")

    return app


app = create_app()
