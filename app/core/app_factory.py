from __future__ import annotations

"""Application factory for FastAPI app.

Centralizes app construction (metadata, middleware, handlers, routers) so
tests can build fresh instances.
"""

from fastapi import FastAPI

from app.api.routes import captcha_router, health_router, notifications_router
from app.core.config import settings
from app.core.exception_handlers import setup_exception_handlers
from app.core.logging import configure_logging
from app.core.middleware import cors_middleware, request_id_middleware
from app.core.openapi import apply_openapi_customizations


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance.

    Returns:
        Configured FastAPI app with middleware, handlers, routers and docs.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    app = FastAPI(
        title="Storefront Review API",
        description=(
            "Server side of the storefront review flow: authorization-checked "
            "admin notifications for newly submitted reviews and reCAPTCHA "
            "token verification. Requires a Supabase session bearer token for "
            "notifications."
        ),
        version="0.1.0",
        debug=settings.app.debug,
    )

    # Middleware (added last runs first: request id wraps CORS)
    app.middleware("http")(cors_middleware)
    app.middleware("http")(request_id_middleware)

    setup_exception_handlers(app)

    app.include_router(notifications_router, prefix="/v1")
    app.include_router(captcha_router, prefix="/v1")
    app.include_router(health_router)

    # OpenAPI customizations (security scheme, tags)
    apply_openapi_customizations(app)

    return app
