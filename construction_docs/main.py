"""FastAPI application entry point.

Wiring only: lifespan, exception handlers, middleware, routers.
Settings are loaded inside create_app() so that tests can set env (and clear
the get_settings cache) before calling it.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from construction_docs.api.v1 import api_router
from construction_docs.api.v1.dependencies import authorize_oversized_body
from construction_docs.core.config import get_settings
from construction_docs.core.constants import DOCUMENT_VERSION_HEADER
from construction_docs.core.exception_handlers import register_exception_handlers
from construction_docs.core.lifespan import create_lifespan
from construction_docs.core.limiter import limiter
from construction_docs.middleware import RequestIDMiddleware, RequestSizeLimitMiddleware


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=create_lifespan,
    )

    limiter.enabled = settings.rate_limit_enabled
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    register_exception_handlers(app)

    # First added = innermost. Order: size limit → request ID → CORS.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in settings.allowed_origins.split(",") if o.strip()],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[DOCUMENT_VERSION_HEADER, settings.request_id_header],
    )
    app.add_middleware(RequestIDMiddleware, header_name=settings.request_id_header)
    app.add_middleware(
        RequestSizeLimitMiddleware,
        max_bytes=settings.max_upload_size + settings.multipart_overhead_bytes,
        authorize=authorize_oversized_body,
    )

    app.include_router(api_router, prefix="/api/v1")
    return app


app = create_app()
