"""ProjectGrid ASGI application.

``create_app()`` reads settings when called, so tests can set the
environment and clear the settings cache before the import below runs.
Run with ``uvicorn projectgrid.main:app``.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from projectgrid.api.v1 import api_router
from projectgrid.core.config import Settings, get_settings
from projectgrid.core.exception_handlers import register_exception_handlers
from projectgrid.core.lifespan import create_lifespan
from projectgrid.core.limiter import limiter
from projectgrid.middleware import RequestIDMiddleware
from projectgrid.shared.telemetry.logging import setup_logging

API_PREFIX = "/api/v1"


def _add_middleware(app: FastAPI, settings: Settings) -> None:
    # Added last runs first: the request ID is set before CORS answers preflights.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", settings.request_id_header],
        expose_headers=[settings.request_id_header],
    )
    app.add_middleware(RequestIDMiddleware, header_name=settings.request_id_header)


def create_app() -> FastAPI:
    settings = get_settings()
    setup_logging()

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
    _add_middleware(app, settings)
    app.include_router(api_router, prefix=API_PREFIX)

    @app.get("/", include_in_schema=False)
    async def welcome() -> dict[str, str]:
        return {"message": "Welcome to the ProjectGrid backend server!"}

    return app


app = create_app()
