"""
notelens ASGI application.

    uvicorn notelens.backend.main:app

`app` is built on first attribute access rather than at import, so importing
this module never reads configuration. Tests call create_app() directly and
swap dependencies through `app.dependency_overrides`.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from notelens.backend.api import health
from notelens.backend.api.router import router as api_router
from notelens.backend.core.concurrency import shutdown_pools
from notelens.backend.core.config import AppConfig, get_app_config
from notelens.backend.core.exception_handlers import register_exception_handlers
from notelens.backend.core.logging import get_logger, setup_logging
from notelens.backend.core.middleware import RequestContextMiddleware

logger = get_logger(__name__)

_app: FastAPI | None = None


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Configure logging on startup; drain the thread pool on shutdown."""
    config = get_app_config()
    setup_logging(level=config.logging.level, format_type=config.logging.format)
    logger.info(
        "Application starting",
        extra={
            "app_name": config.application.name,
            "env": config.application.environment,
            "api_prefix": config.application.api_prefix,
        },
    )
    try:
        yield
    finally:
        await shutdown_pools()
        logger.info("Application stopped")


def _install_middleware(app: FastAPI, config: AppConfig) -> None:
    # Added last runs first: CORS answers preflights before request logging.
    if config.features.api_request_logging:
        app.add_middleware(RequestContextMiddleware)

    origins = config.application.cors.origins
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
            expose_headers=["X-Request-ID", "X-Response-Time"],
        )


def create_app() -> FastAPI:
    """Build the application from config/settings/application.yaml and features.yaml."""
    config = get_app_config()
    identity = config.application
    docs_enabled = identity.debug

    app = FastAPI(
        title=identity.name,
        description=identity.description,
        version=identity.version,
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        lifespan=lifespan,
    )

    _install_middleware(app, config)
    register_exception_handlers(app)

    app.include_router(health.router, tags=["health"])
    app.include_router(api_router, prefix=identity.api_prefix)
    return app


def get_app() -> FastAPI:
    """The process-wide application, created on first call."""
    global _app
    if _app is None:
        _app = create_app()
    return _app


def __getattr__(name: str) -> FastAPI:
    if name == "app":
        return get_app()
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
