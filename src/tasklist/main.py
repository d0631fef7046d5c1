"""Application factory and console entry point."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.routers import api_router, system_router
from .core.config import Settings, get_settings
from .core.logging import configure_logging
from .core.middleware import CorrelationIdMiddleware
from .db.session import engine, init_db
from .errors import register_exception_handlers

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings: Settings = app.state.settings
    if settings.create_tables_on_startup:
        logger.info("Creating database tables from model metadata")
        await init_db()
    logger.info("Service started")
    try:
        yield
    finally:
        await engine.dispose()


def _install_middleware(app: FastAPI, settings: Settings) -> None:
    # CorrelationIdMiddleware must stay outermost.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )
    app.add_middleware(CorrelationIdMiddleware)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings)

    prefix = settings.router_prefix
    app = FastAPI(
        title=settings.project_name,
        version=settings.version,
        summary="Per-user task list with filtering, pagination and statistics.",
        openapi_url=f"{prefix}/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings

    _install_middleware(app, settings)
    app.include_router(api_router, prefix=prefix)
    app.include_router(system_router)
    register_exception_handlers(app)
    return app


app = create_app()


def run() -> None:
    """Serve ``tasklist.main:app`` with uvicorn using the configured host and port."""

    settings = get_settings()
    uvicorn.run(
        "tasklist.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.reload,
        log_config=None,
    )
