"""
Application Entry Point

This module defines the FastAPI application instance, registers all routers,
configures global exception handling, and provides a test-friendly application
factory.

Design Goals
------------
- Deterministic startup
- Fail fast on missing configuration
- Centralized router registration
- Global exception safety net
- Test-friendly via create_app()
"""

from __future__ import annotations

import contextlib
import logging
from typing import AsyncIterator

from fastapi import FastAPI

from .config import settings
from .core.errors import register_exception_handlers
from .db import async_engine, create_schema

from .api import (
    content_routes,
    health_routes,
    learning_routes,
)


logger = logging.getLogger("content.app")


# ---------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------

@contextlib.asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Starting classroom-content-server")

    # Touch critical secrets now rather than at first use
    if not settings.gemini_api_key.get_secret_value():
        raise RuntimeError("GEMINI_API_KEY is not configured")

    await create_schema()
    logger.info("Configuration validated successfully")

    yield

    logger.info("Shutting down classroom-content-server")
    await async_engine.dispose()


# ---------------------------------------------------------------------
# Application Factory (Test-Friendly)
# ---------------------------------------------------------------------

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns
    -------
    FastAPI
        Fully configured FastAPI application.
    """
    app = FastAPI(
        title="classroom-content-server",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    register_exception_handlers(app)

    app.include_router(health_routes.router)
    app.include_router(content_routes.router)
    app.include_router(learning_routes.router)

    return app


# ---------------------------------------------------------------------
# Default Application Instance (for Uvicorn/Gunicorn)
# ---------------------------------------------------------------------

app = create_app()
