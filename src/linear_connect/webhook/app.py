"""FastAPI webhook application factory."""

from __future__ import annotations

import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from linear_connect import __version__
from linear_connect.common.logging import get_logger, setup_logging
from linear_connect.common.settings import get_settings
from linear_connect.processing.errors import RelayError

log = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level)
    app.state.started_at = time.monotonic()

    log.info(
        "webhook_started",
        app=settings.app_name,
        port=settings.webhook_port,
        charge_policy=settings.charge_policy.value,
    )

    yield

    log.info("webhook_stopped")


async def relay_error_handler(request: Request, exc: RelayError) -> JSONResponse:
    """Render terminal processing failures as ``{"error": message}``."""
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=f"{settings.app_name} — Intercom to Linear relay",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.started_at = time.monotonic()

    # Register routes
    from linear_connect.webhook.routes.api import router as api_router
    from linear_connect.webhook.routes.health import router as health_router
    from linear_connect.webhook.routes.webhook import router as webhook_router

    app.include_router(health_router)
    app.include_router(webhook_router, prefix="/webhook")
    app.include_router(api_router, prefix="/api")

    app.add_exception_handler(RelayError, relay_error_handler)

    # Add middleware
    from linear_connect.webhook.middleware import add_middleware

    add_middleware(app)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    return app
