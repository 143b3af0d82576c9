# File: src/speednet/main.py
"""FastAPI application factory."""

import os
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator

import uvicorn
from fastapi import FastAPI

from speednet.core.cache import SessionCache
from speednet.core.logging import configure_logging, get_logger

configure_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Own the session cache for the lifetime of the app."""
    start_time = datetime.now()
    app.state.session_cache = SessionCache()
    logger.info("app.startup", message="speednet starting up", timestamp=start_time.isoformat())

    from speednet.api.health import set_app_start_time

    set_app_start_time(start_time)

    yield

    app.state.session_cache.clear()
    logger.info("app.shutdown", message="speednet shutting down gracefully")


def _setup_middleware(app: FastAPI) -> None:
    """Configure middleware. Last added runs first, so RequestIDMiddleware goes last."""
    from speednet.middleware.logging import RequestIDMiddleware
    from speednet.middleware.sentry import SentryContextMiddleware

    app.add_middleware(SentryContextMiddleware)
    app.add_middleware(RequestIDMiddleware)


def _register_routers(app: FastAPI) -> None:
    from speednet.api.business_cards import router as business_cards_router
    from speednet.api.health import router as health_router
    from speednet.api.networking_sessions import router as sessions_router
    from speednet.api.signups import router as signups_router

    app.include_router(health_router)
    app.include_router(sessions_router)
    app.include_router(signups_router)
    app.include_router(business_cards_router)


def create_app() -> FastAPI:
    """Application factory for speednet."""
    from speednet.core.sentry import init_sentry

    init_sentry()

    app = FastAPI(
        title="speednet API",
        description="Speed-networking session scheduler and signup capacity engine",
        version="0.1.0",
        lifespan=lifespan,
    )

    from speednet.core.exception_handlers import register_exception_handlers

    register_exception_handlers(app)
    _setup_middleware(app)
    _register_routers(app)

    logger.info(
        "app.configured",
        message="FastAPI application created successfully",
        environment=os.getenv("ENVIRONMENT", "development"),
    )
    return app


def run() -> None:
    """Development server entrypoint."""
    uvicorn.run(
        "speednet.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8000")),
        reload=os.getenv("ENVIRONMENT", "development") == "development",
    )
