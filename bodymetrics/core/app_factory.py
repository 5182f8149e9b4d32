"""Application factory for the FastAPI app.

Centralizes app construction (metadata, middleware, handlers, routers,
rate limiters, database lifecycle) so tests can build isolated instances.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

from fastapi import APIRouter, Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from bodymetrics.adapters.email.base import AbstractEmailSender
from bodymetrics.adapters.email.factory import create_email_sender
from bodymetrics.api.routes import auth_router, health_router, metrics_router, users_router
from bodymetrics.core.auth import verify_api_key
from bodymetrics.core.config import settings
from bodymetrics.core.exception_handlers import setup_exception_handlers
from bodymetrics.core.logging import configure_logging
from bodymetrics.core.middleware import (
    body_size_limit_middleware,
    request_id_middleware,
    security_headers_middleware,
)
from bodymetrics.core.openapi import apply_openapi_customizations
from bodymetrics.core.rate_limit import build_rate_limiters
from bodymetrics.db.connection import Database

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


def _allowed_origins() -> list[str]:
    origins = [o.strip() for o in settings.app.allowed_origins.split(",") if o.strip()]
    return origins or ["*"]


def create_app(
    *,
    database_path: str | Path | None = None,
    email_sender: AbstractEmailSender | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Args:
        database_path: SQLite file to use; defaults to ``DB_PATH``.
        email_sender: Email adapter; defaults to the Resend sender.

    Returns:
        Configured FastAPI app. The database opens (and migrates) on startup
        and closes on shutdown.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    db_path = Path(database_path or settings.db.path)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        db = Database()
        await db.init(db_path)
        app.state.db = db
        logger.info("app.started", extra={"app_env": settings.app_env})
        try:
            yield
        finally:
            await db.close()

    app = FastAPI(
        title="BodyMetrics API",
        description=(
            "Tracks body-metric history (weight, BMI, dated entries) for user "
            "profiles behind account authentication. Requires X-API-Key on "
            "/api/v1 routes and a bearer token on user and metric routes. Login "
            "and password reset requests are throttled per client."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )

    app.state.rate_limiters = build_rate_limiters(settings.rate_limit)
    app.state.email_sender = email_sender or create_email_sender()

    # Middleware: the last registered runs first
    app.middleware("http")(body_size_limit_middleware)
    app.middleware("http")(security_headers_middleware)
    app.middleware("http")(request_id_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_allowed_origins(),
        allow_methods=["GET", "POST", "PATCH", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-API-Key"],
    )

    setup_exception_handlers(app)

    api = APIRouter(prefix=API_PREFIX, dependencies=[Depends(verify_api_key)])
    api.include_router(auth_router)
    api.include_router(users_router)
    api.include_router(metrics_router)

    app.include_router(health_router, prefix=API_PREFIX)
    app.include_router(api)

    apply_openapi_customizations(app)

    return app
