"""Product Reviews FastAPI application.

Usage:
    uvicorn app:create_app --factory --app-dir src --host 0.0.0.0 --port 4000
"""

from __future__ import annotations

import uuid

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from catalogue.api import product_router
from reviews.api import review_router
from shared.config import Settings
from shared.db import Database
from shared.errors import StoreFailure
from shared.http import register_exception_handlers
from shared.logging import add_context, clear_context, configure_logging, get_logger

logger = get_logger(__name__)


def create_app(settings: Settings | None = None, database: Database | None = None) -> FastAPI:
    """Build the application around one database handle.

    The database must answer at startup; otherwise the process exits.
    """
    settings = settings or Settings()
    if database is None:
        configure_logging(settings.environment)
        database = Database.from_settings(settings)

    try:
        database.ping()
    except StoreFailure as exc:
        logger.critical("database_unreachable", cause=repr(exc.__cause__))
        raise SystemExit(1) from exc
    logger.info("database_connection_pool_established", environment=settings.environment)

    app = FastAPI(
        title="Product Reviews API",
        description="Product catalogue with customer reviews and average ratings",
        version=settings.version,
    )
    app.state.db = database
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_context_middleware(request: Request, call_next):
        """Tag every log line emitted while serving a request with its id and route."""
        clear_context()
        add_context(
            request_id=request.headers.get("X-Request-ID") or uuid.uuid4().hex,
            method=request.method,
            path=request.url.path,
        )
        try:
            return await call_next(request)
        finally:
            clear_context()

    register_exception_handlers(app)
    app.include_router(product_router)
    app.include_router(review_router)

    @app.get("/v1/healthcheck")
    def healthcheck():
        return {
            "status": "available",
            "system_info": {
                "environment": settings.environment,
                "version": settings.version,
            },
        }

    return app
