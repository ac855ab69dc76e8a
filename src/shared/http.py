"""HTTP glue shared by the API routers: error mapping and the database dependency."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from shared.db import Database
from shared.errors import ConflictError, NotFoundError, StoreFailure, ValidationError
from shared.logging import get_logger

logger = get_logger(__name__)


def get_database(request: Request) -> Database:
    return request.app.state.db


def register_exception_handlers(app: FastAPI) -> None:
    """Translate domain errors into status codes and ``{"error": ...}`` bodies."""

    @app.exception_handler(NotFoundError)
    async def not_found(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"error": exc.message})

    @app.exception_handler(ValidationError)
    async def failed_validation(request: Request, exc: ValidationError):
        return JSONResponse(status_code=422, content={"error": exc.messages})

    @app.exception_handler(ConflictError)
    async def edit_conflict(request: Request, exc: ConflictError):
        return JSONResponse(status_code=409, content={"error": exc.message})

    @app.exception_handler(StoreFailure)
    async def store_failure(request: Request, exc: StoreFailure):
        logger.error(
            "request_failed",
            method=request.method,
            path=request.url.path,
            cause=repr(exc.__cause__),
        )
        return JSONResponse(status_code=500, content={"error": exc.message})
