import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, OperationalError, ProgrammingError

from crewwell.api.routes import checkins, health, management, wellness
from crewwell.core.config import Settings, get_settings
from crewwell.core.exceptions import CrewWellError
from crewwell.core.logging import configure_logging
from crewwell.schemas.common import ErrorResponse


def _error(status_code: int, error: str, detail=None, error_code=None) -> JSONResponse:
    body = ErrorResponse(error=error, detail=detail, error_code=error_code)
    return JSONResponse(status_code=status_code, content=body.model_dump())


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)
    app = FastAPI(title=settings.APP_NAME)
    logger = logging.getLogger(__name__)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"], allow_credentials=True,
        allow_methods=["*"], allow_headers=["*"],
    )

    @app.exception_handler(CrewWellError)
    async def crewwell_error_handler(request: Request, exc: CrewWellError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        else:
            logger.info("%s %s rejected: %s", request.method, request.url.path, exc.message)
        detail = None
        if exc.details:
            detail = "; ".join(f"{k}: {v}" for k, v in exc.details.items())
        return _error(exc.status_code, exc.message, detail, exc.error_code)

    @app.exception_handler(ProgrammingError)
    async def programming_error_handler(request: Request, exc: ProgrammingError):
        logger.error("Database programming error: %s", exc)
        if "does not exist" in str(exc):
            return _error(
                503,
                "Database schema mismatch detected",
                "The application schema is out of sync with the database. Run the migrations.",
                "SCHEMA_MISMATCH",
            )
        return _error(500, "Database query error", "There was an error executing the database query", "DATABASE_ERROR")

    @app.exception_handler(OperationalError)
    async def operational_error_handler(request: Request, exc: OperationalError):
        logger.error("Database operational error: %s", exc)
        return _error(
            503,
            "Database connection error",
            "Unable to connect to the database. Please try again later.",
            "DATABASE_CONNECTION_ERROR",
        )

    @app.exception_handler(IntegrityError)
    async def integrity_error_handler(request: Request, exc: IntegrityError):
        logger.error("Database integrity error: %s", exc)
        return _error(400, "Data integrity violation", "The operation violates database constraints", "DATA_INTEGRITY_ERROR")

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return _error(500, "Internal server error", None, "INTERNAL_ERROR")

    # routes
    app.include_router(health.router)
    app.include_router(checkins.router)
    app.include_router(wellness.router)
    app.include_router(management.router)
    return app


app = create_app()
