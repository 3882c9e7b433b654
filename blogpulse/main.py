"""FastAPI application entry point."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any, cast

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from blogpulse.api.v1.router import api_router
from blogpulse.config import settings
from blogpulse.core.database import close_db
from blogpulse.core.exceptions import (
    AnalyticsNotFoundError,
    APIKeyMissingError,
    AuthenticationError,
    BlogPulseError,
    ConfigurationError,
    DuplicateScheduleKeywordError,
    ExternalAPIError,
    ScheduleItemNotFoundError,
    ValidationError,
)
from blogpulse.core.logging import setup_logging

logger = logging.getLogger(__name__)

# First match wins; subclasses come before their bases.
_ERROR_STATUS: tuple[tuple[type[BlogPulseError], int], ...] = (
    (ConfigurationError, status.HTTP_503_SERVICE_UNAVAILABLE),
    (APIKeyMissingError, status.HTTP_503_SERVICE_UNAVAILABLE),
    (AuthenticationError, status.HTTP_401_UNAUTHORIZED),
    (AnalyticsNotFoundError, status.HTTP_404_NOT_FOUND),
    (ScheduleItemNotFoundError, status.HTTP_404_NOT_FOUND),
    (DuplicateScheduleKeywordError, status.HTTP_409_CONFLICT),
    (ValidationError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (ExternalAPIError, status.HTTP_502_BAD_GATEWAY),
)


def error_status(error: BlogPulseError) -> int:
    for error_type, status_code in _ERROR_STATUS:
        if isinstance(error, error_type):
            return status_code
    return status.HTTP_400_BAD_REQUEST


async def blogpulse_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render domain errors as ``{"detail": message}``."""
    error = cast(BlogPulseError, exc)
    status_code = error_status(error)
    log = logger.error if status_code >= 500 else logger.info
    log(
        "Request failed",
        extra={
            "path": request.url.path,
            "error_type": type(error).__name__,
            "error": error.message,
            "status_code": status_code,
        },
    )
    return JSONResponse(status_code=status_code, content={"detail": error.message})


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    setup_logging()
    treatments = settings.load_treatments()
    logger.info(
        "Starting BlogPulse",
        extra={
            "environment": settings.environment,
            "version": settings.app_version,
            "wordpress_url": settings.wordpress_url,
            "treatment_count": len(treatments),
            "llm_models": settings.get_llm_models(),
        },
    )
    yield
    logger.info("Shutting down BlogPulse")
    await close_db()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description=(
            "Marketing dashboard backend: WordPress content ingestion, keyword and "
            "treatment coverage analytics, AI summaries and a content calendar"
        ),
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        cast(Any, CORSMiddleware),
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(BlogPulseError, blogpulse_error_handler)

    # Include API router
    app.include_router(api_router, prefix=settings.api_v1_prefix)

    @app.get(
        "/health",
        summary="Health check",
        description="Return service health status and backend version information.",
    )
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy", "version": settings.app_version}

    return app


app = create_app()
