"""
FastAPI application with assembled routers.

Initializes FastAPI app with all API routers and configures uvicorn server.

Dependencies: fastapi, upload_tracker.api.routers, uvicorn
System role: API entry point with router assembly and server launch
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from upload_tracker.api.deps.dependencies import get_service_cache
from upload_tracker.api.routers.router_utils import error_response
from upload_tracker.boundary.db import dispose_engine
from upload_tracker.configs import get_settings
from upload_tracker.observability import configure_logging
from upload_tracker.observability.middleware import (
    CorrelationMiddleware,
    RequestLoggingMiddleware,
)

from .routers import batches_router, health_router, items_router, jobs_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Handles startup and shutdown events.
    """
    settings = get_settings()
    configure_logging(settings.log_level)
    logger = logging.getLogger("uvicorn")
    logger.info("Starting upload tracker", extra={"environment": settings.environment})

    # Startup
    cache = get_service_cache()
    _ = cache.s3_client
    logger.info("Service cache pre-warmed")

    yield

    # Shutdown
    cache.clear()
    await dispose_engine()
    logger.info("Service cache cleared, database engine disposed")


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Return request validation failures in the shared error body."""
    return error_response(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "validation_error",
        jsonable_encoder(exc.errors()),
    )


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application with routers.

    Returns:
        FastAPI: Configured application instance with all routers registered
    """
    app = FastAPI(
        title="Upload Tracker API",
        description="Batch upload issuance and job status aggregation",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=get_settings().cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add observability middleware (last added runs first)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # Register all routers with /api/v1 prefix for versioning
    app.include_router(health_router, prefix="/api/v1")
    app.include_router(batches_router, prefix="/api/v1")
    app.include_router(items_router, prefix="/api/v1")
    app.include_router(jobs_router, prefix="/api/v1")

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "upload_tracker.api.main:app",
        host="0.0.0.0",
        port=8000,
    )
