"""
Main FastAPI application.

This is the entry point for the API server:
    uvicorn recruitment_pipeline.main:app
"""

import logging

from fastapi import FastAPI
from contextlib import asynccontextmanager

from recruitment_pipeline.core.config import settings
from recruitment_pipeline.errors import AppError, app_error_handler
from recruitment_pipeline.routers import health, pipeline

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging on startup; log shutdown."""
    configure_logging()
    logger.info("Starting %s (store backend: %s)", settings.APP_NAME, settings.PIPELINE_STORE_BACKEND)
    
    yield
    
    logger.info("Shutting down %s", settings.APP_NAME)


# Create the FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    description="Recruitment pipeline stage classification and transitions",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_exception_handler(AppError, app_error_handler)


# Include routers (API endpoints)
app.include_router(health.router, tags=["Health"])
app.include_router(pipeline.router)
