"""
FastAPI Production Application

Main entry point for the Storefront API.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
import structlog

from storefront.config import get_settings
from storefront.config.logging import configure_logging
from storefront.database.connection import init_database, close_database
from storefront.serving.api import create_api_app

settings = get_settings()
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    configure_logging(settings.monitoring.log_level)

    logger.info("Starting Storefront API", environment=settings.app_env, version=settings.version)

    await init_database()
    logger.info("Database initialized")

    yield

    logger.info("Shutting down...")
    await close_database()


app = create_api_app(lifespan=lifespan, settings=settings)


@app.get(f"{settings.api_prefix.rstrip('/')}/info")
async def api_info():
    """API information endpoint."""
    return {
        "name": "Storefront API",
        "version": settings.version,
        "environment": settings.app_env,
        "documentation": "/docs",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
