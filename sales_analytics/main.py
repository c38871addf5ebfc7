"""
FastAPI Production Application

Main entry point for the Sales Analytics API.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
import structlog

from sales_analytics.config import get_settings
from sales_analytics.config.logging import configure_logging
from sales_analytics.database.connection import close_database, init_database
from sales_analytics.serving.api.errors import register_exception_handlers
from sales_analytics.serving.api.middleware import (
    RequestLoggingMiddleware,
    SecurityHeadersMiddleware,
)
from sales_analytics.serving.api.routes import (
    analytics_router,
    health_router,
    reports_router,
)

settings = get_settings()
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    configure_logging()

    logger.info("Starting Sales Analytics API", environment=settings.app_env)

    # Serve anyway; the readiness probe reports the database as unavailable
    try:
        await init_database()
    except Exception as e:
        logger.warning("Database init failed", error=str(e), error_type=type(e).__name__)

    yield

    logger.info("Shutting down...")
    await close_database()


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI app instance
    """
    app = FastAPI(
        title="Sales Analytics API",
        description="Sales aggregates and stored report snapshots for the analytics dashboard",
        version=settings.version,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.security.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestLoggingMiddleware)

    register_exception_handlers(app)

    app.include_router(health_router, prefix=settings.api_prefix, tags=["Health"])
    app.include_router(analytics_router, prefix=settings.api_prefix, tags=["Analytics"])
    app.include_router(reports_router, prefix=settings.api_prefix, tags=["Reports"])

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
