"""
FastAPI application entry point.

This is the main entry point for the Prompt Collection API.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.middleware import setup_exception_handlers
from api.routers import (
    auth_router,
    categories_router,
    health_router,
    prompts_router,
    tags_router,
)
from core.config import Settings, get_settings
from database import Database

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    """Configure root logging from settings."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format=settings.log_format,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Builds the Database handle on startup and disposes it on shutdown.
    """
    settings = get_settings()

    # ============ Startup ============
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")

    logger.info("Initializing database connection...")
    db = Database.from_settings(settings)
    if settings.db_auto_create:
        await db.create_all()
    app.state.db = db
    logger.info("Database initialized successfully")

    logger.info("Application startup complete")

    yield

    # ============ Shutdown ============
    logger.info("Shutting down application...")

    await db.dispose()

    logger.info("Application shutdown complete")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    settings = get_settings()
    configure_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        description="Personal prompt collection: categories, tags, versions and usage tracking",
        version=settings.app_version,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
        openapi_url="/openapi.json" if not settings.is_production else None,
        lifespan=lifespan,
    )

    # ============ Middleware ============

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    # ============ Exception Handlers ============
    setup_exception_handlers(app)

    # ============ Routers ============

    # Health check
    app.include_router(health_router, prefix="/api")

    # Authentication and profile
    app.include_router(auth_router, prefix="/api")

    # Category tree
    app.include_router(categories_router, prefix="/api")

    # Tags
    app.include_router(tags_router, prefix="/api")

    # Prompts
    app.include_router(prompts_router, prefix="/api")

    # ============ Root Endpoints ============

    @app.get("/", tags=["root"])
    async def root():
        """Root endpoint with API information."""
        return {
            "name": settings.app_name,
            "version": settings.app_version,
            "docs": "/docs" if not settings.is_production else None,
            "health": "/api/health",
        }

    @app.get("/api", tags=["root"])
    async def api_index():
        """List the resource endpoints."""
        return {
            "success": True,
            "data": {
                "name": settings.app_name,
                "version": settings.app_version,
                "endpoints": {
                    "auth": "/api/auth",
                    "categories": "/api/categories",
                    "tags": "/api/tags",
                    "prompts": "/api/prompts",
                    "health": "/api/health",
                },
            },
        }

    return app


# Create application instance
app = create_app()
