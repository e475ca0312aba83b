"""
FastAPI application with assembled routers.

Initializes FastAPI app with all API routers and configures uvicorn server.

Dependencies: fastapi, knowledge_core.api.routers, uvicorn
System role: API entry point with router assembly and server launch
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from knowledge_core.api.deps.dependencies import get_service_cache
from knowledge_core.boundary.db import create_tables
from knowledge_core.configs import get_settings
from knowledge_core.observability import configure_logging

from .routers import (
    documents_router,
    graph_router,
    health_router,
    retrieval_router,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Configures logging and creates missing tables on startup; drops cached
    providers on shutdown.
    """
    settings = get_settings()
    configure_logging(settings.log_level)
    logger = logging.getLogger(__name__)

    # Startup
    await create_tables()
    logger.info(f"{__name__}:lifespan - Database tables ready")

    yield

    # Shutdown
    get_service_cache().clear()
    logger.info(f"{__name__}:lifespan - Service cache cleared")


def create_app(use_lifespan: bool = True) -> FastAPI:
    """
    Create and configure FastAPI application with routers.

    Args:
        use_lifespan: Run startup/shutdown hooks (disabled in tests that
            provide their own database)

    Returns:
        FastAPI: Configured application instance with all routers registered
    """
    app = FastAPI(
        title="Knowledge Core API",
        description="Ingestion and hybrid (vector + graph) retrieval for a personal knowledge base",
        version="0.1.0",
        lifespan=lifespan if use_lifespan else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register all routers with /api/v1 prefix for versioning
    app.include_router(health_router, prefix="/api/v1")
    app.include_router(documents_router, prefix="/api/v1")
    app.include_router(retrieval_router, prefix="/api/v1")
    app.include_router(graph_router, prefix="/api/v1")

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "knowledge_core.api.main:app",
        host="0.0.0.0",
        port=8000,
    )
