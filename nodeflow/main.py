"""Main entry point for the nodeflow server."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .core.config import settings
from .db import init_db
from .engine.events import event_bus
from .engine.node_registry import register_all_nodes
from .routes import nodes_router, realtime_router, runs_router, webhook_router, workflows_router
from .schemas.common import HealthResponse, RootResponse
from .services.run_service import RunService

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    await init_db()
    logger.info("Database initialized")

    register_all_nodes()

    run_service = RunService()
    run_service.subscribe(event_bus)
    logger.info("%s v%s started on http://%s:%s", settings.app_name, settings.app_version, settings.host, settings.port)

    yield

    run_service.unsubscribe(event_bus)
    await event_bus.drain()
    logger.info("%s stopped", settings.app_name)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        description="Workflow execution engine - runs node graphs and streams node status",
        version=settings.app_version,
        lifespan=lifespan,
        debug=settings.debug,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    # Include routers
    app.include_router(workflows_router, tags=["Workflows"])
    app.include_router(webhook_router, tags=["Webhooks"])
    app.include_router(realtime_router, tags=["Realtime"])
    app.include_router(runs_router, tags=["Runs"])
    app.include_router(nodes_router, tags=["Nodes"])

    # Root endpoints
    @app.get("/", response_model=RootResponse)
    async def root() -> RootResponse:
        """Root endpoint."""
        return RootResponse(
            name=settings.app_name,
            version=settings.app_version,
            status="running",
        )

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(
            status="healthy",
            version=settings.app_version,
        )

    return app


# Create app instance
app = create_app()


def main() -> None:
    """Run the server."""
    configure_logging()
    uvicorn.run(
        "nodeflow.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        log_level=settings.log_level,
    )


if __name__ == "__main__":
    main()
