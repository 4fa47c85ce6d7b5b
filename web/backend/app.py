#!/usr/bin/env python3
"""
Personalization API - FastAPI Application

HTTP surface over the personalization engine: cache access and stats,
ranked job matches, content recommendations and interaction tracking.

Usage:
    python -m web.backend.app

Then open:
    - http://localhost:8080/docs - API Documentation (Swagger UI)
    - http://localhost:8080/redoc - Alternative API Documentation
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, HTTPException

from personalization.app_context import AppContext
from personalization.config_loader import load_config
from personalization.exceptions import PersonalizationError
from .exceptions import (
    ServiceException,
    service_exception_handler,
    personalization_exception_handler,
    http_exception_handler,
    general_exception_handler
)
from .routers import cache_router, ranking_router, metrics_router

logger = logging.getLogger(__name__)


def create_app(context: Optional[AppContext] = None, background_cleanup: bool = True) -> FastAPI:
    """
    Build the FastAPI app around an AppContext.

    Without a context one is built from config.yaml. The context's caches
    are swept in the background while the app runs and flushed on shutdown.
    """
    if context is None:
        context = AppContext.build(load_config())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if background_cleanup:
            context.start_background_cleanup()
        yield
        context.close()

    app = FastAPI(
        title="Personalization API",
        description="Caching, ranking and content intelligence for the careers and blog pages",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )
    app.state.context = context

    # Register exception handlers
    app.add_exception_handler(ServiceException, service_exception_handler)
    app.add_exception_handler(PersonalizationError, personalization_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    # Include routers
    app.include_router(cache_router)
    app.include_router(ranking_router)
    app.include_router(metrics_router)

    @app.get("/health")
    def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "service": "personalization-api"}

    return app


def main():
    """Run the web server."""
    import uvicorn

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    config = load_config()

    logger.info(f"Starting Personalization API on {config.web.host}:{config.web.port}")
    logger.info(f"API Docs: http://{config.web.host}:{config.web.port}/docs")

    uvicorn.run(
        "web.backend.app:create_app",
        factory=True,
        host=config.web.host,
        port=config.web.port,
        reload=False,
        log_level="info"
    )


if __name__ == "__main__":
    main()
