"""FastAPI application entry point for CardBox."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from cardbox import __version__
from cardbox.config import settings
from cardbox.database import close_db, init_db
from cardbox.routers import bulk_upload

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    settings.data_dir.mkdir(parents=True, exist_ok=True)

    await init_db()
    logger.info("Connected to MongoDB database '%s'", settings.mongodb_database)

    yield

    await close_db()


def create_app(lifespan_context=lifespan) -> FastAPI:
    """Build the CardBox application.

    Args:
        lifespan_context: Startup/shutdown handler; tests pass one that skips MongoDB.
    """
    app = FastAPI(
        title=settings.app_name,
        description="Sports card collection tracker with spreadsheet bulk import",
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan_context,
    )

    app.state.limiter = bulk_upload.limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Only allow origins from the whitelist; empty list means same-origin only
    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_credentials=True,
            allow_methods=["GET", "POST"],
            allow_headers=["Authorization", "Content-Type"],
            max_age=600,
        )

    @app.get("/health", tags=["Health"])
    async def health_check() -> JSONResponse:
        """Health check endpoint."""
        return JSONResponse(
            content={
                "status": "healthy",
                "version": __version__,
                "app_name": settings.app_name,
            }
        )

    app.include_router(bulk_upload.router, prefix="/api/bulk-upload", tags=["Bulk Upload"])
    return app


app = create_app()
