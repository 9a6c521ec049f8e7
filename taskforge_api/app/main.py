"""
Main entrypoint for the TaskForge API.

This module assembles the FastAPI application, sets up logging and
includes versioned routers.  ``create_app`` builds and configures the
app, which is then instantiated at module import time as ``app``::

    uvicorn taskforge_api.app.main:app --reload
"""

import logging
import sqlite3

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from .core.config import settings
from .core.logging_config import setup_logging
from .api.v1.router import router as v1_router
from .core.db import init_db


logger = logging.getLogger(__name__)


async def storage_error_handler(request: Request, exc: sqlite3.Error) -> JSONResponse:
    """Render a storage failure as a generic 500 response."""
    logger.exception("Storage failure during %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


def create_app() -> FastAPI:
    """Create and configure a FastAPI application.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    # Logging first so that the setup below can log.
    setup_logging(
        settings.log_level,
        settings.log_file,
        max_bytes=settings.log_max_bytes,
        backup_count=settings.log_backup_count,
    )

    app = FastAPI(title=settings.project_name, version=settings.api_version, debug=settings.debug)

    app.include_router(v1_router, prefix="/api/v1")
    app.add_exception_handler(sqlite3.Error, storage_error_handler)

    @app.on_event("startup")
    async def startup_event() -> None:
        # Creates the database file if needed and applies migrations.
        init_db()

    return app


app = create_app()
