"""FastAPI service exposing the toolkit helpers.

This module provides the FastAPI application that:
- Accepts multipart uploads into the local upload directory
- Serves stored files as downloads
- Offers strict JSON echo and slug endpoints
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request

from toolkit.config import settings
from toolkit.errors import ToolkitError
from toolkit.helpers import error_json
from toolkit.routes import echo, files, uploads
from toolkit.utils.log_utils import configure_logging
from toolkit.utils.storage_utils import create_dir_if_not_exist

configure_logging(settings.log_level, settings.log_format)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager."""
    create_dir_if_not_exist(settings.upload_dir)
    logger.info(f"Starting toolkit server (uploads in {settings.upload_dir})...")
    yield
    logger.info("Shutting down toolkit server...")


app = FastAPI(
    title="HTTP Toolkit",
    description="Multipart file ingestion and JSON helpers",
    version="1.0.0",
    lifespan=lifespan,
)


@app.exception_handler(ToolkitError)
async def toolkit_error_handler(request: Request, exc: ToolkitError):
    """Translate toolkit failures into the JSON error envelope."""
    if exc.status_code >= 500:
        logger.error(f"[request.failed] {request.method} {request.url.path} | {exc}")
    return error_json(exc)


# Include routers
app.include_router(uploads.router, prefix="/api/uploads", tags=["Uploads"])
app.include_router(files.router, prefix="/api/files", tags=["Files"])
app.include_router(echo.router, prefix="/api", tags=["JSON"])


@app.get("/health")
async def health_check():
    """Health check endpoint for load balancer."""
    return {"status": "healthy", "service": "http-toolkit"}


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "HTTP Toolkit",
        "version": "1.0.0",
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "toolkit.main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=settings.debug,
    )
