#!/usr/bin/env python3

import json
import logging
import time
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, File, Form, UploadFile
from fastapi.middleware.cors import CORSMiddleware

from .core.auth import verify_token
from .core.config import metadata_config
from .core.logging import setup_logging
from .models.models import MetadataPathsResponse, MetadataTreeResponse

logger = logging.getLogger(__name__)

# Application start time for uptime calculation
_app_start_time = time.time()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    # Startup
    setup_logging()
    logger.info("Starting XSD metadata service")
    logger.info(
        f"Upload limits: {metadata_config.MAX_SCHEMA_FILES} files, "
        f"{metadata_config.MAX_SCHEMA_SIZE_MB}MB"
    )

    yield

    # Shutdown
    logger.info("Shutting down XSD metadata service")


app = FastAPI(
    title="XSD Metadata API",
    description="API for resolving XML Schema sets into metadata trees",
    version=metadata_config.APP_VERSION,
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=metadata_config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Add version header middleware
@app.middleware("http")
async def add_version_header(request, call_next):
    """Add version information to response headers"""
    response = await call_next(request)
    response.headers["X-API-Version"] = metadata_config.APP_VERSION
    return response


@app.get("/healthz")
async def health_check():
    """Liveness probe - checks if application is alive and can serve requests"""
    current_time = time.time()
    return {
        "status": "healthy",
        "timestamp": current_time,
        "uptime": current_time - _app_start_time,
        "api_version": metadata_config.APP_VERSION,
    }


def _parse_file_paths(file_paths: str) -> list[str]:
    try:
        paths = json.loads(file_paths)
    except json.JSONDecodeError:
        logger.warning("Ignoring malformed file_paths form field")
        return []
    return paths if isinstance(paths, list) else []


# Metadata Routes

@app.post("/api/schema/metadata", response_model=MetadataTreeResponse)
async def build_metadata(
    files: list[UploadFile] = File(...),
    file_paths: str = Form("[]"),
    token: str = Depends(verify_token)
):
    """Resolve an uploaded schema set into its metadata tree.

    The first XSD file is the primary schema; the remaining files must cover
    every include/import it references.

    Args:
        files: XSD schema files
        file_paths: JSON array of relative file paths (preserves directory structure)
        token: Authentication token
    """
    from .handlers.metadata import handle_metadata_tree

    return await handle_metadata_tree(files, _parse_file_paths(file_paths))


@app.post("/api/schema/metadata/paths", response_model=MetadataPathsResponse)
async def list_metadata_paths(
    files: list[UploadFile] = File(...),
    file_paths: str = Form("[]"),
    token: str = Depends(verify_token)
):
    """List leaf element paths and their resolved base types for an uploaded schema set."""
    from .handlers.metadata import handle_metadata_paths

    return await handle_metadata_paths(files, _parse_file_paths(file_paths))


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
