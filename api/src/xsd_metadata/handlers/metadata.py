#!/usr/bin/env python3

import logging

from fastapi import HTTPException, UploadFile

from ..core.config import metadata_config
from ..models.models import (
    MetadataNodeModel,
    MetadataPath,
    MetadataPathsResponse,
    MetadataTreeResponse,
    SchemaGraphSummary,
)
from ..services.domain.schema import (
    SchemaLoadError,
    build_metadata_tree,
    build_schema_graph,
    enumerate_paths,
)
from ..services.domain.schema.metadata import MetadataNode

logger = logging.getLogger(__name__)


async def _validate_and_read_files(
    files: list[UploadFile], file_paths: list[str] = None
) -> tuple[dict[str, bytes], str, list[str]]:
    """Validate and read uploaded files.

    Args:
        files: List of uploaded XSD files
        file_paths: List of relative file paths (preserves directory structure)

    Returns:
        Tuple of (file_contents keyed by relative path, primary path, warnings)
    """
    if not files:
        raise HTTPException(status_code=400, detail="No files provided")

    # If no paths provided, use just filenames
    if not file_paths:
        file_paths = [file.filename for file in files]

    if len(files) != len(file_paths):
        raise HTTPException(status_code=400, detail="Number of files and paths must match")

    warnings = []
    xsd_uploads = []
    for file, path in zip(files, file_paths, strict=False):
        if not file.filename or not file.filename.endswith('.xsd'):
            logger.warning(f"Ignoring non-XSD file: {file.filename}")
            warnings.append(f"Ignored non-XSD file: {file.filename}")
            continue
        xsd_uploads.append((file, path))

    if not xsd_uploads:
        raise HTTPException(status_code=400, detail="No XSD files found in upload")

    max_files = metadata_config.get_upload_limit("files")
    if len(xsd_uploads) > max_files:
        raise HTTPException(status_code=400, detail=f"Too many schema files (limit {max_files})")

    file_contents = {}
    total_size = 0
    for file, path in xsd_uploads:
        content = await file.read()
        file_contents[path] = content
        total_size += len(content)

    if total_size > metadata_config.get_upload_limit("bytes"):
        raise HTTPException(
            status_code=400,
            detail=f"Total file size exceeds {metadata_config.MAX_SCHEMA_SIZE_MB}MB limit"
        )

    # The first XSD file is the primary schema
    primary_path = xsd_uploads[0][1]
    return file_contents, primary_path, warnings


async def _build_tree(files: list[UploadFile], file_paths: list[str] = None):
    file_contents, primary_path, warnings = await _validate_and_read_files(files, file_paths)
    logger.info(f"Building metadata tree for {primary_path} ({len(file_contents)} file(s))")

    try:
        graph = build_schema_graph(file_contents, primary_path)
    except SchemaLoadError as e:
        logger.warning(f"Schema load failed for {primary_path}: {e}")
        raise HTTPException(status_code=400, detail=f"Invalid schema: {str(e)}") from e

    return graph, build_metadata_tree(graph), primary_path, warnings


async def handle_metadata_tree(
    files: list[UploadFile],
    file_paths: list[str] = None
) -> MetadataTreeResponse:
    """Build the metadata tree for an uploaded schema set.

    Args:
        files: Uploaded XSD files; the first one is the primary schema
        file_paths: List of relative file paths (preserves directory structure)
    """
    try:
        graph, root, primary_path, warnings = await _build_tree(files, file_paths)

        return MetadataTreeResponse(
            primary_file=primary_path,
            element_count=len(root.child_elements),
            graph=SchemaGraphSummary(**graph.summary()),
            tree=MetadataNodeModel.from_node(root),
            warnings=warnings,
        )

    except Exception as e:
        logger.error(f"Metadata tree build failed: {e}")
        if isinstance(e, HTTPException):
            raise
        raise HTTPException(status_code=500, detail=f"Metadata tree build failed: {str(e)}") from e


async def handle_metadata_paths(
    files: list[UploadFile],
    file_paths: list[str] = None
) -> MetadataPathsResponse:
    """List the leaf element paths of an uploaded schema set."""
    try:
        _, root, primary_path, _ = await _build_tree(files, file_paths)
        paths = _to_path_models(root)

        return MetadataPathsResponse(primary_file=primary_path, paths=paths, total=len(paths))

    except Exception as e:
        logger.error(f"Metadata path listing failed: {e}")
        if isinstance(e, HTTPException):
            raise
        raise HTTPException(status_code=500, detail=f"Metadata path listing failed: {str(e)}") from e


def _to_path_models(root: MetadataNode) -> list[MetadataPath]:
    return [
        MetadataPath(path=path, resolved_base_type=base_type)
        for path, base_type in enumerate_paths(root)
    ]
