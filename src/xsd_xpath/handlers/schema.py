#!/usr/bin/env python3

import io
import logging

from fastapi import HTTPException, UploadFile

from ..core.config import export_config
from ..models.models import DependencyGraphResponse, EdgeModel, LoadedSchema, XPathExportResponse
from ..services.domain.schema import (
    CyclicDependencyError,
    DependencyGraphVisitor,
    SchemaLoader,
    SchemaLoadError,
    UnresolvedReferenceError,
    extract_xpaths,
)

logger = logging.getLogger(__name__)


async def _validate_and_read_files(
    files: list[UploadFile],
    file_paths: list[str] = None
) -> dict[str, bytes]:
    """Validate and read uploaded files.

    Args:
        files: List of uploaded XSD files
        file_paths: List of relative file paths (preserves directory structure)

    Returns:
        Dictionary mapping relative path to XSD content
    """
    if not files:
        raise HTTPException(status_code=400, detail="No files provided")

    max_files = export_config.MAX_SCHEMA_FILES
    if len(files) > max_files:
        raise HTTPException(
            status_code=400,
            detail=f"Too many files: {len(files)} uploaded, maximum is {max_files}"
        )

    # If no paths provided, use just filenames
    if not file_paths:
        file_paths = [file.filename for file in files]

    if len(files) != len(file_paths):
        raise HTTPException(status_code=400, detail="Number of files and paths must match")

    xsd_files = {}
    total_size = 0
    non_xsd_count = 0

    for file, path in zip(files, file_paths):
        if not file.filename.endswith('.xsd'):
            logger.warning(f"Ignoring non-XSD file: {file.filename}")
            non_xsd_count += 1
            continue

        content = await file.read()
        xsd_files[path] = content
        total_size += len(content)

    if non_xsd_count > 0:
        logger.info(f"Filtered out {non_xsd_count} non-XSD file(s), processing {len(xsd_files)} XSD file(s)")

    if not xsd_files:
        raise HTTPException(status_code=400, detail="No XSD files found in upload")

    max_file_size_bytes = export_config.MAX_SCHEMA_FILE_SIZE_MB * 1024 * 1024
    if total_size > max_file_size_bytes:
        raise HTTPException(
            status_code=400,
            detail=f"Total file size exceeds {export_config.MAX_SCHEMA_FILE_SIZE_MB}MB limit"
        )

    return xsd_files


def _load_uploaded_schemas(xsd_files: dict[str, bytes], primary_file: str = None) -> tuple[SchemaLoader, str]:
    """Load the uploaded schema set, translating schema errors into HTTP errors.

    Returns:
        Tuple of (loader holding the compiled schema set, primary file path)
    """
    if not primary_file:
        # Use the first XSD file as the primary schema
        primary_file = next(iter(xsd_files))

    loader = SchemaLoader(xsd_files)
    try:
        loader.load(primary_file)
    except SchemaLoadError as e:
        logger.error(f"Schema load failed: {e}", extra={"schema_file": primary_file})
        raise HTTPException(status_code=400, detail=str(e)) from e
    except UnresolvedReferenceError as e:
        logger.error(f"Schema reference unresolved: {e}", extra={"schema_file": primary_file})
        raise HTTPException(status_code=422, detail=str(e)) from e

    return loader, primary_file


async def handle_dependency_graph(
    files: list[UploadFile],
    primary_file: str = None,
    file_paths: list[str] = None,
    expand_groups: bool = None
) -> DependencyGraphResponse:
    """Build the dependency graph of an uploaded schema set

    Args:
        files: Uploaded XSD files (primary schema and everything it references)
        primary_file: Relative path of the primary schema, defaults to the first XSD
        file_paths: List of relative file paths (preserves directory structure)
        expand_groups: Traverse model groups as roots, defaults to configuration
    """
    xsd_files = await _validate_and_read_files(files, file_paths)
    loader, primary_file = _load_uploaded_schemas(xsd_files, primary_file)

    if expand_groups is None:
        expand_groups = export_config.EXPAND_GROUPS

    try:
        graph = DependencyGraphVisitor(
            loader.schema_set,
            expand_groups=expand_groups,
            strict_sort=export_config.STRICT_SORT
        ).build()
        sorted_dependencies = graph.sorted_dependencies
    except UnresolvedReferenceError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    except CyclicDependencyError as e:
        logger.error(f"Dependency graph for {primary_file} is cyclic: {e}", extra={"schema_file": primary_file})
        raise HTTPException(status_code=422, detail=str(e)) from e

    logger.info(f"Dependency graph for {primary_file}: {len(graph.edges)} edges, {len(graph.root_nodes)} root nodes")

    return DependencyGraphResponse(
        primary_file=primary_file,
        schemas=[
            LoadedSchema(file=name, target_namespace=document.target_namespace)
            for name, document in loader.loaded_schemas.items()
        ],
        edges=[EdgeModel(source=edge.source, target=edge.target) for edge in graph.edges],
        nodes=graph.nodes,
        root_nodes=graph.root_nodes,
        sorted_dependencies=sorted_dependencies,
        dependencies=graph.dependencies,
    )


async def handle_xpath_export(
    files: list[UploadFile],
    primary_file: str = None,
    file_paths: list[str] = None,
    root: str = None,
    ignore: list[str] = None,
    add: list[str] = None
) -> XPathExportResponse:
    """Export the XPath CSV of an uploaded schema set

    Args:
        files: Uploaded XSD files (primary schema and everything it references)
        primary_file: Relative path of the primary schema, defaults to the first XSD
        file_paths: List of relative file paths (preserves directory structure)
        root: Root element or type; selected from the dependency graph when omitted
        ignore: Node names to skip, defaults to configuration
        add: Additional declaration attributes to export, defaults to configuration
    """
    xsd_files = await _validate_and_read_files(files, file_paths)
    loader, primary_file = _load_uploaded_schemas(xsd_files, primary_file)

    output = io.StringIO()
    try:
        result = extract_xpaths(
            loader.schema_set,
            output,
            nodes_to_skip=ignore if ignore is not None else export_config.SKIP_NODES,
            additional_attributes=add if add is not None else export_config.ADDITIONAL_ATTRIBUTES,
            root_name=root,
            expand_groups=export_config.EXPAND_GROUPS,
        )
    except UnresolvedReferenceError as e:
        logger.error(f"XPath export failed: {e}", extra={"root_node": root})
        raise HTTPException(status_code=422, detail=str(e)) from e

    return XPathExportResponse(
        primary_file=primary_file,
        root_node=result.root_name,
        auto_selected=result.auto_selected,
        candidate_roots=result.candidate_roots,
        record_count=result.record_count,
        csv=output.getvalue(),
    )
