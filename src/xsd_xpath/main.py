#!/usr/bin/env python3

import json
import logging
import os
import time
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, File, Form, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

from .core.auth import verify_token
from .core.config import export_config
from .core.logging import setup_logging
from .models.models import DependencyGraphResponse

logger = logging.getLogger(__name__)

# Application start time for uptime calculation
_app_start_time = time.time()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    setup_logging(export_config.LOG_LEVEL)
    logger.info("Starting XSD XPath export service")
    yield
    logger.info("Shutting down XSD XPath export service")


app = FastAPI(
    title="XSD XPath Export API",
    description="API for extracting dependency graphs and XPath listings from XSD schemas",
    version=os.getenv("APP_VERSION", "unknown"),
    lifespan=lifespan
)

# CORS middleware
allowed_origins = os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Add version header middleware
@app.middleware("http")
async def add_version_header(request, call_next):
    """Add version information to response headers"""
    response = await call_next(request)
    response.headers["X-API-Version"] = os.getenv("APP_VERSION", "unknown")
    return response


@app.get("/healthz")
async def health_check():
    """Liveness probe - checks if application is alive and can serve requests"""
    current_time = time.time()
    return {
        "status": "healthy",
        "timestamp": current_time,
        "uptime": current_time - _app_start_time,
        "api_version": os.getenv("APP_VERSION", "unknown"),
    }


def _parse_json_list(value: str, field: str) -> list[str] | None:
    """Parse an optional JSON array form field"""
    if not value:
        return None
    try:
        parsed = json.loads(value)
    except json.JSONDecodeError as e:
        raise HTTPException(status_code=400, detail=f"{field} must be a JSON array") from e
    if not isinstance(parsed, list):
        raise HTTPException(status_code=400, detail=f"{field} must be a JSON array")
    return [str(item) for item in parsed]


# Schema Routes

@app.post("/api/schema/dependencies", response_model=DependencyGraphResponse)
async def schema_dependencies(
    files: list[UploadFile] = File(...),
    primary_file: str = Form(None),
    file_paths: str = Form("[]"),
    expand_groups: bool = Form(None),
    token: str = Depends(verify_token)
):
    """Build the dependency graph of an uploaded schema set.

    Args:
        files: XSD schema files (must include all referenced schemas)
        primary_file: Relative path of the primary schema
        file_paths: JSON array of relative file paths (preserves directory structure)
        expand_groups: Traverse model groups as dependency roots
        token: Authentication token
    """
    from .handlers.schema import handle_dependency_graph

    paths = _parse_json_list(file_paths, "file_paths")
    return await handle_dependency_graph(files, primary_file, paths, expand_groups)


@app.post("/api/schema/xpaths")
async def schema_xpaths(
    files: list[UploadFile] = File(...),
    primary_file: str = Form(None),
    file_paths: str = Form("[]"),
    root: str = Form(None),
    ignore: str = Form(None),
    add: str = Form(None),
    token: str = Depends(verify_token)
):
    """Export the XPath CSV of an uploaded schema set.

    Args:
        files: XSD schema files (must include all referenced schemas)
        primary_file: Relative path of the primary schema
        file_paths: JSON array of relative file paths (preserves directory structure)
        root: Root element or type, automatically selected when omitted
        ignore: JSON array of node names to skip
        add: JSON array of additional declaration attributes to export
        token: Authentication token
    """
    from .handlers.schema import handle_xpath_export

    paths = _parse_json_list(file_paths, "file_paths")
    result = await handle_xpath_export(
        files,
        primary_file,
        paths,
        root,
        _parse_json_list(ignore, "ignore"),
        _parse_json_list(add, "add"),
    )

    filename = os.path.splitext(os.path.basename(result.primary_file))[0] + ".csv"
    return Response(
        content=result.csv,
        media_type="text/csv",
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
            "X-Root-Node": result.root_node,
        },
    )
