#!/usr/bin/env python3

from pydantic import BaseModel

# Pydantic Models


class EdgeModel(BaseModel):
    source: str | None = None
    target: str | None = None


class LoadedSchema(BaseModel):
    file: str
    target_namespace: str


class DependencyGraphResponse(BaseModel):
    """Dependency graph of an uploaded schema set."""

    primary_file: str
    schemas: list[LoadedSchema] = []
    edges: list[EdgeModel] = []
    nodes: list[str] = []
    root_nodes: list[str] = []  # Candidate export roots (nothing depends on them)
    sorted_dependencies: list[str] = []  # Roots first, leaves last
    dependencies: dict[str, list[str]] = {}


class XPathExportResponse(BaseModel):
    """XPath CSV export of an uploaded schema set."""

    primary_file: str
    root_node: str
    auto_selected: bool = False
    candidate_roots: list[str] = []
    record_count: int
    csv: str
