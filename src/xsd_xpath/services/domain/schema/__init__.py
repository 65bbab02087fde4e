"""
XSD Schema Processing Domain

Handles schema operations:
- Loading (primary XSD plus includes/imports, from disk or uploads)
- Dependency graph extraction and topological ordering
- XPath CSV export from a root element or type
"""

from .edge import Edge
from .errors import (
    CyclicDependencyError,
    RootNodeNotFoundError,
    SchemaError,
    SchemaLoadError,
    UnresolvedReferenceError,
    UnsupportedNodeKindError,
)
from .exporter import (
    CSV_HEADER,
    ExportResult,
    export_root_candidates,
    extract_xpaths,
    find_root_node,
    select_default_root,
)
from .loader import SchemaLoader, load_schema_file, load_schema_set
from .topological_sort import TopologicalEdgeSorter
from .visitors import DependencyGraph, DependencyGraphVisitor, XPathCsvVisitor, build_dependency_graph

__all__ = [
    # Loading
    "SchemaLoader",
    "load_schema_file",
    "load_schema_set",
    # Dependency graph
    "Edge",
    "DependencyGraph",
    "DependencyGraphVisitor",
    "TopologicalEdgeSorter",
    "build_dependency_graph",
    # XPath export
    "CSV_HEADER",
    "ExportResult",
    "export_root_candidates",
    "XPathCsvVisitor",
    "extract_xpaths",
    "find_root_node",
    "select_default_root",
    # Errors
    "SchemaError",
    "SchemaLoadError",
    "UnresolvedReferenceError",
    "RootNodeNotFoundError",
    "UnsupportedNodeKindError",
    "CyclicDependencyError",
]
