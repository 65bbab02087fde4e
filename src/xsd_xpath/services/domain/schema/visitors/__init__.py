"""Schema traversals sharing the kind-keyed dispatch core."""

from .base import SchemaVisitor
from .dependency_graph import DependencyGraph, DependencyGraphVisitor, build_dependency_graph
from .xpath_csv import XPathCsvVisitor, XPathRecord

__all__ = [
    "SchemaVisitor",
    "DependencyGraph",
    "DependencyGraphVisitor",
    "build_dependency_graph",
    "XPathCsvVisitor",
    "XPathRecord",
]
