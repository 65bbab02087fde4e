"""
Domain Layer

This package contains the schema traversal logic. Domain services implement
the core algorithms and should not directly handle HTTP or command line I/O.

Domains:
- schema: XSD loading, dependency graph extraction and XPath CSV export
"""
