#!/usr/bin/env python3
"""Exceptions raised while loading and traversing XSD schemas.

None of these are retried or recovered inside the traversal code. The
caller (CLI or HTTP handler) decides whether to abort or skip.
"""

from typing import Optional


class SchemaError(Exception):
    """Base class for schema loading and traversal failures."""


class SchemaLoadError(SchemaError):
    """A schema file could not be read, parsed or compiled."""

    def __init__(self, message: str, source: Optional[str] = None):
        self.source = source
        if source:
            message = f"{source}: {message}"
        super().__init__(message)


class UnresolvedReferenceError(SchemaError):
    """A name lookup against the schema set yielded nothing."""

    def __init__(self, kind: str, qname):
        self.kind = kind
        self.qname = qname
        super().__init__(f"Unable to resolve {kind} '{qname}'")


class RootNodeNotFoundError(UnresolvedReferenceError):
    """The requested (or default) export root does not exist."""

    def __init__(self, qname, message: Optional[str] = None):
        super().__init__("root node", qname)
        if message:
            self.args = (message,)


class UnsupportedNodeKindError(SchemaError):
    """Dispatch reached a node kind with no registered handler."""

    def __init__(self, kind):
        self.kind = kind
        super().__init__(f"No handler registered for node kind '{kind}'")


class CyclicDependencyError(SchemaError):
    """Strict topological sorting found a cycle."""

    def __init__(self, node):
        self.node = node
        super().__init__(f"Dependency cycle detected at '{node}'")
