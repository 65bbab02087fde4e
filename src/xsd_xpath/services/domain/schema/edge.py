#!/usr/bin/env python3
"""Directed relation between two named schema nodes."""

from dataclasses import dataclass, replace
from typing import Hashable, Optional


@dataclass(frozen=True, eq=False)
class Edge:
    """Ordered (source, target) pair with value equality.

    Edges double as the traversal collector of the dependency visitor: an
    edge with only a source is the partially-filled edge handed down to a
    node's children, which fill in the target when a dependency is found.
    """
    source: Optional[Hashable] = None
    target: Optional[Hashable] = None

    def _key(self) -> tuple:
        # None and "" are the same empty end
        return (self.source or None, self.target or None)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Edge):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def clone(self, **changes) -> 'Edge':
        """Copy of this edge, optionally with ``source`` and/or ``target`` replaced."""
        return replace(self, **changes)

    @property
    def is_empty(self) -> bool:
        return self._key() == (None, None)

    def __str__(self) -> str:
        return f"Source={self.source}, Target={self.target}"
