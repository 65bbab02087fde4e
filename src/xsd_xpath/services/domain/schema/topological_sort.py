#!/usr/bin/env python3
"""Depth-first topological ordering over an edge list."""

import logging
from typing import Hashable, Iterable

from .edge import Edge
from .errors import CyclicDependencyError

logger = logging.getLogger(__name__)

_EXHAUSTED = object()


def distinct_nodes(edges: Iterable[Edge]) -> list:
    """Distinct node names: every source in edge order, then every target."""
    edges = list(edges)
    seen = set()
    nodes = []
    for node in [e.source for e in edges] + [e.target for e in edges]:
        if node not in seen:
            seen.add(node)
            nodes.append(node)
    return nodes


def dependency_map(edges: Iterable[Edge]) -> dict[Hashable, list]:
    """Map each node to the targets of the edges it is the source of."""
    edges = list(edges)
    dependencies: dict[Hashable, list] = {node: [] for node in distinct_nodes(edges)}
    for edge in edges:
        dependencies[edge.source].append(edge.target)
    return dependencies


class TopologicalEdgeSorter:
    """Orders the nodes of an edge list so that dependencies come first.

    The sorter knows nothing about schemas; any hashable node values work.
    Cycles are broken silently at the first already-visited node unless
    ``strict`` is set, in which case ``CyclicDependencyError`` is raised.
    """

    def __init__(self, strict: bool = False):
        self.strict = strict

    def sort(self, edges: Iterable[Edge]) -> list:
        """Return the nodes leaves first, roots last.

        Reverse the result for a root-first ordering.
        """
        edges = list(edges)
        dependencies = dependency_map(edges)

        visited = set()
        sorted_nodes = []

        for node in distinct_nodes(edges):
            self._visit(node, visited, sorted_nodes, dependencies)

        return sorted_nodes

    def _visit(self, node, visited: set, sorted_nodes: list, dependencies: dict) -> None:
        """Depth-first expansion of one node.

        Uses an explicit stack of (node, pending dependencies) frames so
        that deep schemas do not hit the interpreter recursion limit. The
        output order matches the plain recursive formulation.
        """
        if node in visited:
            return

        visited.add(node)
        on_path = {node}
        stack = [(node, iter(dependencies.get(node, [])))]

        while stack:
            current, pending = stack[-1]
            dependency = next(pending, _EXHAUSTED)

            if dependency is _EXHAUSTED:
                stack.pop()
                on_path.discard(current)
                sorted_nodes.append(current)
                continue

            if dependency in visited:
                if dependency in on_path:
                    if self.strict:
                        raise CyclicDependencyError(dependency)
                    logger.debug(f"Cycle through '{dependency}' broken at '{current}'")
                continue

            visited.add(dependency)
            on_path.add(dependency)
            stack.append((dependency, iter(dependencies.get(dependency, []))))
