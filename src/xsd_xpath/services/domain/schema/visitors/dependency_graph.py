#!/usr/bin/env python3
"""Structural dependency graph between named schema nodes.

Walks every top-level element of a schema set and records an edge whenever
one named node depends on another: element references, named types, type
derivation, substitution groups and model group use.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ..builtins import is_builtin
from ..edge import Edge
from ..model import (
    ComplexType,
    ContentDerivation,
    ContentModel,
    ContentType,
    ElementDecl,
    Group,
    GroupRef,
    NodeKind,
    SchemaDocument,
    SchemaSet,
)
from ..topological_sort import TopologicalEdgeSorter, dependency_map, distinct_nodes
from .base import SchemaVisitor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DependencyGraph:
    """Immutable result of one dependency traversal.

    Edges keep the order they were discovered in and are not deduplicated.
    """
    edges: tuple[Edge, ...]
    strict: bool = False

    @property
    def nodes(self) -> list:
        """Distinct node names appearing at either end of an edge."""
        return distinct_nodes(self.edges)

    @property
    def dependencies(self) -> dict:
        """Node name -> names of the nodes it depends on."""
        return dependency_map(self.edges)

    @property
    def root_nodes(self) -> list:
        """Nodes that nothing depends on, i.e. candidate export roots."""
        targets = {edge.target for edge in self.edges}
        return [node for node in self.nodes if node not in targets]

    @property
    def sorted_dependencies(self) -> list:
        """Nodes ordered from the roots out to the leaves."""
        return list(reversed(TopologicalEdgeSorter(strict=self.strict).sort(self.edges)))


class DependencyGraphVisitor(SchemaVisitor):
    """Collects the dependency edges of a compiled schema set.

    The collector threaded through the traversal is an ``Edge`` whose source
    is the name of the node currently being expanded. Element declarations
    are expanded at most once per ``build()``, tracked by object identity.

    Args:
        schema_set: Compiled schema set to walk
        expand_groups: Also traverse every global model group as a root,
            recording edges from the group to what its body uses
        strict_sort: Raise on dependency cycles when sorting the graph
    """

    def __init__(self, schema_set: SchemaSet, expand_groups: bool = False, strict_sort: bool = False):
        super().__init__()
        self.schema_set = schema_set
        self.expand_groups = expand_groups
        self.strict_sort = strict_sort
        self.edges: list[Edge] = []
        self._processed: set[int] = set()

        self.register(NodeKind.COMPLEX_CONTENT, self.visit_content_model)
        self.register(NodeKind.SIMPLE_CONTENT, self.visit_content_model)
        self.register(NodeKind.COMPLEX_CONTENT_EXTENSION, self.visit_derivation)
        self.register(NodeKind.COMPLEX_CONTENT_RESTRICTION, self.visit_derivation)
        self.register(NodeKind.SIMPLE_CONTENT_EXTENSION, self.visit_derivation)
        self.register(NodeKind.SIMPLE_CONTENT_RESTRICTION, self.visit_derivation)
        self.register(NodeKind.GROUP_REF, self.visit_group_ref)
        self.register(NodeKind.GROUP, self.visit_group)

    def reset(self) -> None:
        self.edges = []
        self._processed = set()

    def build(self) -> DependencyGraph:
        """Traverse every schema document and return the resulting graph.

        State from a previous build is discarded first, so reusing a visitor
        yields the same edges as a fresh one.
        """
        self.reset()
        for schema in self.schema_set.schemas:
            self.visit_schema(schema)

        logger.info(f"Dependency graph built with {len(self.edges)} edges")
        return DependencyGraph(edges=tuple(self.edges), strict=self.strict_sort)

    def visit_schema(self, schema: SchemaDocument) -> None:
        """Start one traversal per top-level element of a document."""
        logger.debug(f"Collecting dependencies from {schema.source}")
        if self.expand_groups:
            for group in schema.groups:
                self.dispatch(group, Edge())
        for element in schema.elements:
            self.dispatch(element, Edge())

    def _add_edge(self, source, target) -> None:
        edge = Edge(source, target)
        logger.debug(f"Edge found: {edge}")
        self.edges.append(edge)

    def visit_element(self, element: ElementDecl, collector: Edge) -> None:
        if id(element) in self._processed:
            return
        self._processed.add(id(element))

        if element.ref is not None:
            referenced = self.schema_set.get_element(element.ref)
            if collector.source:
                self._add_edge(collector.source, referenced.name)
            self.dispatch(referenced, Edge())
            return

        own = collector.clone(source=element.name)

        if element.substitution_group is not None:
            head = self.schema_set.get_element(element.substitution_group)
            self._add_edge(element.name, head.name)
            self.dispatch(head, Edge())

        if element.schema_type is not None:
            self.dispatch(element.schema_type, Edge(element.name))
            return

        element_type = element.element_type
        if element_type is None or is_builtin(element_type):
            self.dispatch(element_type, own)
        elif element_type.name:
            self._add_edge(own.source, element_type.name)
            self.dispatch(element_type, Edge(element_type.name))
        else:
            self.dispatch(element_type, own)

    def visit_attribute(self, attribute, collector: Edge) -> None:
        pass

    def visit_complex_type(self, complex_type: ComplexType, collector: Edge) -> None:
        if complex_type.base_type is not None and complex_type.name:
            if collector.source and collector.source != complex_type.name:
                self._add_edge(collector.source, complex_type.name)
            collector = Edge(complex_type.name)
            self.dispatch(complex_type.base_type, collector)

        # Declared content first so group references record an edge, then the
        # compiled content for what groups and bases contribute
        if complex_type.content_model is not None:
            self.dispatch(complex_type.content_model, collector)
        else:
            self.dispatch(complex_type.particle, collector)

        if complex_type.content_type in (ContentType.ELEMENT_ONLY, ContentType.MIXED):
            self.dispatch(complex_type.content_type_particle, collector)

    def visit_content_model(self, content_model: ContentModel, collector: Edge) -> None:
        self.visit_derivation(content_model.derivation, collector)

    def visit_derivation(self, derivation: ContentDerivation, collector: Edge) -> None:
        self.dispatch(derivation.particle, collector)

    def visit_group_ref(self, group_ref: GroupRef, collector: Edge) -> None:
        if collector.source:
            self._add_edge(collector.source, group_ref.ref.name)

    def visit_group(self, group: Group, collector: Optional[Edge]) -> None:
        self.dispatch(group.particle, Edge(group.name))


def build_dependency_graph(schema_set: SchemaSet, expand_groups: bool = False,
                           strict_sort: bool = False) -> DependencyGraph:
    """Convenience wrapper building the dependency graph of a schema set."""
    return DependencyGraphVisitor(schema_set, expand_groups, strict_sort).build()
