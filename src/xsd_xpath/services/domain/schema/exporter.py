#!/usr/bin/env python3
"""XPath export driver.

Writes the CSV header, resolves (or automatically chooses) the root
declaration and runs the XPath emitter from it.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional, TextIO, Union

from .errors import RootNodeNotFoundError
from .model import ElementDecl, QName, SchemaSet, SchemaType
from .visitors import DependencyGraph, DependencyGraphVisitor, XPathCsvVisitor

logger = logging.getLogger(__name__)

CSV_HEADER = ["Node", "XPath", "Annotation", "Data Type", "Optional"]


@dataclass
class ExportResult:
    """Outcome of one XPath export."""
    root_name: str
    root: Union[ElementDecl, SchemaType]
    record_count: int
    candidate_roots: list[str] = field(default_factory=list)
    auto_selected: bool = False


def _distinct(values: Iterable[str]) -> list[str]:
    seen = set()
    result = []
    for value in values:
        if value not in seen:
            seen.add(value)
            result.append(value)
    return result


def csv_header(additional_attributes: Iterable[str] = ()) -> list[str]:
    """Header columns: the fixed ones, then each new additional attribute once."""
    return _distinct(CSV_HEADER + list(additional_attributes))


def find_root_node(schema_set: SchemaSet, root_name: str) -> Union[ElementDecl, SchemaType]:
    """Resolve a root name to a global type or element.

    A qualified name (``namespace:name`` or ``prefix:name``) is split at the
    last colon and global types win over global elements. An unqualified name
    is searched as a global element in every namespace declared by the
    loaded schemas.

    Raises:
        RootNodeNotFoundError: If nothing matches
    """
    if ':' in root_name:
        namespace, local = root_name.rsplit(':', 1)
        namespace = schema_set.prefixes().get(namespace, namespace)
        qname = QName(namespace, local)
        root = schema_set.find_type(qname) or schema_set.find_element(qname)
        if root is None:
            raise RootNodeNotFoundError(
                root_name,
                f"Unable to find a root node {root_name}. Please supply a properly qualified node name."
            )
        return root

    for namespace in schema_set.namespaces():
        root = schema_set.find_element(QName(namespace, root_name))
        if root is not None:
            logger.info(f"Found root node {root_name} in namespace {namespace}", extra={"root_node": root_name})
            return root

    raise RootNodeNotFoundError(
        root_name,
        f"Unable to find a root node {root_name}. Please supply a properly qualified node name."
    )


def export_root_candidates(schema_set: SchemaSet, graph: DependencyGraph) -> list[str]:
    """Root nodes of the graph that name a global element.

    Group names (present when groups are expanded) and local element names
    cannot be resolved by ``find_root_node`` and are left out.
    """
    global_names = {qname.name for qname in schema_set.global_elements}
    return [node for node in graph.root_nodes if node in global_names]


def select_default_root(schema_set: SchemaSet, graph: Optional[DependencyGraph] = None) -> str:
    """Name of the first global element nothing depends on.

    Raises:
        RootNodeNotFoundError: If the dependency graph has no such root node
    """
    if graph is None:
        graph = DependencyGraphVisitor(schema_set).build()

    root_nodes = export_root_candidates(schema_set, graph)
    if not root_nodes:
        raise RootNodeNotFoundError(None, "Unable to find a root node. Please supply one.")

    logger.info(f"Found the following root nodes: {','.join(root_nodes)}")
    logger.info(f"Automatically selecting: {root_nodes[0]} as the root node", extra={"root_node": root_nodes[0]})
    return root_nodes[0]


def extract_xpaths(
    schema_set: SchemaSet,
    writer: TextIO,
    nodes_to_skip: Iterable[str] = (),
    additional_attributes: Iterable[str] = (),
    root_name: Optional[str] = None,
    expand_groups: bool = False
) -> ExportResult:
    """Write the XPath CSV for a schema set.

    Args:
        schema_set: Compiled schema set
        writer: Text stream receiving the CSV lines
        nodes_to_skip: Element/attribute names whose branch is dropped
        additional_attributes: Extra declaration attributes to export as columns
        root_name: Root element or type; the first dependency-graph root
            node is used when omitted
        expand_groups: Traverse model groups as roots when building the
            dependency graph for automatic root selection

    Returns:
        ExportResult describing the root used and the number of records

    Raises:
        RootNodeNotFoundError: If the root cannot be resolved
        UnresolvedReferenceError: If the traversal meets a dangling reference
    """
    additional_attributes = _distinct(additional_attributes)
    header = csv_header(additional_attributes)

    candidate_roots = []
    auto_selected = False
    if not root_name:
        graph = DependencyGraphVisitor(schema_set, expand_groups=expand_groups).build()
        candidate_roots = export_root_candidates(schema_set, graph)
        root_name = select_default_root(schema_set, graph)
        auto_selected = True

    root = find_root_node(schema_set, root_name)

    writer.write(",".join(header) + "\n")
    visitor = XPathCsvVisitor(schema_set, writer, nodes_to_skip, additional_attributes)
    records = visitor.visit_root(root)

    return ExportResult(
        root_name=root_name,
        root=root,
        record_count=len(records),
        candidate_roots=candidate_roots,
        auto_selected=auto_selected,
    )
