#!/usr/bin/env python3
"""XPath CSV emitter.

Walks from one root declaration, keeping the names from the root to the
current element on a path stack, and writes one CSV row per reachable
typed element and per attribute of every visited complex type.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional, TextIO, Union

from ..builtins import type_code_name
from ..model import (
    AttributeDecl,
    ComplexType,
    ElementDecl,
    GroupRef,
    NodeKind,
    SchemaSet,
    SchemaType,
)
from .base import SchemaVisitor

logger = logging.getLogger(__name__)


def format_annotation(text: str) -> str:
    """Quote annotation text as one CSV field, doubling embedded quotes."""
    return '"' + text.replace('"', '""') + '"'


def _type_name(type_def: Optional[SchemaType]) -> str:
    code = type_code_name(type_def)
    if code:
        return code
    if type_def is not None and type_def.name:
        return type_def.name
    return ""


@dataclass
class XPathRecord:
    """One exported row.

    Attribute rows carry no optional flag and no extra columns.
    """
    node: str
    xpath: str
    annotation: str
    data_type: str
    optional: Optional[bool] = None
    extra: list[str] = field(default_factory=list)
    is_attribute: bool = False

    def to_fields(self) -> list[str]:
        fields = [self.node, self.xpath, format_annotation(self.annotation),
                  self.data_type]
        if self.is_attribute:
            return fields
        return fields + ["true" if self.optional else "false"] + self.extra

    def to_line(self) -> str:
        return ",".join(self.to_fields())


class XPathCsvVisitor(SchemaVisitor):
    """Writes the XPath of every scalar field reachable from a root.

    Args:
        schema_set: Compiled schema set
        writer: Text stream receiving one line per record
        nodes_to_skip: Element/attribute local names whose branch is dropped
        additional_attributes: Names of extra declaration attributes to
            append as columns on element rows
    """

    def __init__(
        self,
        schema_set: SchemaSet,
        writer: Optional[TextIO] = None,
        nodes_to_skip: Iterable[str] = (),
        additional_attributes: Iterable[str] = ()
    ):
        super().__init__()
        self.schema_set = schema_set
        self.writer = writer
        self.nodes_to_skip = set(nodes_to_skip)
        self.additional_attributes = list(additional_attributes)
        self.records: list[XPathRecord] = []
        self.path: list[str] = []

        self.register(NodeKind.GROUP_REF, self.visit_group_ref)

    def visit_root(self, root: Union[ElementDecl, SchemaType]) -> list[XPathRecord]:
        """Emit every record reachable from ``root`` with an empty path."""
        self.records = []
        self.path = []
        self.dispatch(root, self.path)
        logger.info(f"{len(self.records)} XPath records written")
        return self.records

    def _emit(self, record: XPathRecord) -> None:
        self.records.append(record)
        if self.writer is not None:
            self.writer.write(record.to_line() + "\n")

    def visit_element(self, element: ElementDecl, path: list[str]) -> None:
        occurrence = element
        if element.ref is not None:
            element = self.schema_set.get_element(element.ref)
        name = element.name

        if name in self.nodes_to_skip:
            return

        # Self-reference guard: a branch never contains the same name twice
        if name in path:
            logger.debug(f"Skipping recursive element {name} under /{'/'.join(path)}")
            return

        path.append(name)
        try:
            if element.schema_type is not None:
                self.dispatch(element.schema_type, path)
            elif element.element_type is not None:
                self._emit(XPathRecord(
                    node=f"{path[-2] if len(path) > 1 else ''}/{name}",
                    xpath="/" + "/".join(path),
                    annotation=" ".join(element.annotation),
                    data_type=_type_name(element.element_type),
                    optional=occurrence.min_occurs == 0,
                    extra=[element.extra_attributes.get(attr, "") for attr in self.additional_attributes],
                ))
                self.dispatch(element.element_type, path)
        finally:
            path.pop()

    def visit_attribute(self, attribute: AttributeDecl, path: list[str]) -> None:
        declaration = attribute
        if attribute.ref is not None:
            declaration = self.schema_set.get_attribute(attribute.ref)
        name = declaration.name

        if name in self.nodes_to_skip:
            return

        parent = path[-1] if path else ""
        self._emit(XPathRecord(
            node=f"{parent}@{name}",
            xpath="/" + "/".join(path) + f"@{name}",
            annotation=" ".join(declaration.annotation),
            data_type=attribute.type_text or declaration.type_text,
            is_attribute=True,
        ))

    def visit_complex_type(self, complex_type: ComplexType, path: list[str]) -> None:
        super().visit_complex_type(complex_type, path)
        for attribute in complex_type.attribute_uses:
            self.dispatch(attribute, path)

    def visit_group_ref(self, group_ref: GroupRef, path: list[str]) -> None:
        self.dispatch(self.schema_set.get_group(group_ref.ref).particle, path)
