#!/usr/bin/env python3
"""Compiled XSD schema model.

The loader builds these objects once per run and both visitors consume them
read-only. Node classes use identity equality so that two references to the
same declaration are recognised as the same entity even when another
declaration happens to share its name.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, NamedTuple, Optional, Union

from .errors import UnresolvedReferenceError

# XSD namespace
XS_NS = "http://www.w3.org/2001/XMLSchema"
XS = f"{{{XS_NS}}}"


class QName(NamedTuple):
    """Namespace-qualified name of a global declaration."""
    namespace: str
    name: str

    def __str__(self) -> str:
        return f"{self.namespace}:{self.name}" if self.namespace else self.name


class NodeKind(str, Enum):
    """Kind of schema node, used as the dispatch key."""
    ELEMENT = "element"
    ATTRIBUTE = "attribute"
    SIMPLE_TYPE = "simple_type"
    COMPLEX_TYPE = "complex_type"
    SEQUENCE = "sequence"
    CHOICE = "choice"
    ANY = "any"
    # Extension kinds, only handled by visitors that register them
    COMPLEX_CONTENT = "complex_content"
    SIMPLE_CONTENT = "simple_content"
    COMPLEX_CONTENT_EXTENSION = "complex_content_extension"
    COMPLEX_CONTENT_RESTRICTION = "complex_content_restriction"
    SIMPLE_CONTENT_EXTENSION = "simple_content_extension"
    SIMPLE_CONTENT_RESTRICTION = "simple_content_restriction"
    GROUP = "group"
    GROUP_REF = "group_ref"


CORE_NODE_KINDS = frozenset({
    NodeKind.ELEMENT,
    NodeKind.ATTRIBUTE,
    NodeKind.SIMPLE_TYPE,
    NodeKind.COMPLEX_TYPE,
    NodeKind.SEQUENCE,
    NodeKind.CHOICE,
    NodeKind.ANY,
})

EXTENSION_NODE_KINDS = frozenset(NodeKind) - CORE_NODE_KINDS


class ContentType(str, Enum):
    """Compiled content type of a complex type."""
    EMPTY = "empty"
    TEXT_ONLY = "text_only"
    ELEMENT_ONLY = "element_only"
    MIXED = "mixed"


@dataclass(eq=False)
class SimpleType:
    """xs:simpleType definition (global, inline or built-in)."""
    name: Optional[str] = None
    namespace: str = ""
    variety: str = "atomic"                 # atomic, list or union
    base_type_name: Optional[QName] = None  # restriction base
    base_type: Optional['SimpleType'] = None
    item_type_name: Optional[QName] = None  # xs:list itemType
    type_code: Optional[str] = None         # Only set on built-ins
    builtin: bool = False
    annotation: list[str] = field(default_factory=list)

    kind = NodeKind.SIMPLE_TYPE

    @property
    def qname(self) -> Optional[QName]:
        return QName(self.namespace, self.name) if self.name else None


@dataclass(eq=False)
class AttributeDecl:
    """xs:attribute declaration or reference."""
    name: Optional[str] = None
    namespace: str = ""
    ref: Optional[QName] = None
    type_name: Optional[QName] = None
    type_text: str = ""                     # Type as written, e.g. "xs:string"
    schema_type: Optional[SimpleType] = None
    attribute_type: Optional[SimpleType] = None
    use: str = "optional"
    is_global: bool = False
    annotation: list[str] = field(default_factory=list)

    kind = NodeKind.ATTRIBUTE


@dataclass(eq=False)
class Wildcard:
    """xs:any wildcard."""
    namespace: str = "##any"
    process_contents: str = "strict"
    min_occurs: int = 1
    max_occurs: Optional[int] = 1

    kind = NodeKind.ANY


@dataclass(eq=False)
class Sequence:
    """xs:sequence (or xs:all, marked through ``compositor``)."""
    items: list = field(default_factory=list)
    min_occurs: int = 1
    max_occurs: Optional[int] = 1
    compositor: str = "sequence"

    kind = NodeKind.SEQUENCE


@dataclass(eq=False)
class Choice:
    """xs:choice compositor."""
    items: list = field(default_factory=list)
    min_occurs: int = 1
    max_occurs: Optional[int] = 1

    kind = NodeKind.CHOICE


@dataclass(eq=False)
class GroupRef:
    """Reference to a named model group."""
    ref: QName
    min_occurs: int = 1
    max_occurs: Optional[int] = 1

    kind = NodeKind.GROUP_REF


@dataclass(eq=False)
class Group:
    """Named model group (xs:group name="...")."""
    name: str
    namespace: str = ""
    particle: Optional[Union[Sequence, Choice]] = None
    annotation: list[str] = field(default_factory=list)

    kind = NodeKind.GROUP


@dataclass(eq=False)
class ContentDerivation:
    """xs:extension or xs:restriction inside simple/complex content."""
    kind: NodeKind
    base_type_name: Optional[QName] = None
    particle: Optional[Union[Sequence, Choice, GroupRef]] = None
    attributes: list[AttributeDecl] = field(default_factory=list)
    attribute_group_refs: list[QName] = field(default_factory=list)

    @property
    def is_extension(self) -> bool:
        return self.kind in (NodeKind.COMPLEX_CONTENT_EXTENSION, NodeKind.SIMPLE_CONTENT_EXTENSION)


@dataclass(eq=False)
class ContentModel:
    """xs:complexContent or xs:simpleContent wrapper."""
    kind: NodeKind
    derivation: ContentDerivation
    mixed: bool = False


@dataclass(eq=False)
class ComplexType:
    """xs:complexType definition (global, inline or the built-in anyType)."""
    name: Optional[str] = None
    namespace: str = ""
    content_model: Optional[ContentModel] = None
    particle: Optional[Union[Sequence, Choice, GroupRef]] = None
    attributes: list[AttributeDecl] = field(default_factory=list)
    attribute_group_refs: list[QName] = field(default_factory=list)
    mixed: bool = False
    builtin: bool = False
    annotation: list[str] = field(default_factory=list)
    # Filled in by compilation
    base_type: Optional[Union['ComplexType', SimpleType]] = None
    content_type: ContentType = ContentType.EMPTY
    content_type_particle: Optional[Union[Sequence, Choice]] = None
    attribute_uses: list[AttributeDecl] = field(default_factory=list)

    kind = NodeKind.COMPLEX_TYPE

    @property
    def qname(self) -> Optional[QName]:
        return QName(self.namespace, self.name) if self.name else None

    @property
    def base_type_name(self) -> Optional[QName]:
        if self.content_model is not None:
            return self.content_model.derivation.base_type_name
        return None

    @property
    def derivation(self) -> Optional[str]:
        """'extension', 'restriction' or None when the type derives from anyType implicitly."""
        if self.content_model is None:
            return None
        return "extension" if self.content_model.derivation.is_extension else "restriction"


SchemaType = Union[SimpleType, ComplexType]


@dataclass(eq=False)
class ElementDecl:
    """xs:element declaration or reference particle."""
    name: Optional[str] = None
    namespace: str = ""
    ref: Optional[QName] = None
    type_name: Optional[QName] = None
    schema_type: Optional[SchemaType] = None    # Inline anonymous type
    substitution_group: Optional[QName] = None
    min_occurs: int = 1
    max_occurs: Optional[int] = 1
    is_global: bool = False
    annotation: list[str] = field(default_factory=list)
    extra_attributes: dict[str, str] = field(default_factory=dict)
    # Filled in by compilation
    element_type: Optional[SchemaType] = None

    kind = NodeKind.ELEMENT

    @property
    def qname(self) -> Optional[QName]:
        return QName(self.namespace, self.name) if self.name else None


@dataclass(eq=False)
class AttributeGroup:
    """Named attribute group."""
    name: str
    namespace: str = ""
    attributes: list[AttributeDecl] = field(default_factory=list)
    attribute_group_refs: list[QName] = field(default_factory=list)


@dataclass
class SchemaDocument:
    """One parsed XSD file."""
    source: str
    target_namespace: str = ""
    namespaces: dict[str, str] = field(default_factory=dict)   # prefix -> uri
    elements: list[ElementDecl] = field(default_factory=list)  # Top-level, document order
    types: list[SchemaType] = field(default_factory=list)
    groups: list[Group] = field(default_factory=list)
    attributes: list[AttributeDecl] = field(default_factory=list)
    attribute_groups: list[AttributeGroup] = field(default_factory=list)


@dataclass
class SchemaSet:
    """Compiled set of schema documents addressable by qualified name."""
    schemas: list[SchemaDocument] = field(default_factory=list)
    global_elements: dict[QName, ElementDecl] = field(default_factory=dict)
    global_types: dict[QName, SchemaType] = field(default_factory=dict)
    groups: dict[QName, Group] = field(default_factory=dict)
    global_attributes: dict[QName, AttributeDecl] = field(default_factory=dict)
    attribute_groups: dict[QName, AttributeGroup] = field(default_factory=dict)

    def add_schema(self, schema: SchemaDocument) -> None:
        """Register a document and index its global declarations."""
        self.schemas.append(schema)
        ns = schema.target_namespace
        for elem in schema.elements:
            self.global_elements[QName(ns, elem.name)] = elem
        for type_def in schema.types:
            self.global_types[QName(ns, type_def.name)] = type_def
        for group in schema.groups:
            self.groups[QName(ns, group.name)] = group
        for attr in schema.attributes:
            self.global_attributes[QName(ns, attr.name)] = attr
        for attr_group in schema.attribute_groups:
            self.attribute_groups[QName(ns, attr_group.name)] = attr_group

    def find_element(self, qname: QName) -> Optional[ElementDecl]:
        return self.global_elements.get(qname)

    def find_type(self, qname: QName) -> Optional[SchemaType]:
        if qname.namespace == XS_NS:
            from .builtins import get_builtin_type
            return get_builtin_type(qname.name)
        return self.global_types.get(qname)

    def get_element(self, qname: QName) -> ElementDecl:
        elem = self.find_element(qname)
        if elem is None:
            raise UnresolvedReferenceError("element", qname)
        return elem

    def get_type(self, qname: QName) -> SchemaType:
        type_def = self.find_type(qname)
        if type_def is None:
            raise UnresolvedReferenceError("type", qname)
        return type_def

    def get_group(self, qname: QName) -> Group:
        group = self.groups.get(qname)
        if group is None:
            raise UnresolvedReferenceError("group", qname)
        return group

    def get_attribute(self, qname: QName) -> AttributeDecl:
        attr = self.global_attributes.get(qname)
        if attr is None:
            raise UnresolvedReferenceError("attribute", qname)
        return attr

    def get_attribute_group(self, qname: QName) -> AttributeGroup:
        attr_group = self.attribute_groups.get(qname)
        if attr_group is None:
            raise UnresolvedReferenceError("attribute group", qname)
        return attr_group

    def namespaces(self) -> Iterator[str]:
        """Every namespace URI declared in any loaded document, without repeats."""
        seen = set()
        for schema in self.schemas:
            for uri in [schema.target_namespace, *schema.namespaces.values()]:
                if uri not in seen:
                    seen.add(uri)
                    yield uri

    def prefixes(self) -> dict[str, str]:
        """Prefix -> namespace map merged across documents (first declaration wins)."""
        merged: dict[str, str] = {}
        for schema in self.schemas:
            for prefix, uri in schema.namespaces.items():
                if prefix:
                    merged.setdefault(prefix, uri)
        return merged
