#!/usr/bin/env python3
"""XSD schema loader and compiler.

Reads a primary XSD together with every schema it includes or imports and
builds a cross-linked ``SchemaSet``. Files come either from disk or from an
in-memory upload map (relative path -> bytes), mirroring how schema uploads
arrive through the API.
"""

import logging
import posixpath
import re
from pathlib import Path
from typing import Optional, Union

# Use defusedxml for secure XML parsing (prevents XXE attacks)
import defusedxml.ElementTree as ET
from xml.etree.ElementTree import Element

from .builtins import ANY_TYPE, get_builtin_type
from .errors import SchemaLoadError, UnresolvedReferenceError
from .model import (
    XS,
    XS_NS,
    AttributeDecl,
    AttributeGroup,
    Choice,
    ComplexType,
    ContentDerivation,
    ContentModel,
    ContentType,
    ElementDecl,
    Group,
    GroupRef,
    NodeKind,
    QName,
    SchemaDocument,
    SchemaSet,
    Sequence,
    SimpleType,
    Wildcard,
)

logger = logging.getLogger(__name__)

XML_NS = "http://www.w3.org/XML/1998/namespace"

_DERIVATION_KINDS = {
    (f'{XS}complexContent', f'{XS}extension'): NodeKind.COMPLEX_CONTENT_EXTENSION,
    (f'{XS}complexContent', f'{XS}restriction'): NodeKind.COMPLEX_CONTENT_RESTRICTION,
    (f'{XS}simpleContent', f'{XS}extension'): NodeKind.SIMPLE_CONTENT_EXTENSION,
    (f'{XS}simpleContent', f'{XS}restriction'): NodeKind.SIMPLE_CONTENT_RESTRICTION,
}

_SCHEMA_DIRECTIVES = (f'{XS}include', f'{XS}import', f'{XS}redefine')


def _extract_namespace_map_from_xml(xml_content: bytes) -> dict[str, str]:
    """Extract namespace prefix mappings from raw XML content.

    ElementTree doesn't preserve xmlns attributes, so we parse them from raw XML.
    """
    namespaces = {'xml': XML_NS}

    xml_str = xml_content.decode('utf-8', errors='replace')

    # Match xmlns:prefix="uri" or xmlns="uri"
    xmlns_pattern = r'xmlns(?::([a-zA-Z0-9_.-]+))?\s*=\s*["\']([^"\']*)["\']'
    for prefix, uri in re.findall(xmlns_pattern, xml_str):
        # First declaration wins, matching the schema root's own declarations
        namespaces.setdefault(prefix or '', uri)

    return namespaces


def _parse_occurs(elem: Element) -> tuple[int, Optional[int]]:
    """Return (minOccurs, maxOccurs); maxOccurs is None when unbounded."""
    min_occurs = int(elem.attrib.get('minOccurs', '1'))
    max_attr = elem.attrib.get('maxOccurs', '1')
    max_occurs = None if max_attr == 'unbounded' else int(max_attr)
    return min_occurs, max_occurs


def _parse_annotation(elem: Element) -> list[str]:
    """Collect documentation and appinfo text fragments in document order."""
    fragments = []
    for annotation in elem.findall(f'./{XS}annotation'):
        for item in annotation:
            if item.tag not in (f'{XS}documentation', f'{XS}appinfo'):
                continue
            text = ''.join(item.itertext()).strip()
            if text:
                fragments.append(text)
    return fragments


class _Components:
    """Every declaration created while parsing, including local and inline ones."""

    def __init__(self):
        self.elements: list[ElementDecl] = []
        self.attributes: list[AttributeDecl] = []
        self.complex_types: list[ComplexType] = []
        self.simple_types: list[SimpleType] = []


class _DocumentParser:
    """Parses one xs:schema root into a SchemaDocument."""

    def __init__(
        self,
        source: str,
        root: Element,
        namespaces: dict[str, str],
        target_namespace: str,
        components: _Components,
        chameleon: bool = False
    ):
        self.source = source
        self.root = root
        self.namespaces = namespaces
        self.target_namespace = target_namespace
        self.components = components
        self.chameleon = chameleon
        self.element_form_default = root.attrib.get('elementFormDefault', 'unqualified')
        self.attribute_form_default = root.attrib.get('attributeFormDefault', 'unqualified')
        self.directives: list[tuple[str, Optional[str], Optional[str]]] = []
        self._uri_prefixes = {uri: prefix for prefix, uri in reversed(list(namespaces.items())) if prefix}

    def _qname(self, value: Optional[str]) -> Optional[QName]:
        """Resolve a prefix:localName attribute value against the namespace map."""
        if not value:
            return None

        value = value.strip()
        if ':' in value:
            prefix, local = value.split(':', 1)
            namespace = self.namespaces.get(prefix)
            if namespace is None:
                raise SchemaLoadError(f"Undeclared namespace prefix '{prefix}' in '{value}'", self.source)
            return QName(namespace, local)

        namespace = self.namespaces.get('', '')
        if not namespace and self.chameleon:
            namespace = self.target_namespace
        return QName(namespace, value)

    def _extra_attributes(self, elem: Element) -> dict[str, str]:
        """Non-XSD attributes keyed both by prefixed name as written and by Clark name."""
        extras = {}
        for key, value in elem.attrib.items():
            if not key.startswith('{'):
                continue
            uri, local = key[1:].split('}', 1)
            if uri == XS_NS:
                continue
            extras[key] = value
            prefix = self._uri_prefixes.get(uri)
            if prefix:
                extras[f"{prefix}:{local}"] = value
        return extras

    def parse(self) -> SchemaDocument:
        document = SchemaDocument(
            source=self.source,
            target_namespace=self.target_namespace,
            namespaces={p: u for p, u in self.namespaces.items() if p != 'xml'},
        )

        for child in self.root:
            tag = child.tag
            if tag in _SCHEMA_DIRECTIVES:
                self.directives.append((tag, child.attrib.get('schemaLocation'), child.attrib.get('namespace')))
            elif tag == f'{XS}element':
                document.elements.append(self._parse_element(child, is_global=True))
            elif tag == f'{XS}complexType':
                document.types.append(self._parse_complex_type(child, child.attrib.get('name')))
            elif tag == f'{XS}simpleType':
                document.types.append(self._parse_simple_type(child, child.attrib.get('name')))
            elif tag == f'{XS}group':
                document.groups.append(self._parse_group(child))
            elif tag == f'{XS}attribute':
                document.attributes.append(self._parse_attribute(child, is_global=True))
            elif tag == f'{XS}attributeGroup':
                document.attribute_groups.append(self._parse_attribute_group(child))

        return document

    def _local_namespace(self, elem: Element, form_default: str) -> str:
        form = elem.attrib.get('form', form_default)
        return self.target_namespace if form == 'qualified' else ''

    def _parse_element(self, elem: Element, is_global: bool = False) -> ElementDecl:
        """Parse an xs:element declaration or reference."""
        min_occurs, max_occurs = (1, 1) if is_global else _parse_occurs(elem)

        schema_type = None
        for child in elem:
            if child.tag == f'{XS}complexType':
                schema_type = self._parse_complex_type(child)
            elif child.tag == f'{XS}simpleType':
                schema_type = self._parse_simple_type(child)

        ref = self._qname(elem.attrib.get('ref'))
        if is_global:
            namespace = self.target_namespace
        elif ref is not None:
            namespace = ref.namespace
        else:
            namespace = self._local_namespace(elem, self.element_form_default)

        decl = ElementDecl(
            name=ref.name if ref is not None else elem.attrib.get('name'),
            namespace=namespace,
            ref=ref,
            type_name=self._qname(elem.attrib.get('type')),
            schema_type=schema_type,
            substitution_group=self._qname(elem.attrib.get('substitutionGroup')),
            min_occurs=min_occurs,
            max_occurs=max_occurs,
            is_global=is_global,
            annotation=_parse_annotation(elem),
            extra_attributes=self._extra_attributes(elem),
        )
        self.components.elements.append(decl)
        return decl

    def _parse_attribute(self, elem: Element, is_global: bool = False) -> AttributeDecl:
        """Parse an xs:attribute declaration or reference."""
        schema_type = None
        inline = elem.find(f'./{XS}simpleType')
        if inline is not None:
            schema_type = self._parse_simple_type(inline)

        ref = self._qname(elem.attrib.get('ref'))
        if is_global:
            namespace = self.target_namespace
        elif ref is not None:
            namespace = ref.namespace
        else:
            namespace = self._local_namespace(elem, self.attribute_form_default)

        decl = AttributeDecl(
            name=ref.name if ref is not None else elem.attrib.get('name'),
            namespace=namespace,
            ref=ref,
            type_name=self._qname(elem.attrib.get('type')),
            type_text=elem.attrib.get('type', ''),
            schema_type=schema_type,
            use=elem.attrib.get('use', 'optional'),
            is_global=is_global,
            annotation=_parse_annotation(elem),
        )
        self.components.attributes.append(decl)
        return decl

    def _parse_attribute_uses(self, elem: Element) -> tuple[list[AttributeDecl], list[QName]]:
        attributes = []
        attribute_group_refs = []
        for child in elem:
            if child.tag == f'{XS}attribute':
                attributes.append(self._parse_attribute(child))
            elif child.tag == f'{XS}attributeGroup' and child.attrib.get('ref'):
                attribute_group_refs.append(self._qname(child.attrib['ref']))
        return attributes, attribute_group_refs

    def _parse_attribute_group(self, elem: Element) -> AttributeGroup:
        attributes, attribute_group_refs = self._parse_attribute_uses(elem)
        return AttributeGroup(
            name=elem.attrib.get('name'),
            namespace=self.target_namespace,
            attributes=attributes,
            attribute_group_refs=attribute_group_refs,
        )

    def _parse_particle(self, elem: Element) -> Optional[Union[Sequence, Choice, GroupRef]]:
        """First content particle directly under a type, derivation or group."""
        for child in elem:
            if child.tag in (f'{XS}sequence', f'{XS}choice', f'{XS}all'):
                return self._parse_model_group(child)
            if child.tag == f'{XS}group' and child.attrib.get('ref'):
                return self._parse_group_ref(child)
        return None

    def _parse_group_ref(self, elem: Element) -> GroupRef:
        min_occurs, max_occurs = _parse_occurs(elem)
        return GroupRef(ref=self._qname(elem.attrib['ref']), min_occurs=min_occurs, max_occurs=max_occurs)

    def _parse_model_group(self, elem: Element) -> Union[Sequence, Choice]:
        """Parse xs:sequence, xs:choice or xs:all with its items in document order."""
        min_occurs, max_occurs = _parse_occurs(elem)
        items = []
        for child in elem:
            if child.tag == f'{XS}element':
                items.append(self._parse_element(child))
            elif child.tag in (f'{XS}sequence', f'{XS}choice'):
                items.append(self._parse_model_group(child))
            elif child.tag == f'{XS}group' and child.attrib.get('ref'):
                items.append(self._parse_group_ref(child))
            elif child.tag == f'{XS}any':
                any_min, any_max = _parse_occurs(child)
                items.append(Wildcard(
                    namespace=child.attrib.get('namespace', '##any'),
                    process_contents=child.attrib.get('processContents', 'strict'),
                    min_occurs=any_min,
                    max_occurs=any_max,
                ))

        if elem.tag == f'{XS}choice':
            return Choice(items=items, min_occurs=min_occurs, max_occurs=max_occurs)

        compositor = 'all' if elem.tag == f'{XS}all' else 'sequence'
        return Sequence(items=items, min_occurs=min_occurs, max_occurs=max_occurs, compositor=compositor)

    def _parse_group(self, elem: Element) -> Group:
        return Group(
            name=elem.attrib.get('name'),
            namespace=self.target_namespace,
            particle=self._parse_particle(elem),
            annotation=_parse_annotation(elem),
        )

    def _parse_complex_type(self, type_elem: Element, name: Optional[str] = None) -> ComplexType:
        """Parse an xs:complexType definition."""
        type_def = ComplexType(
            name=name,
            namespace=self.target_namespace if name else '',
            mixed=type_elem.attrib.get('mixed', 'false') == 'true',
            annotation=_parse_annotation(type_elem),
        )

        content = None
        for child in type_elem:
            if child.tag in (f'{XS}complexContent', f'{XS}simpleContent'):
                content = child
                break

        if content is not None:
            derivation_elem = None
            for child in content:
                if child.tag in (f'{XS}extension', f'{XS}restriction'):
                    derivation_elem = child
                    break
            if derivation_elem is None:
                raise SchemaLoadError(f"Content of type '{name or '(anonymous)'}' has no derivation", self.source)

            attributes, attribute_group_refs = self._parse_attribute_uses(derivation_elem)
            derivation = ContentDerivation(
                kind=_DERIVATION_KINDS[(content.tag, derivation_elem.tag)],
                base_type_name=self._qname(derivation_elem.attrib.get('base')),
                particle=self._parse_particle(derivation_elem),
                attributes=attributes,
                attribute_group_refs=attribute_group_refs,
            )
            is_complex = content.tag == f'{XS}complexContent'
            type_def.content_model = ContentModel(
                kind=NodeKind.COMPLEX_CONTENT if is_complex else NodeKind.SIMPLE_CONTENT,
                derivation=derivation,
                mixed=content.attrib.get('mixed', 'false') == 'true',
            )
        else:
            type_def.particle = self._parse_particle(type_elem)
            type_def.attributes, type_def.attribute_group_refs = self._parse_attribute_uses(type_elem)

        self.components.complex_types.append(type_def)
        return type_def

    def _parse_simple_type(self, type_elem: Element, name: Optional[str] = None) -> SimpleType:
        """Parse an xs:simpleType definition."""
        type_def = SimpleType(
            name=name,
            namespace=self.target_namespace if name else '',
            annotation=_parse_annotation(type_elem),
        )

        for child in type_elem:
            if child.tag == f'{XS}restriction':
                type_def.base_type_name = self._qname(child.attrib.get('base'))
                inline = child.find(f'./{XS}simpleType')
                if inline is not None:
                    type_def.base_type = self._parse_simple_type(inline)
            elif child.tag == f'{XS}list':
                type_def.variety = 'list'
                type_def.item_type_name = self._qname(child.attrib.get('itemType'))
            elif child.tag == f'{XS}union':
                type_def.variety = 'union'

        self.components.simple_types.append(type_def)
        return type_def


class SchemaCompiler:
    """Cross-links a parsed SchemaSet the way a schema compiler would.

    Resolves declared types and base types, builds compiled content
    particles (base content followed by own content, model group references
    expanded) and attribute uses, and checks that every reference resolves.
    """

    def __init__(self, schema_set: SchemaSet):
        self.schema_set = schema_set
        self._compiled: set[int] = set()
        self._in_progress: set[int] = set()
        self._expanded_groups: dict[int, Optional[Union[Sequence, Choice]]] = {}
        self._expanding_groups: set[int] = set()

    def compile(self, components: _Components) -> SchemaSet:
        for type_def in components.simple_types:
            self._compile_simple_type(type_def)
        for type_def in components.complex_types:
            self._compile_complex_type(type_def)
        for attr in components.attributes:
            self._compile_attribute(attr)
        for elem in components.elements:
            self._compile_element(elem)
        for group in self.schema_set.groups.values():
            self._expand_group(group)

        logger.info(
            f"Compiled schema set: {len(self.schema_set.global_elements)} elements, "
            f"{len(self.schema_set.global_types)} types, {len(self.schema_set.groups)} groups"
        )
        return self.schema_set

    def _compile_simple_type(self, type_def: SimpleType) -> None:
        if type_def.builtin or id(type_def) in self._compiled:
            return
        if id(type_def) in self._in_progress:
            raise SchemaLoadError(f"Circular type derivation through '{type_def.name}'")
        self._in_progress.add(id(type_def))

        if type_def.base_type is None and type_def.base_type_name is not None:
            base = self.schema_set.get_type(type_def.base_type_name)
            if isinstance(base, SimpleType):
                type_def.base_type = base
        if isinstance(type_def.base_type, SimpleType):
            self._compile_simple_type(type_def.base_type)
        if type_def.item_type_name is not None:
            self.schema_set.get_type(type_def.item_type_name)

        self._in_progress.discard(id(type_def))
        self._compiled.add(id(type_def))

    def _compile_complex_type(self, type_def: ComplexType) -> None:
        if type_def.builtin or id(type_def) in self._compiled:
            return
        if id(type_def) in self._in_progress:
            raise SchemaLoadError(f"Circular type derivation through '{type_def.name}'")
        self._in_progress.add(id(type_def))

        content_model = type_def.content_model
        if content_model is not None:
            base = self.schema_set.get_type(content_model.derivation.base_type_name)
            if isinstance(base, ComplexType):
                self._compile_complex_type(base)
            own_particle = content_model.derivation.particle
        else:
            base = ANY_TYPE
            own_particle = type_def.particle
        type_def.base_type = base

        expanded = self._expand_particle(own_particle)
        if content_model is not None and content_model.kind == NodeKind.SIMPLE_CONTENT:
            type_def.content_type = ContentType.TEXT_ONLY
            type_def.content_type_particle = None
        else:
            if (
                content_model is not None
                and content_model.derivation.is_extension
                and isinstance(base, ComplexType)
                and not base.builtin
                and base.content_type_particle is not None
            ):
                if expanded is None:
                    expanded = base.content_type_particle
                else:
                    expanded = Sequence(items=[base.content_type_particle, expanded])

            mixed = type_def.mixed or (content_model is not None and content_model.mixed)
            has_content = expanded is not None and bool(expanded.items)
            if has_content:
                type_def.content_type = ContentType.MIXED if mixed else ContentType.ELEMENT_ONLY
                type_def.content_type_particle = expanded
            else:
                type_def.content_type = ContentType.TEXT_ONLY if mixed else ContentType.EMPTY
                type_def.content_type_particle = None

        type_def.attribute_uses = self._attribute_uses(type_def, base)

        self._in_progress.discard(id(type_def))
        self._compiled.add(id(type_def))

    def _attribute_uses(self, type_def: ComplexType, base) -> list[AttributeDecl]:
        """Inherited attribute uses followed by the type's own, without repeated names."""
        if type_def.content_model is not None:
            own = type_def.content_model.derivation.attributes
            group_refs = type_def.content_model.derivation.attribute_group_refs
        else:
            own = type_def.attributes
            group_refs = type_def.attribute_group_refs

        declared = list(own)
        for group_ref in group_refs:
            declared.extend(self._attribute_group_uses(group_ref, set()))

        inherited = []
        if isinstance(base, ComplexType) and not base.builtin:
            inherited = list(base.attribute_uses)

        uses: dict[str, AttributeDecl] = {}
        for attr in inherited + declared:
            key = str(attr.ref) if attr.ref is not None else attr.name
            if attr.use == 'prohibited':
                uses.pop(key, None)
                continue
            uses[key] = attr
        return list(uses.values())

    def _attribute_group_uses(self, qname: QName, seen: set[QName]) -> list[AttributeDecl]:
        if qname in seen:
            return []
        seen.add(qname)
        attr_group = self.schema_set.get_attribute_group(qname)
        uses = list(attr_group.attributes)
        for nested in attr_group.attribute_group_refs:
            uses.extend(self._attribute_group_uses(nested, seen))
        return uses

    def _compile_attribute(self, attr: AttributeDecl) -> None:
        if attr.ref is not None:
            self.schema_set.get_attribute(attr.ref)
            return
        if attr.schema_type is not None:
            attr.attribute_type = attr.schema_type
        elif attr.type_name is not None:
            attr.attribute_type = self.schema_set.get_type(attr.type_name)
        else:
            attr.attribute_type = get_builtin_type('anySimpleType')

    def _compile_element(self, elem: ElementDecl) -> None:
        if elem.element_type is not None:
            return
        if elem.ref is not None:
            self.schema_set.get_element(elem.ref)
            return

        head = None
        if elem.substitution_group is not None:
            self._check_substitution_chain(elem)
            head = self.schema_set.get_element(elem.substitution_group)

        if elem.schema_type is not None:
            elem.element_type = elem.schema_type
        elif elem.type_name is not None:
            elem.element_type = self.schema_set.get_type(elem.type_name)
        elif head is not None and head is not elem:
            self._compile_element(head)
            elem.element_type = head.element_type
        else:
            elem.element_type = ANY_TYPE

    def _check_substitution_chain(self, elem: ElementDecl) -> None:
        """Follow substitution group heads and fail if the chain returns to one it has seen."""
        seen = set()
        current = elem
        while current.substitution_group is not None:
            if id(current) in seen:
                raise SchemaLoadError(f"Circular substitution group through '{current.name}'")
            seen.add(id(current))
            current = self.schema_set.get_element(current.substitution_group)

    def _expand_group(self, group: Group) -> Optional[Union[Sequence, Choice]]:
        key = id(group)
        if key in self._expanded_groups:
            return self._expanded_groups[key]
        if key in self._expanding_groups:
            raise SchemaLoadError(f"Circular model group reference through '{group.name}'")

        self._expanding_groups.add(key)
        expanded = self._expand_particle(group.particle)
        self._expanding_groups.discard(key)
        self._expanded_groups[key] = expanded
        return expanded

    def _expand_particle(self, particle):
        """Copy of a particle with every model group reference replaced by the group's content.

        Element and wildcard particles are shared, not copied, so identity of
        declarations survives compilation.
        """
        if particle is None:
            return None
        if isinstance(particle, GroupRef):
            return self._expand_group(self.schema_set.get_group(particle.ref))
        if isinstance(particle, (Sequence, Choice)):
            items = [self._expand_particle(item) for item in particle.items]
            items = [item for item in items if item is not None]
            if len(items) == len(particle.items) and all(a is b for a, b in zip(items, particle.items)):
                return particle
            if isinstance(particle, Choice):
                return Choice(items=items, min_occurs=particle.min_occurs, max_occurs=particle.max_occurs)
            return Sequence(
                items=items,
                min_occurs=particle.min_occurs,
                max_occurs=particle.max_occurs,
                compositor=particle.compositor,
            )
        return particle


class SchemaLoader:
    """Loads a primary XSD and everything it references into a compiled SchemaSet.

    Args:
        xsd_files: Optional mapping of relative paths to XSD content. When
            omitted, schema locations are read from disk relative to the
            including file.
    """

    def __init__(self, xsd_files: Optional[dict[str, bytes]] = None):
        self.xsd_files = None
        if xsd_files is not None:
            self.xsd_files = {posixpath.normpath(name.replace('\\', '/')): content
                              for name, content in xsd_files.items()}
        self.loaded_schemas: dict[str, SchemaDocument] = {}
        self.schema_set = SchemaSet()
        self._components = _Components()

    def load(self, primary: Union[str, Path]) -> SchemaSet:
        """Load and compile the schema set rooted at ``primary``.

        Raises:
            SchemaLoadError: If a file is missing, unreadable or not a schema
            UnresolvedReferenceError: If a reference cannot be resolved
        """
        location = self._normalize(str(primary))
        self._load_document(location)
        logger.info(f"{len(self.loaded_schemas)} schema files loaded")
        return SchemaCompiler(self.schema_set).compile(self._components)

    def _normalize(self, location: str) -> str:
        if self.xsd_files is not None:
            return posixpath.normpath(location.replace('\\', '/'))
        return str(Path(location).resolve())

    def _resolve_location(self, base: str, location: str) -> str:
        if re.match(r'^[a-zA-Z][a-zA-Z0-9+.-]*://', location):
            raise SchemaLoadError(f"Remote schema location '{location}' is not supported", base)
        if self.xsd_files is not None:
            return posixpath.normpath(posixpath.join(posixpath.dirname(base), location.replace('\\', '/')))
        return str((Path(base).parent / location).resolve())

    def _read(self, location: str) -> bytes:
        if self.xsd_files is not None:
            if location not in self.xsd_files:
                raise SchemaLoadError("Schema file not found in upload", location)
            return self.xsd_files[location]
        try:
            return Path(location).read_bytes()
        except OSError as e:
            raise SchemaLoadError(f"Unable to read schema file: {e}", location) from e

    def _load_document(self, location: str, chameleon_namespace: Optional[str] = None) -> None:
        if location in self.loaded_schemas:
            logger.debug(f"Referenced schema {location} already loaded")
            return

        content = self._read(location)
        try:
            root = ET.fromstring(content)
        except ET.ParseError as e:
            raise SchemaLoadError(f"Failed to parse schema: {e}", location) from e

        if root.tag != f'{XS}schema':
            raise SchemaLoadError(f"Root element is {root.tag}, not xs:schema", location)

        namespaces = _extract_namespace_map_from_xml(content)
        target_ns = root.attrib.get('targetNamespace')
        chameleon = target_ns is None and chameleon_namespace is not None
        if target_ns is None:
            target_ns = chameleon_namespace or ''

        parser = _DocumentParser(location, root, namespaces, target_ns, self._components, chameleon)
        document = parser.parse()

        self.loaded_schemas[location] = document
        self.schema_set.add_schema(document)
        logger.info(f"Loaded schema {location} (namespace '{target_ns}')", extra={"schema_file": location})

        for tag, schema_location, namespace in parser.directives:
            if schema_location is not None and not schema_location.strip():
                schema_location = None

            if schema_location is None:
                if tag == f'{XS}import':
                    logger.debug(f"Import of namespace '{namespace}' has no schemaLocation - skipped")
                    continue
                raise SchemaLoadError("Schema location not specified for included schema", location)

            child_location = self._resolve_location(location, schema_location.strip())
            logger.debug(f"{location}: loading referenced schema {child_location}")
            self._load_document(child_location, target_ns if tag != f'{XS}import' else None)


def load_schema_set(primary_filename: str, xsd_files: dict[str, bytes]) -> SchemaSet:
    """Load and compile a schema set from uploaded files.

    Args:
        primary_filename: Relative path of the primary XSD
        xsd_files: Dictionary mapping relative paths to XSD content

    Returns:
        Compiled SchemaSet
    """
    return SchemaLoader(xsd_files).load(primary_filename)


def load_schema_file(path: Union[str, Path]) -> SchemaSet:
    """Load and compile a schema set from an XSD file on disk."""
    return SchemaLoader().load(path)
