#!/usr/bin/env python3
"""Built-in XSD types and their canonical type-code names.

The type-code names are what the CSV export reports in its "Data Type"
column for simple-typed elements (e.g. ``xs:int`` -> ``Int``).
"""

from typing import Optional

from .model import XS_NS, ComplexType, ContentType, QName, SchemaType, SimpleType

# local name -> (type code, base local name)
BUILTIN_SIMPLE_TYPES: dict[str, tuple[str, Optional[str]]] = {
    'anySimpleType': ('AnyAtomicType', None),
    'string': ('String', 'anySimpleType'),
    'boolean': ('Boolean', 'anySimpleType'),
    'decimal': ('Decimal', 'anySimpleType'),
    'float': ('Float', 'anySimpleType'),
    'double': ('Double', 'anySimpleType'),
    'duration': ('Duration', 'anySimpleType'),
    'dateTime': ('DateTime', 'anySimpleType'),
    'time': ('Time', 'anySimpleType'),
    'date': ('Date', 'anySimpleType'),
    'gYearMonth': ('GYearMonth', 'anySimpleType'),
    'gYear': ('GYear', 'anySimpleType'),
    'gMonthDay': ('GMonthDay', 'anySimpleType'),
    'gDay': ('GDay', 'anySimpleType'),
    'gMonth': ('GMonth', 'anySimpleType'),
    'hexBinary': ('HexBinary', 'anySimpleType'),
    'base64Binary': ('Base64Binary', 'anySimpleType'),
    'anyURI': ('AnyUri', 'anySimpleType'),
    'QName': ('QName', 'anySimpleType'),
    'NOTATION': ('Notation', 'anySimpleType'),
    'normalizedString': ('NormalizedString', 'string'),
    'token': ('Token', 'normalizedString'),
    'language': ('Language', 'token'),
    'NMTOKEN': ('NmToken', 'token'),
    'NMTOKENS': ('NmToken', 'anySimpleType'),
    'Name': ('Name', 'token'),
    'NCName': ('NCName', 'Name'),
    'ID': ('Id', 'NCName'),
    'IDREF': ('Idref', 'NCName'),
    'IDREFS': ('Idref', 'anySimpleType'),
    'ENTITY': ('Entity', 'NCName'),
    'ENTITIES': ('Entity', 'anySimpleType'),
    'integer': ('Integer', 'decimal'),
    'nonPositiveInteger': ('NonPositiveInteger', 'integer'),
    'negativeInteger': ('NegativeInteger', 'nonPositiveInteger'),
    'long': ('Long', 'integer'),
    'int': ('Int', 'long'),
    'short': ('Short', 'int'),
    'byte': ('Byte', 'short'),
    'nonNegativeInteger': ('NonNegativeInteger', 'integer'),
    'unsignedLong': ('UnsignedLong', 'nonNegativeInteger'),
    'unsignedInt': ('UnsignedInt', 'unsignedLong'),
    'unsignedShort': ('UnsignedShort', 'unsignedInt'),
    'unsignedByte': ('UnsignedByte', 'unsignedShort'),
    'positiveInteger': ('PositiveInteger', 'nonNegativeInteger'),
}

ANY_TYPE_CODE = 'Item'

ANY_TYPE = ComplexType(
    name='anyType',
    namespace=XS_NS,
    mixed=True,
    builtin=True,
    content_type=ContentType.MIXED,
)

_builtin_cache: dict[str, SimpleType] = {}


def _build_simple_type(local_name: str) -> SimpleType:
    type_code, base_name = BUILTIN_SIMPLE_TYPES[local_name]
    return SimpleType(
        name=local_name,
        namespace=XS_NS,
        base_type_name=QName(XS_NS, base_name) if base_name else None,
        base_type=get_builtin_type(base_name) if base_name else None,
        type_code=type_code,
        builtin=True,
        variety='list' if local_name in ('NMTOKENS', 'IDREFS', 'ENTITIES') else 'atomic',
    )


def get_builtin_type(local_name: str) -> Optional[SchemaType]:
    """Look up a built-in type by its local name in the XSD namespace."""
    if local_name == 'anyType':
        return ANY_TYPE
    if local_name not in BUILTIN_SIMPLE_TYPES:
        return None
    if local_name not in _builtin_cache:
        _builtin_cache[local_name] = _build_simple_type(local_name)
    return _builtin_cache[local_name]


def is_builtin(type_def: Optional[SchemaType]) -> bool:
    return type_def is not None and type_def.builtin


def type_code_name(type_def: Optional[SchemaType]) -> Optional[str]:
    """Canonical type-code name of a type, or None when it has none.

    Simple types report the code of the nearest built-in ancestor. List and
    union types, and complex types other than anyType, have no code.
    """
    if type_def is None:
        return None
    if type_def is ANY_TYPE:
        return ANY_TYPE_CODE
    if isinstance(type_def, ComplexType):
        return None

    current: Optional[SimpleType] = type_def
    while current is not None:
        if current.variety != 'atomic' and not current.builtin:
            return None
        if current.type_code:
            return current.type_code
        current = current.base_type
    return None
