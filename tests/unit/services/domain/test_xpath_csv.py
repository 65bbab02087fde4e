#!/usr/bin/env python3

import io

import pytest

from xsd_xpath.services.domain.schema.errors import UnsupportedNodeKindError
from xsd_xpath.services.domain.schema.loader import load_schema_set
from xsd_xpath.services.domain.schema.model import Group, GroupRef, QName
from xsd_xpath.services.domain.schema.visitors import SchemaVisitor, XPathCsvVisitor
from xsd_xpath.services.domain.schema.visitors.xpath_csv import format_annotation

PERSON_NS = "http://example.com/person"


@pytest.fixture
def person_xsd():
    """Person with a recursive Parent element, an inline-typed reference and attributes"""
    return b"""<?xml version="1.0" encoding="UTF-8"?>
    <xs:schema
      xmlns:xs="http://www.w3.org/2001/XMLSchema"
      xmlns:p="http://example.com/person"
      xmlns:annotation="http://example.com/annotation"
      targetNamespace="http://example.com/person"
      elementFormDefault="qualified">

      <xs:element name="Person" type="p:PersonType">
        <xs:annotation>
          <xs:documentation>A "natural" person</xs:documentation>
        </xs:annotation>
      </xs:element>

      <xs:complexType name="PersonType">
        <xs:sequence>
          <xs:element name="Name" type="xs:string" annotation:deprecated="false">
            <xs:annotation>
              <xs:documentation>Full name</xs:documentation>
            </xs:annotation>
          </xs:element>
          <xs:element name="Age" type="xs:int" minOccurs="0"/>
          <xs:element ref="p:Address" minOccurs="0"/>
          <xs:element name="Parent" type="p:PersonType" minOccurs="0"/>
        </xs:sequence>
        <xs:attribute name="id" type="xs:ID"/>
      </xs:complexType>

      <xs:element name="Address" annotation:deprecated="true">
        <xs:complexType>
          <xs:sequence>
            <xs:element name="Street" type="xs:string"/>
            <xs:element name="City" type="p:CityType"/>
          </xs:sequence>
        </xs:complexType>
      </xs:element>

      <xs:simpleType name="CityType">
        <xs:restriction base="xs:token"/>
      </xs:simpleType>
    </xs:schema>"""


@pytest.fixture
def schema_set(person_xsd):
    return load_schema_set("person.xsd", {"person.xsd": person_xsd})


@pytest.fixture
def person(schema_set):
    return schema_set.get_element(QName(PERSON_NS, "Person"))


class DepthCheckingVisitor(XPathCsvVisitor):
    """Records any dispatch that leaves the path stack at a different depth"""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.dispatch_count = 0
        self.unbalanced = []

    def dispatch(self, node, collector=None):
        before = len(collector) if collector is not None else 0
        super().dispatch(node, collector)
        self.dispatch_count += 1
        after = len(collector) if collector is not None else 0
        if before != after:
            self.unbalanced.append(node)


class TestXPathCsvVisitor:
    """Test suite for XPath record emission"""

    def test_records_for_person(self, schema_set, person):
        output = io.StringIO()
        XPathCsvVisitor(schema_set, output).visit_root(person)

        assert output.getvalue().splitlines() == [
            '/Person,/Person,"A ""natural"" person",PersonType,false',
            'Person/Name,/Person/Name,"Full name",String,false',
            'Person/Age,/Person/Age,"",Int,true',
            'Address/Street,/Person/Address/Street,"",String,false',
            'Address/City,/Person/Address/City,"",Token,false',
            'Person/Parent,/Person/Parent,"",PersonType,true',
            'Parent/Name,/Person/Parent/Name,"Full name",String,false',
            'Parent/Age,/Person/Parent/Age,"",Int,true',
            'Address/Street,/Person/Parent/Address/Street,"",String,false',
            'Address/City,/Person/Parent/Address/City,"",Token,false',
            'Parent@id,/Person/Parent@id,"",xs:ID',
            'Person@id,/Person@id,"",xs:ID',
        ]

    def test_self_reference_guard_stops_recursion(self, schema_set, person):
        visitor = XPathCsvVisitor(schema_set)
        records = visitor.visit_root(person)

        parent_rows = [r for r in records if r.node.endswith("/Parent")]
        assert [r.xpath for r in parent_rows] == ["/Person/Parent"]
        assert not any("/Parent/Parent" in r.xpath for r in records)

    def test_reused_visitor_starts_fresh(self, schema_set, person):
        visitor = XPathCsvVisitor(schema_set, nodes_to_skip=["Address", "Parent"])

        first = [r.xpath for r in visitor.visit_root(person)]
        second = [r.xpath for r in visitor.visit_root(person)]

        assert second == first == ["/Person", "/Person/Name", "/Person/Age", "/Person@id"]
        assert visitor.path == []

    def test_skip_set_drops_element_and_descendants(self, schema_set, person):
        records = XPathCsvVisitor(schema_set, nodes_to_skip=["Address", "Parent"]).visit_root(person)

        assert [r.xpath for r in records] == ["/Person", "/Person/Name", "/Person/Age", "/Person@id"]

    def test_skip_set_applies_to_attributes(self, schema_set, person):
        records = XPathCsvVisitor(schema_set, nodes_to_skip=["id"]).visit_root(person)

        assert not any(r.is_attribute for r in records)

    def test_additional_attribute_columns(self, schema_set, person):
        output = io.StringIO()
        XPathCsvVisitor(
            schema_set, output, additional_attributes=["annotation:deprecated"]
        ).visit_root(person)
        lines = output.getvalue().splitlines()

        assert lines[0] == '/Person,/Person,"A ""natural"" person",PersonType,false,'
        assert lines[1] == 'Person/Name,/Person/Name,"Full name",String,false,false'
        # Attribute rows never carry extra columns
        assert lines[-1] == 'Person@id,/Person@id,"",xs:ID'

    def test_additional_attribute_by_clark_name(self, schema_set, person):
        records = XPathCsvVisitor(
            schema_set, additional_attributes=["{http://example.com/annotation}deprecated"]
        ).visit_root(person)

        assert records[1].extra == ["false"]

    def test_optional_flag_uses_reference_site(self, schema_set, person):
        records = XPathCsvVisitor(schema_set).visit_root(person)
        by_path = {r.xpath: r for r in records}

        # Street is required inside Address even though Address itself is optional
        assert by_path["/Person/Age"].optional is True
        assert by_path["/Person/Address/Street"].optional is False

    def test_inline_typed_element_has_no_row(self, schema_set, person):
        records = XPathCsvVisitor(schema_set).visit_root(person)

        assert "/Person/Address" not in [r.xpath for r in records]

    def test_path_stack_balanced(self, schema_set, person):
        visitor = DepthCheckingVisitor(schema_set, nodes_to_skip=["Age"])
        visitor.visit_root(person)

        assert visitor.dispatch_count > 0
        assert visitor.unbalanced == []
        assert visitor.path == []

    def test_root_type_starts_with_empty_path(self, schema_set):
        person_type = schema_set.get_type(QName(PERSON_NS, "PersonType"))
        records = XPathCsvVisitor(schema_set, nodes_to_skip=["Parent", "Address"]).visit_root(person_type)

        assert [r.to_line() for r in records] == [
            '/Name,/Name,"Full name",String,false',
            '/Age,/Age,"",Int,true',
            '@id,/@id,"",xs:ID',
        ]

    def test_format_annotation_doubles_quotes(self):
        assert format_annotation('say "hi"') == '"say ""hi"""'
        assert format_annotation("") == '""'


class TestSchemaVisitorDispatch:
    """Test suite for kind-keyed dispatch"""

    def test_unregistered_kind_raises(self, schema_set):
        visitor = XPathCsvVisitor(schema_set)

        with pytest.raises(UnsupportedNodeKindError):
            visitor.dispatch(Group(name="Orphan"), [])

    def test_object_without_kind_raises(self, schema_set):
        with pytest.raises(UnsupportedNodeKindError):
            XPathCsvVisitor(schema_set).dispatch(object(), [])

    def test_base_requires_element_handler(self, person):
        with pytest.raises(NotImplementedError):
            SchemaVisitor().dispatch(person, None)

    def test_registered_extension_kind(self):
        seen = []
        visitor = SchemaVisitor()
        visitor.register(GroupRef(ref=QName("", "G")).kind, lambda node, collector: seen.append(node.ref))

        visitor.dispatch(GroupRef(ref=QName("", "G")))

        assert seen == [QName("", "G")]

    def test_none_node_is_ignored(self):
        SchemaVisitor().dispatch(None, None)
