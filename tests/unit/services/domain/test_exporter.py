#!/usr/bin/env python3

import io

import pytest

from xsd_xpath.services.domain.schema.errors import RootNodeNotFoundError, UnresolvedReferenceError
from xsd_xpath.services.domain.schema.exporter import (
    CSV_HEADER,
    csv_header,
    export_root_candidates,
    extract_xpaths,
    find_root_node,
    select_default_root,
)
from xsd_xpath.services.domain.schema.loader import load_schema_set
from xsd_xpath.services.domain.schema.model import ComplexType, ElementDecl
from xsd_xpath.services.domain.schema.visitors import build_dependency_graph


class TestXPathExport:
    """Test suite for the export driver"""

    @pytest.fixture
    def order_xsd(self):
        return b"""<?xml version="1.0" encoding="UTF-8"?>
        <xs:schema
          xmlns:xs="http://www.w3.org/2001/XMLSchema"
          xmlns:o="http://example.com/order"
          xmlns:annotation="http://example.com/annotation"
          targetNamespace="http://example.com/order"
          elementFormDefault="qualified">

          <xs:element name="Order" type="o:OrderType"/>
          <xs:element name="Customer" type="xs:string" annotation:deprecated="true"/>

          <xs:complexType name="OrderType">
            <xs:sequence>
              <xs:element ref="o:Customer"/>
              <xs:element name="Total" type="xs:decimal" minOccurs="0"/>
            </xs:sequence>
          </xs:complexType>
        </xs:schema>"""

    @pytest.fixture
    def schema_set(self, order_xsd):
        return load_schema_set("order.xsd", {"order.xsd": order_xsd})

    def test_header(self):
        assert CSV_HEADER == ["Node", "XPath", "Annotation", "Data Type", "Optional"]
        assert csv_header(["annotation:deprecated", "Node", "annotation:deprecated"]) == CSV_HEADER + [
            "annotation:deprecated"
        ]

    def test_automatic_root_selection(self, schema_set):
        output = io.StringIO()
        result = extract_xpaths(schema_set, output)

        assert result.root_name == "Order"
        assert result.auto_selected is True
        assert result.candidate_roots == ["Order"]
        assert result.record_count == 3
        assert output.getvalue().splitlines() == [
            "Node,XPath,Annotation,Data Type,Optional",
            '/Order,/Order,"",OrderType,false',
            'Order/Customer,/Order/Customer,"",String,false',
            'Order/Total,/Order/Total,"",Decimal,true',
        ]

    def test_explicit_root_and_additional_attributes(self, schema_set):
        output = io.StringIO()
        result = extract_xpaths(
            schema_set,
            output,
            additional_attributes=["annotation:deprecated"],
            root_name="Customer",
        )
        lines = output.getvalue().splitlines()

        assert result.auto_selected is False
        assert lines[0] == "Node,XPath,Annotation,Data Type,Optional,annotation:deprecated"
        assert lines[1] == '/Customer,/Customer,"",String,false,true'

    def test_unknown_root_raises(self, schema_set):
        with pytest.raises(RootNodeNotFoundError) as exc_info:
            extract_xpaths(schema_set, io.StringIO(), root_name="Invoice")

        assert isinstance(exc_info.value, UnresolvedReferenceError)
        assert "Invoice" in str(exc_info.value)

    def test_find_root_by_namespace_uri_prefers_types(self, schema_set):
        order_type = find_root_node(schema_set, "http://example.com/order:OrderType")
        order = find_root_node(schema_set, "http://example.com/order:Order")

        assert isinstance(order_type, ComplexType)
        assert isinstance(order, ElementDecl)

    def test_find_root_by_prefix(self, schema_set):
        assert find_root_node(schema_set, "o:OrderType").name == "OrderType"

    def test_find_unqualified_root_searches_elements_only(self, schema_set):
        with pytest.raises(RootNodeNotFoundError):
            find_root_node(schema_set, "OrderType")

    def test_qualified_root_not_found(self, schema_set):
        with pytest.raises(RootNodeNotFoundError, match="properly qualified"):
            find_root_node(schema_set, "o:Invoice")

    def test_select_default_root(self, schema_set):
        assert select_default_root(schema_set) == "Order"

    def test_select_default_root_without_edges(self):
        schema_set = load_schema_set("empty.xsd", {"empty.xsd": b"""<?xml version="1.0"?>
            <xs:schema xmlns:xs="http://www.w3.org/2001/XMLSchema">
              <xs:element name="Lonely" type="xs:string"/>
            </xs:schema>"""})

        with pytest.raises(RootNodeNotFoundError, match="Please supply one"):
            select_default_root(schema_set)

    def test_expanded_groups_are_not_export_roots(self):
        schema_set = load_schema_set("groups.xsd", {"groups.xsd": b"""<?xml version="1.0" encoding="UTF-8"?>
            <xs:schema
              xmlns:xs="http://www.w3.org/2001/XMLSchema"
              xmlns:o="http://example.com/order"
              targetNamespace="http://example.com/order">

              <xs:group name="Unused">
                <xs:sequence>
                  <xs:element ref="o:Party"/>
                </xs:sequence>
              </xs:group>

              <xs:element name="Order" type="o:OrderType"/>
              <xs:element name="Party" type="xs:string"/>

              <xs:complexType name="OrderType">
                <xs:sequence>
                  <xs:element ref="o:Party"/>
                </xs:sequence>
              </xs:complexType>
            </xs:schema>"""})

        graph = build_dependency_graph(schema_set, expand_groups=True)
        assert graph.root_nodes == ["Unused", "Order"]
        assert export_root_candidates(schema_set, graph) == ["Order"]

        output = io.StringIO()
        result = extract_xpaths(schema_set, output, expand_groups=True)

        assert result.root_name == "Order"
        assert result.candidate_roots == ["Order"]
        assert output.getvalue().splitlines()[1] == '/Order,/Order,"",OrderType,false'

    def test_local_elements_are_not_export_roots(self):
        schema_set = load_schema_set("local.xsd", {"local.xsd": b"""<?xml version="1.0" encoding="UTF-8"?>
            <xs:schema xmlns:xs="http://www.w3.org/2001/XMLSchema">
              <xs:element name="Envelope">
                <xs:complexType>
                  <xs:sequence>
                    <xs:element name="Destination" type="AddressType"/>
                  </xs:sequence>
                </xs:complexType>
              </xs:element>
              <xs:element name="Shipment" type="ShipmentType"/>
              <xs:complexType name="AddressType">
                <xs:sequence>
                  <xs:element name="Street" type="xs:string"/>
                </xs:sequence>
              </xs:complexType>
              <xs:complexType name="ShipmentType">
                <xs:sequence>
                  <xs:element name="Reference" type="xs:string"/>
                </xs:sequence>
              </xs:complexType>
            </xs:schema>"""})

        graph = build_dependency_graph(schema_set)
        assert graph.root_nodes == ["Destination", "Shipment"]
        assert select_default_root(schema_set, graph) == "Shipment"
