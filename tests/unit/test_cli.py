#!/usr/bin/env python3
"""Tests for the command line XPath extraction."""

from unittest.mock import patch

import pytest

from xsd_xpath.cli import main, validate_file_arguments


class TestCli:
    """Test suite for the xsd-xpath-export command"""

    @pytest.fixture(autouse=True)
    def no_logging_setup(self):
        with patch('xsd_xpath.cli.setup_logging'):
            yield

    @pytest.fixture
    def schema_dir(self, tmp_path):
        (tmp_path / "common.xsd").write_bytes(b"""<?xml version="1.0" encoding="UTF-8"?>
        <xs:schema xmlns:xs="http://www.w3.org/2001/XMLSchema">
          <xs:complexType name="ContactType">
            <xs:sequence>
              <xs:element name="Email" type="xs:string" minOccurs="0"/>
            </xs:sequence>
          </xs:complexType>
        </xs:schema>""")
        (tmp_path / "main.xsd").write_bytes(b"""<?xml version="1.0" encoding="UTF-8"?>
        <xs:schema xmlns:xs="http://www.w3.org/2001/XMLSchema">
          <xs:include schemaLocation="common.xsd"/>
          <xs:element name="Contact" type="ContactType"/>
        </xs:schema>""")
        return tmp_path

    def test_writes_csv(self, schema_dir):
        target = schema_dir / "out.csv"

        exit_code = main(["-s", str(schema_dir / "main.xsd"), "-t", str(target)])

        assert exit_code == 0
        assert target.read_text(encoding="utf-8").splitlines() == [
            "Node,XPath,Annotation,Data Type,Optional",
            '/Contact,/Contact,"",ContactType,false',
            'Contact/Email,/Contact/Email,"",String,true',
        ]

    def test_ignore_and_add_options(self, schema_dir):
        target = schema_dir / "out.csv"

        exit_code = main([
            "-s", str(schema_dir / "main.xsd"), "-t", str(target),
            "-i", "Email", "-a", "annotation:deprecated",
        ])

        assert exit_code == 0
        assert target.read_text(encoding="utf-8").splitlines() == [
            "Node,XPath,Annotation,Data Type,Optional,annotation:deprecated",
            '/Contact,/Contact,"",ContactType,false,',
        ]

    def test_missing_source(self, tmp_path):
        assert main(["-s", str(tmp_path / "missing.xsd"), "-t", str(tmp_path / "out.csv")]) == 1

    def test_target_required(self, schema_dir):
        assert main(["-s", str(schema_dir / "main.xsd")]) == 1

    def test_unknown_root_writes_nothing(self, schema_dir):
        target = schema_dir / "out.csv"

        exit_code = main(["-s", str(schema_dir / "main.xsd"), "-t", str(target), "-r", "Missing"])

        assert exit_code == 1
        assert not target.exists()

    def test_list_roots(self, schema_dir, capsys):
        exit_code = main(["-s", str(schema_dir / "main.xsd"), "--list-roots"])

        assert exit_code == 0
        out = capsys.readouterr().out.splitlines()
        assert out == ["Root nodes: Contact", "Sorted dependencies: Contact,ContactType"]

    def test_validate_file_arguments(self, schema_dir):
        source = str(schema_dir / "main.xsd")

        assert validate_file_arguments(source) is None
        assert validate_file_arguments(source, str(schema_dir / "out.csv")) is None
        assert "Missing target directory" in validate_file_arguments(
            source, str(schema_dir / "nowhere" / "out.csv")
        )
