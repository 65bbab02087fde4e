#!/usr/bin/env python3
"""Tests for environment variable helpers."""

import os
from unittest.mock import patch

import pytest

from xsd_xpath.core.env_utils import getenv_bool, getenv_clean, getenv_int, getenv_list


class TestEnvUtils:
    """Test suite for environment variable cleaning and conversion."""

    @patch.dict(os.environ, {'DEV_TOKEN': 'secret\r\n'})
    def test_getenv_clean_strips_line_endings(self):
        assert getenv_clean('DEV_TOKEN') == 'secret'
        assert getenv_clean('DEV_TOKEN', strip=False) == 'secret\r\n'

    @patch.dict(os.environ, {}, clear=True)
    def test_getenv_clean_default(self):
        assert getenv_clean('MISSING') is None
        assert getenv_clean('MISSING', ' fallback ') == 'fallback'

    @pytest.mark.parametrize("raw,expected", [
        ("true", True), ("1", True), ("On", True),
        ("false", False), ("0", False), ("", False),
    ])
    def test_getenv_bool(self, raw, expected):
        with patch.dict(os.environ, {'FLAG': raw}):
            assert getenv_bool('FLAG', not expected) is expected

    @patch.dict(os.environ, {'FLAG': 'maybe'})
    def test_getenv_bool_unexpected_value_uses_default(self):
        assert getenv_bool('FLAG', True) is True

    @patch.dict(os.environ, {'COUNT': ' 42 '})
    def test_getenv_int(self):
        assert getenv_int('COUNT', 1) == 42
        assert getenv_int('MISSING_COUNT', 7) == 7

    @patch.dict(os.environ, {'ITEMS': ' a, ,b ,'})
    def test_getenv_list(self):
        assert getenv_list('ITEMS') == ['a', 'b']

    @patch.dict(os.environ, {'ITEMS': ' , '})
    def test_getenv_list_empty_items_use_default(self):
        assert getenv_list('ITEMS', ['x']) == ['x']
