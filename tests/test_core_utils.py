"""
Unit tests for portal.core.utils.

Tests cover:
  • Leading-number parsing of form text
  • Filled / empty checks
  • Money, megabyte and file-size formatting
  • Aggregation over backend rows
"""

import pytest

from portal.core.utils import (
    count_by, drop_empty, format_file_size, format_megabytes, format_money,
    is_filled, parse_float, parse_int, sum_field, unwrap_list,
)


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

class TestParseFloat:
    def test_plain_number(self):
        assert parse_float("12.5") == 12.5

    def test_leading_number_with_trailing_text(self):
        assert parse_float("12.5abc") == 12.5

    def test_no_numeric_prefix(self):
        assert parse_float("abc") is None
        assert parse_float("") is None
        assert parse_float(None) is None

    def test_numbers_pass_through(self):
        assert parse_float(3) == 3.0
        assert parse_float(float("nan")) is None

    def test_bool_is_not_a_number(self):
        assert parse_float(True) is None

    def test_sign(self):
        assert parse_float("-4") == -4.0


def test_parse_int_truncates():
    assert parse_int("7.9") == 7
    assert parse_int("x") is None


@pytest.mark.parametrize("value,expected", [
    ("text", True), ("   ", False), ("", False), (None, False),
    (True, True), (False, False), ([], False), (["a"], True),
])
def test_is_filled(value, expected):
    assert is_filled(value) is expected


def test_drop_empty_keeps_zero_and_false():
    assert drop_empty({"a": None, "b": "", "c": 0, "d": False}) == {"c": 0, "d": False}


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------

def test_format_money():
    assert format_money(1234.5) == "$1,234.50"
    assert format_money(0) == "$0.00"


def test_format_megabytes():
    assert format_megabytes(3 * 1024 * 1024) == "3.00MB"


class TestFormatFileSize:
    def test_zero(self):
        assert format_file_size(0) == "0 Bytes"

    def test_bytes(self):
        assert format_file_size(512) == "512 Bytes"

    def test_kilobytes(self):
        assert format_file_size(1536) == "1.5 KB"

    def test_megabytes(self):
        assert format_file_size(2 * 1024 * 1024) == "2 MB"


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------

def test_sum_field_skips_missing_values():
    rows = [{"amount": 10}, {"amount": "5.5"}, {}, {"amount": None}]
    assert sum_field(rows, "amount") == 15.5


def test_count_by():
    rows = [{"status": "active"}, {"status": "draft"}, {"status": "active"}]
    assert count_by(rows, "status", "active") == 2


def test_unwrap_list_accepts_both_shapes():
    assert unwrap_list([1, 2], "items") == [1, 2]
    assert unwrap_list({"items": [3]}, "items") == [3]
    assert unwrap_list({"other": [3]}, "items") == []
    assert unwrap_list(None, "items") == []
