"""Tests for rulecast.params module."""

import pytest

from rulecast.datetimes import ExtractedDate, ExtractedTime
from rulecast.errors import ParamError
from rulecast.params import (
    FieldEquals,
    FileSize,
    Range,
    extract_param,
    parse_param,
)


def test_extract_param_qualified():
    """Test splitting a qualified token with a parameter."""
    assert extract_param("integer::between(1,10)") == ("integer::between", "between", "1,10")


def test_extract_param_plain():
    """Test a token without parameter or qualifier."""
    extracted = extract_param(" require ")

    assert extracted.name == "require"
    assert extracted.func is None
    assert extracted.param is None


def test_extract_param_keeps_inner_parentheses():
    """Test that the parameter keeps everything between the outer parentheses."""
    assert extract_param("in((a,b))").param == "(a,b)"


def test_none_param_is_true():
    """Test that parameter-less rules get True."""
    assert parse_param(None, "none") is True
    assert parse_param("ignored", "none") is True


def test_single_numbers():
    """Test single numeric parameters."""
    assert parse_param("42", "single", "integer") == 42
    assert parse_param("-3", "single", "integer") == -3
    assert parse_param("2.5", "single", "float") == 2.5
    assert parse_param("7", "single", "number") == 7
    assert isinstance(parse_param("7", "single", "number"), int)
    assert parse_param("7.5", "single", "number") == 7.5
    assert parse_param(5, "single", "integer") == 5


def test_single_invalid_integer():
    """Test a malformed integer parameter."""
    with pytest.raises(ParamError):
        parse_param("4.2", "single", "integer")
    with pytest.raises(ParamError):
        parse_param(True, "single", "integer")


def test_single_boolean_and_array():
    """Test boolean and array coercion."""
    assert parse_param("false", "single", "boolean") is False
    assert parse_param("0", "single", "boolean") is False
    assert parse_param("yes", "single", "boolean") is True
    assert parse_param("(a, b|c)", "single", "array") == ["a", "b", "c"]


def test_single_temporal():
    """Test date and time parameters become value objects."""
    assert parse_param("2024-02-29", "single", "date") == ExtractedDate(2024, 2, 29)
    assert parse_param("09:30", "single", "time") == ExtractedTime(9, 30, 0)
    with pytest.raises(ParamError):
        parse_param("2023-02-29", "single", "date")


def test_range():
    """Test range parsing from strings, lists and mappings."""
    assert parse_param("1,10", "range", "integer") == Range(1, 10)
    assert parse_param("(1|10)", "range", "integer") == Range(1, 10)
    assert parse_param([1, 10], "range", "integer") == Range(1, 10)
    assert parse_param({"min": "0.5", "max": "1.5"}, "range", "float") == Range(0.5, 1.5)


@pytest.mark.parametrize("raw", ["1", "1,2,3", "1,", ""])
def test_range_needs_two_bounds(raw):
    """Test malformed ranges."""
    with pytest.raises(ParamError):
        parse_param(raw, "range", "integer")


def test_list():
    """Test list parameters are tuples of coerced items."""
    assert parse_param("a, b, c", "list", "string") == ("a", "b", "c")
    assert parse_param("1|2", "list", "integer") == (1, 2)
    assert parse_param(["x", "y"], "list", "fieldName") == ("x", "y")


def test_file_size():
    """Test file size units resolve to bytes."""
    assert parse_param("2mb", "fileSize") == FileSize("2mb", 2, "mb", 2 * 1024 * 1024)
    assert parse_param("500", "fileSize").bytes == 500
    assert parse_param("1GB", "fileSize").bytes == 1024**3
    with pytest.raises(ParamError):
        parse_param("2 tb", "fileSize")


def test_field_reference_and_equals():
    """Test cross-field parameters."""
    assert parse_param(" password ", "fieldReference", "fieldName") == "password"
    assert parse_param("status=a=b", "fieldEquals") == FieldEquals("status", "a=b")
    assert parse_param({"field": "plan", "value": "pro"}, "fieldEquals") == FieldEquals("plan", "pro")
    with pytest.raises(ParamError):
        parse_param("status", "fieldEquals")
