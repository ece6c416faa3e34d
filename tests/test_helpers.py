"""Tests for predicates, casing and datetimes helpers."""

import pytest

from rulecast import casing, predicates
from rulecast.datetimes import (
    ExtractedDate,
    ExtractedDateTime,
    ExtractedTime,
    extract_date,
    extract_datetime,
    extract_time,
)


@pytest.mark.parametrize("value", [None, "", [], (), {}])
def test_is_empty_true(value):
    """Test values that count as not provided."""
    assert predicates.is_empty(value) is True


@pytest.mark.parametrize("value", [0, False, " ", [None], {"a": None}])
def test_is_empty_false(value):
    """Test that zero, False and whitespace are present."""
    assert predicates.is_empty(value) is False


def test_numbers_exclude_booleans():
    """Test booleans are not numbers."""
    assert predicates.is_number(1.5) is True
    assert predicates.is_number(True) is False
    assert predicates.is_number(float("nan")) is False
    assert predicates.is_integer(2.0) is True
    assert predicates.is_float(2.0) is False


def test_is_json():
    """Test only arrays and objects count as JSON documents."""
    assert predicates.is_json('{"a": 1}') is True
    assert predicates.is_json("[1]") is True
    assert predicates.is_json("1") is False
    assert predicates.is_json("{oops") is False
    assert predicates.is_json({"a": 1}) is False


def test_type_checks():
    """Test is_type_of and is_array_of."""
    assert predicates.is_type_of("x", "string") is True
    assert predicates.is_type_of("x", "unknown") is False
    assert predicates.is_array_of([1, 2], "integer") is True
    assert predicates.is_array_of([1, "2"], "integer") is False
    assert predicates.is_array_of([], "string") is True
    assert predicates.is_array_of("abc", "string") is False


def test_lat_long():
    """Test coordinate bounds."""
    assert predicates.is_latitude(-90) is True
    assert predicates.is_latitude(91) is False
    assert predicates.is_longitude(180) is True


def test_case_conversions():
    """Test the case helpers used by processors."""
    assert casing.to_camel_case("hello world") == "helloWorld"
    assert casing.to_camel_case("pre trim") == "preTrim"
    assert casing.to_camel_case("pre toFixed") == "preToFixed"
    assert casing.to_pascal_case("hello_world") == "HelloWorld"
    assert casing.to_kebab_case("helloWorld") == "hello-world"
    assert casing.to_snake_case("helloWorld") == "hello_world"
    assert casing.to_title_case("first_name") == "First Name"
    assert casing.uc_first("hELLO") == "Hello"
    assert casing.capitalize("hELLO") == "HELLO"


def test_sentence_case():
    """Test sentence case capitalizes each sentence."""
    assert casing.to_sentence_case("hello. WORLD. how are you") == "Hello. World. How are you."
    assert casing.to_sentence_case("hello.") == "Hello."


def test_to_label():
    """Test field names turn into error labels."""
    assert casing.to_label("email") == "Email"
    assert casing.to_label("first_name") == "First Name"
    assert casing.to_label("zip-code") == "Zip Code"


def test_extract_date_round_trip():
    """Test str() of an extracted date parses back to an equal value."""
    date = extract_date("2024-02-29")

    assert date == ExtractedDate(2024, 2, 29)
    assert extract_date(str(date)) == date


def test_extract_time_round_trip():
    """Test times with and without seconds."""
    time = extract_time("07:05")

    assert time == ExtractedTime(7, 5, 0)
    assert str(time) == "07:05:00"
    assert extract_time(str(time)) == time


def test_extract_datetime_round_trip():
    """Test datetimes round-trip through str()."""
    value = extract_datetime("2024-12-31 23:59:58")

    assert value == ExtractedDateTime(2024, 12, 31, 23, 59, 58)
    assert extract_datetime(str(value)) == value


@pytest.mark.parametrize(
    "extract,raw",
    [
        (extract_date, "2023-02-29"),
        (extract_date, "2024-2-1"),
        (extract_time, "24:00"),
        (extract_time, "9:30"),
        (extract_datetime, "2024-01-01T10:00"),
    ],
)
def test_extract_rejects_malformed(extract, raw):
    """Test that loose or impossible values are rejected."""
    with pytest.raises(ValueError):
        extract(raw)


def test_impossible_dates_cannot_be_built():
    """Test value objects validate on construction."""
    with pytest.raises(ValueError):
        ExtractedDate(2023, 2, 30)
