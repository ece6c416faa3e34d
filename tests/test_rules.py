"""Tests for the built-in rule families."""

import collections
import datetime

import pytest
from pydantic.fields import PydanticUndefined

from rulecast import validate
from rulecast.errors import DuplicateEntryError, UnknownFunctionError
from rulecast.params import Range
from rulecast.rules import (
    ArrayRule,
    BaseRule,
    FileDescriptor,
    FileRule,
    ObjectRule,
    RuleFunction,
    StringRule,
    normalize_files,
    step,
)


def _error(schema: str, value, name: str = "field"):
    return validate({name: schema}, {name: value})[name].error


def test_family_resolves_aliases_to_same_function():
    """Test alias transparency within a family."""
    strings = StringRule()

    assert strings.resolve("inList") is strings.resolve("in")
    assert strings.resolve("str") is strings.functions["valid"]
    assert strings.type_checker is strings.functions["valid"]


def test_family_unknown_function():
    """Test asking a family for a function it lacks."""
    with pytest.raises(UnknownFunctionError):
        StringRule().resolve("between")


def test_family_duplicate_function():
    """Test registering a name twice in one family."""
    family = BaseRule("custom", RuleFunction("valid"))

    with pytest.raises(DuplicateEntryError):
        family.define("valid")


def test_add_validation_step():
    """Test appending a step to an existing function."""
    family = BaseRule("code", RuleFunction("valid", steps=[step("@{field} is empty", lambda v, *_: bool(v))]))
    family.add_validation_step("valid", step("@{field} is too long", lambda v, *_: len(v) < 3))

    assert family.validate("valid", "abcd").error == "@{field} is too long"
    assert family.validate("valid", "ab").valid is True


def test_predicate_exception_fails_step():
    """Test a raising predicate fails instead of propagating."""
    result = StringRule().validate("minLength", 12345, 2)

    assert result.valid is False
    assert result.error == "@{field} must be at least @{param} characters long"


def test_string_lengths():
    """Test string length rules."""
    assert _error("string|minLength(3)", "ab", "name") == "Name must be at least 3 characters long"
    assert _error("string|maxLength(3)", "abcd", "name") == "Name must be at most 3 characters long"
    assert _error("string|length(2)", "abc", "name") == "Name must be exactly 2 characters long"
    assert _error("string", 5, "name") == "Name must be a string"


def test_strong_password_reports_first_missing_class():
    """Test strong password steps run in order."""
    assert _error("strongPassword", "weakpass", "password") == (
        "Password must contain at least one uppercase letter"
    )
    assert _error("strongPassword", "Weakpass", "password") == "Password must contain at least one digit"
    assert _error("strongPassword", "Sh0rt!", "password") == "Password must be at least 8 characters long"
    assert _error("strongPassword", "Secr3t!pass", "password") is None


@pytest.mark.parametrize(
    "rule,valid,invalid",
    [
        ("email", "a@b.co", "a@b"),
        ("mobile", "9876543210", "1234567890"),
        ("pincode", "560 001", "060001"),
        ("pan", "ABCDE1234F", "ABCDE1234"),
        ("ifsc", "SBIN0001234", "SBIN1001234"),
        ("alpha", "abc", "abc1"),
        ("alphaspace", "ab c", "ab-c"),
        ("alphanum", "ab1", "ab 1"),
        ("alphanumspace", "ab 1", "ab_1"),
        ("slug", "hello-world", "hello world"),
        ("url", "https://example.com/a?b=c", "example"),
        ("uuid", "123e4567-e89b-12d3-a456-426614174000", "123e4567"),
        ("lowercase", "abc", "Abc"),
        ("uppercase", "ABC", "AbC"),
        ("json", '{"a": 1}', "{a: 1}"),
    ],
)
def test_string_formats(rule, valid, invalid):
    """Test format rules accept and reject representative values."""
    assert _error(rule, valid) is None
    assert _error(rule, invalid) is not None


def test_string_membership_and_affixes():
    """Test list membership and substring rules."""
    assert _error("string|in(red,green)", "blue", "color") == "Color must be one of (red, green)"
    assert _error("string|notIn(red,green)", "red", "color") == "Color must not be one of (red, green)"
    assert _error("string|equals(yes)", "no", "answer") == "Answer must be exactly yes"
    assert _error("string|notEquals(no)", "no", "answer") == "Answer must not be no"
    assert _error("string|contains(@)", "abc", "handle") == "Handle must contain @"
    assert _error("string|notContains(@)", "a@c", "handle") == "Handle must not contain @"
    assert _error("string|startsWith(ab)", "abc") is None
    assert _error("string|notStartsWith(ab)", "abc") is not None
    assert _error("string|endsWith(.pdf)", "doc.pdf") is None
    assert _error("string|notEndsWith(.exe)", "setup.exe") is not None


def test_integer_family():
    """Test integer type check and refinements."""
    assert _error("integer", "12", "n") is None
    assert _error("integer", "1.0", "n") == "N must be a valid integer"
    assert _error("integer", True, "n") == "N must be a valid integer"
    assert _error("integer|even", "3", "n") == "N must be an even integer"
    assert _error("integer|odd", "3", "n") is None
    assert _error("integer|gt(5)", "5", "n") == "N must be greater than 5"
    assert _error("integer|lte(5)", 5, "n") is None
    assert _error("integer|min(1)|max(3)", "4", "n") == "N must be at most 3"
    assert _error("integer|positive", "-2", "n") == "N must be a positive integer"
    assert _error("intEquals(4)", "4", "n") is None


def test_float_family():
    """Test float requires a decimal point."""
    assert _error("float", "1.5", "x") is None
    assert _error("float", "1", "x") == "X must be a decimal number"
    assert _error("float|between(0.5,1.5)", "2.0", "x") == "X must be between 0.5 and 1.5"
    assert _error("float|negative", "-0.5", "x") is None


def test_number_family():
    """Test number accepts integral and decimal values."""
    assert _error("number", "7", "n") is None
    assert _error("number", "1e3", "n") is None
    assert _error("number", "abc", "n") == "N must be a valid number"
    assert _error("number|multipleOf(5)", "7", "n") == "N must be a multiple of 5"
    assert _error("number|positive", "-1", "n") == "N must be a positive number"


def test_boolean_family():
    """Test only real booleans pass."""
    assert _error("boolean", False, "flag") is None
    assert _error("boolean", "true", "flag") == "Flag must be a valid boolean"


def test_date_family():
    """Test date rules on strings and date objects."""
    assert _error("date", "2024-02-29", "d") is None
    assert _error("date", "2024-02-30", "d") == "D must be a valid date"
    assert _error("date", datetime.date(2024, 1, 1), "d") is None
    assert _error("date|before(2024-01-01)", "2024-01-02", "d") == "D must be before 2024-01-01"
    assert _error("date|after(2024-01-01)", "2024-01-02", "d") is None
    assert _error("date|between(2024-01-01,2024-01-31)", "2024-02-01", "d") == (
        "D must be between 2024-01-01 and 2024-01-31"
    )
    assert _error("date|past", "2000-01-01", "d") is None
    assert _error("date|future", "2999-01-01", "d") is None
    assert _error("date|today", datetime.date.today().isoformat(), "d") is None
    assert _error("date|today", "2000-01-01", "d") == "D must be today's date"


def test_date_equals_compares_greater_than():
    """Test equals keeps its greater-than comparison."""
    assert _error("date|equals(2024-01-01)", "2024-01-02", "d") is None
    assert _error("date|equals(2024-01-01)", "2024-01-01", "d") == "D must exactly match the 2024-01-01"


def test_time_and_datetime_families():
    """Test time and datetime comparisons."""
    assert _error("time", "09:30", "t") is None
    assert _error("time", "9:30", "t") == "T must be a valid time"
    assert _error("time|between(09:00,17:00)", "18:00", "t") == "T must be between 09:00:00 and 17:00:00"
    assert _error("datetime", "2024-01-01 10:00", "at") is None
    assert _error("datetime|after(2024-01-01 10:00)", "2024-01-01 09:59", "at") == (
        "At must be after 2024-01-01 10:00:00"
    )
    assert _error("datetime|past", datetime.datetime(2000, 1, 1), "at") is None
    assert _error("datetime|future", "2000-01-01 00:00", "at") == "At must be in the future"


def test_array_family():
    """Test array rules."""
    assert _error("array", "x", "tags") == "Tags must be a valid array"
    assert _error("array|unique", [1, 1], "tags") == "Tags must have unique items"
    assert _error("array|unique", [{"a": 1}, {"a": 2}], "tags") is None
    assert _error("array|minItems(2)", ["a"], "tags") == "Tags must have at least 2 items"
    assert _error("array|maxItems(1)", ["a", "b"], "tags") == "Tags must have maximum 1 items"
    assert _error("array|includes(x)", ["x"], "tags") is None
    assert _error("array|excludes(x)", ["x"], "tags") == "Tags must not include x"
    assert _error("array|of(integer)", [1, "2"], "tags") == "Tags must be a valid array of integer"
    assert _error("array|notOf(string)", ["a"], "tags") is not None
    assert _error("array|latLong", [12.9, 77.6], "point") is None
    assert _error("array|latLong", [100, 0], "point") is not None
    assert _error("array|longLat", [100, 0], "point") is None


def test_array_not_empty():
    """Test notEmpty directly since empty values skip the rule chain."""
    arrays = ArrayRule()

    assert arrays.validate("notEmpty", []).valid is False
    assert arrays.validate("notEmptyArray", [0]).valid is True


def test_object_family():
    """Test object rules."""
    assert _error("object", "x", "meta") == "Meta must be a valid object"
    assert _error("object|hasKeys(a,b)", {"a": 1}, "meta") == "Meta must contain keys: a, b"
    assert _error("object|hasAnyKey(a,b)", {"b": 1}, "meta") is None
    assert _error("object|onlyKeys(a)", {"a": 1, "b": 2}, "meta") == "Meta contains invalid keys"
    assert _error("object|minKeys(2)", {"a": 1}, "meta") is not None
    assert _error("object|maxKeys(1)", {"a": 1}, "meta") is None
    assert _error("object|exactKeys(1)", {"a": 1}, "meta") is None
    assert _error("object|includes(a)", {"a": 1}, "meta") is None
    assert _error("object|excludes(a)", {"a": 1}, "meta") == "Meta must not include a"
    assert _error("object|allValuesType(number)", {"a": 1, "b": "x"}, "meta") == (
        "Meta values must be of type number"
    )
    assert _error("object|noNullValues", {"a": None}, "meta") is not None
    assert _error("object|deepIncludes(address.city)", {"address": {"city": "Oslo"}}, "meta") is None
    assert _error("object|deepIncludes(address.zip)", {"address": {"city": "Oslo"}}, "meta") == (
        "Meta must include nested key address.zip"
    )
    assert _error("object|isPlain", collections.OrderedDict(a=1), "meta") == "Meta must be a plain object"


def test_object_no_undefined_values():
    """Test pydantic's undefined marker is rejected."""
    objects = ObjectRule()

    assert objects.validate("noUndefinedValues", {"a": PydanticUndefined}).valid is False
    assert objects.validate("objectNoUndefined", {"a": None}).valid is True


@pytest.fixture
def uploads():
    return [{"name": "a.png", "size": 1024}, {"name": "b.JPG", "size": 2048}]


def test_file_descriptor_derives_extension_and_type():
    """Test descriptors fill in extension and mimetype."""
    descriptor = FileDescriptor(name="Photo.PNG", size="10")

    assert descriptor.extension == "png"
    assert descriptor.type == "image/png"
    assert descriptor.size == 10


def test_normalize_files_shapes(tmp_path):
    """Test mappings, upload objects and paths normalize."""

    class Upload:
        filename = "/tmp/report.pdf"
        content_type = "application/pdf"
        content_length = 99

    path = tmp_path / "notes.txt"
    path.write_bytes(b"hello")

    descriptors = normalize_files([{"name": "a.png"}, Upload(), path])

    assert [d.name for d in descriptors] == ["a.png", "report.pdf", "notes.txt"]
    assert descriptors[1].size == 99
    assert descriptors[1].extension == "pdf"
    assert descriptors[2].size == 5
    assert normalize_files(None) == []


def test_file_family(uploads):
    """Test file count, size and type rules."""
    assert _error("file", uploads, "upload") is None
    assert _error("file", 42, "upload") == "Upload must be a file"
    assert _error("file|maxFiles(1)", uploads, "upload") == "Maximum 1 files allowed for Upload"
    assert _error("file|minFiles(3)", uploads, "upload") == "At least 3 files required for Upload"
    assert _error("file|maxSize(2kb)", uploads, "upload") == "Upload exceeds maximum limit of 2kb"
    assert _error("file|minSize(4kb)", uploads, "upload") == "Upload must be at least 4kb"
    assert _error("file|accepts(png,jpg)", uploads, "upload") is None
    assert _error("file|accepts(png)", uploads, "upload") == "Invalid file. Only (png) allowed"
    assert _error("file|noAccepts(exe)", {"name": "setup.exe"}, "upload") == "Invalid file. (exe) not allowed"
    assert _error("file|imageOnly", uploads, "upload") is None
    assert _error("file|videoOnly", uploads, "upload") == "Upload accepts videos only"
    assert _error("file|audioOnly", {"name": "song.mp3"}, "upload") is None


def test_field_family_directly():
    """Test require with an explicit field context."""
    from rulecast.record import Field
    from rulecast.rules import FieldRule

    family = FieldRule()
    fields = {"password": Field("Password", "x")}

    assert family.validate("required", "").valid is False
    assert family.validate("same", "x", "password", fields).valid is True
    assert family.resolve("requiredIf") is family.resolve("requireIf")


def test_signatures():
    """Test documentation signatures include parameters and aliases."""
    record = FileRule().generate_signatures()
    names = [signature.name for signature in record.rules]

    assert record.type == "file"
    assert "file::maxSize(fileSize<string>)" in names
    assert "file::minFiles(integer)" in names
    between = next(s for s in ArrayRule().generate_signatures().rules if s.name.startswith("array::minItems"))
    assert between.aliases == ["minItems(integer)", "arrayMinLength(integer)"]


def test_range_param_reaches_rule():
    """Test a Range instance is what a range rule receives."""
    from rulecast.rules import IntegerRule

    assert IntegerRule().validate("between", "5", Range(1, 10)).valid is True
