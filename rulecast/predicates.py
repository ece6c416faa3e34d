"""Primitive type and shape predicates shared by rule families."""

import json
import math
import typing

TypeOfArray = typing.Literal[
    "string", "number", "integer", "float", "boolean", "array", "object"
]


def is_string(value: typing.Any) -> bool:
    return isinstance(value, str)


def is_array(value: typing.Any) -> bool:
    return isinstance(value, (list, tuple))


def is_object(value: typing.Any) -> bool:
    return isinstance(value, typing.Mapping)


def is_empty(value: typing.Any) -> bool:
    """Check whether a value counts as "not provided".

    Strings, arrays and mappings are empty when they have no items; ``None``
    is empty. Every other value, including ``0`` and ``False``, is present.
    """
    if is_string(value) or is_array(value) or is_object(value):
        return len(value) == 0
    return value is None


def is_array_or_object(value: typing.Any) -> bool:
    return is_array(value) or is_object(value)


def is_json(value: typing.Any) -> bool:
    """Check that a string decodes to a JSON array or object."""
    if not isinstance(value, (str, bytes, bytearray)):
        return False
    try:
        return is_array_or_object(json.loads(value))
    except ValueError:
        return False


def is_boolean(value: typing.Any) -> bool:
    return isinstance(value, bool)


def is_number(value: typing.Any) -> bool:
    """Finite int or float; booleans are not numbers."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def is_integer(value: typing.Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and value.is_integer()


def is_float(value: typing.Any) -> bool:
    return is_number(value) and not is_integer(value)


def is_latitude(value: typing.Any) -> bool:
    return is_number(value) and -90 <= value <= 90


def is_longitude(value: typing.Any) -> bool:
    return is_number(value) and -180 <= value <= 180


_TYPE_CHECKS: dict[str, typing.Callable[[typing.Any], bool]] = {
    "string": is_string,
    "number": is_number,
    "integer": is_integer,
    "float": is_float,
    "boolean": is_boolean,
    "array": is_array,
    "object": is_object,
}


def is_type_of(value: typing.Any, type_name: str) -> bool:
    """Check a single value against a type name such as ``"integer"``.

    Unknown type names never match.
    """
    check = _TYPE_CHECKS.get(type_name)
    return check is not None and check(value)


def is_array_of(value: typing.Any, type_name: str) -> bool:
    """Check that ``value`` is an array whose every element is ``type_name``."""
    if not is_array(value):
        return False
    if type_name not in _TYPE_CHECKS:
        return False
    return all(is_type_of(item, type_name) for item in value)
