"""Extract and coerce rule parameters from DSL tokens.

``extract_param("integer::between(1,10)")`` splits a token into name,
function and raw parameter; ``parse_param`` then coerces the raw parameter
into the shape the rule declares (single value, range, list, file size,
field reference or field-equals descriptor). Coercion happens once, when a
schema is parsed.
"""

import re
import typing

from . import datetimes as _datetimes
from . import errors as _errors

ParamType = typing.Literal[
    "none",
    "single",
    "range",
    "list",
    "fileSize",
    "fieldReference",
    "fieldEquals",
    "function",
    "schema",
]

ArgumentType = typing.Literal[
    "any",
    "string",
    "number",
    "integer",
    "float",
    "boolean",
    "date",
    "time",
    "datetime",
    "array",
    "object",
    "file",
    "fieldName",
]

FILE_SIZE_UNITS: dict[str, int] = {
    "bytes": 1,
    "kb": 1024,
    "mb": 1024**2,
    "gb": 1024**3,
}

_TOKEN = re.compile(r"^([a-zA-Z0-9:_]+)(?:\((.*)\))?$", re.DOTALL)
_FILE_SIZE = re.compile(r"^([0-9]+)(bytes|kb|mb|gb)?$", re.IGNORECASE)
_SPLIT = re.compile(r"[,|]")
_INTEGER = re.compile(r"^[+-]?[0-9]+$")
_FLOAT = re.compile(r"^[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?$")


class ExtractedParam(typing.NamedTuple):
    """A DSL token split into its parts.

    Attributes:
        name: Rule name as written, e.g. ``file::maxSize`` or ``between``
        func: Function part after ``::``, None when the name has no ``::``
        param: Raw text inside the parentheses, None when absent
    """

    name: str
    func: str | None
    param: str | None


class Range(typing.NamedTuple):
    """Inclusive bounds of a ``range`` parameter."""

    min: typing.Any
    max: typing.Any

    def __str__(self) -> str:
        return f"{self.min}, {self.max}"


class FileSize(typing.NamedTuple):
    """A human file size such as ``2mb`` resolved to bytes."""

    raw: str
    size: int
    unit: str
    bytes: int

    def __str__(self) -> str:
        return self.raw


class FieldEquals(typing.NamedTuple):
    """A ``field=value`` parameter used by conditional requirements."""

    field: str
    value: str

    def __str__(self) -> str:
        return f"{self.field}={self.value}"


def extract_param(raw: str) -> ExtractedParam:
    """Split a DSL token like ``name(param)`` or ``type::func(param)``.

    Args:
        raw: Single rule token

    Returns:
        ExtractedParam with name, function and raw parameter

    Example:
        >>> extract_param("file::maxFiles(2)")
        ExtractedParam(name='file::maxFiles', func='maxFiles', param='2')
    """
    token = raw.strip()
    matched = _TOKEN.match(token)
    if matched:
        name, param = matched.group(1), matched.group(2)
        param = param.strip() if param is not None else None
    else:
        name, param = token, None
    return ExtractedParam(name, split_function(name), param)


def split_function(name: str) -> str | None:
    """Return the part of ``type::func`` after ``::``, or None."""
    if "::" not in name:
        return None
    return name.split("::", 1)[1].strip() or None


def parse_param(
    raw: typing.Any, param_type: str, argument_type: str = "any"
) -> typing.Any:
    """Coerce a raw parameter into the type a rule declares.

    String parameters come from the DSL; object-form schemas may pass native
    values (numbers, lists, mappings), which are coerced the same way.

    Args:
        raw: Raw parameter (None when the token had no parentheses)
        param_type: Parameter shape declared by the rule
        argument_type: Semantic type of the parameter values

    Returns:
        The coerced parameter; ``True`` for ``none`` parameters

    Raises:
        ParamError: If the parameter cannot be coerced
    """
    if param_type == "none":
        return True
    if raw is None:
        return None

    if param_type == "single":
        return parse_single(raw, argument_type)
    if param_type == "range":
        return parse_range(raw, argument_type)
    if param_type == "list":
        return parse_list(raw, argument_type)
    if param_type == "fileSize":
        return parse_file_size(raw)
    if param_type == "fieldReference":
        return str(raw).strip()
    if param_type == "fieldEquals":
        return parse_field_equals(raw)
    return raw


def parse_single(raw: typing.Any, argument_type: str) -> typing.Any:
    """Coerce one value to ``argument_type``.

    Raises:
        ParamError: On an uncoercible number, date, time or datetime
    """
    if not isinstance(raw, str):
        return _coerce_native(raw, argument_type)

    raw = raw.strip()
    if argument_type == "integer":
        if not _INTEGER.match(raw):
            raise _errors.ParamError(f"Invalid integer value {raw}")
        return int(raw)
    if argument_type == "float":
        if not _FLOAT.match(raw):
            raise _errors.ParamError(f"Invalid float value {raw}")
        return float(raw)
    if argument_type == "number":
        if _INTEGER.match(raw):
            return int(raw)
        if not _FLOAT.match(raw):
            raise _errors.ParamError(f"Invalid number value {raw}")
        return float(raw)
    if argument_type == "boolean":
        return raw.lower() not in ("", "0", "false")
    if argument_type == "array":
        return _split(raw)
    if argument_type in ("date", "time", "datetime"):
        return _extract_temporal(raw, argument_type)
    return raw


def _coerce_native(raw: typing.Any, argument_type: str) -> typing.Any:
    if argument_type in ("integer", "float", "number") and isinstance(raw, bool):
        raise _errors.ParamError(f"Invalid {argument_type} value {raw}")
    if argument_type == "integer":
        if isinstance(raw, float) and raw.is_integer():
            return int(raw)
        if not isinstance(raw, int):
            raise _errors.ParamError(f"Invalid integer value {raw!r}")
        return raw
    if argument_type == "float":
        if not isinstance(raw, (int, float)):
            raise _errors.ParamError(f"Invalid float value {raw!r}")
        return float(raw)
    if argument_type == "number":
        if not isinstance(raw, (int, float)):
            raise _errors.ParamError(f"Invalid number value {raw!r}")
        return raw
    if argument_type == "boolean":
        return bool(raw)
    if argument_type in ("date", "time", "datetime"):
        if isinstance(raw, _datetimes.Extracted):
            return raw
        return _extract_temporal(str(raw), argument_type)
    if argument_type == "string" and isinstance(raw, (int, float)):
        return str(raw)
    return raw


def _extract_temporal(raw: str, argument_type: str) -> _datetimes.Extracted:
    extractors = {
        "date": _datetimes.extract_date,
        "time": _datetimes.extract_time,
        "datetime": _datetimes.extract_datetime,
    }
    try:
        return extractors[argument_type](raw)
    except ValueError as e:
        raise _errors.ParamError(str(e)) from e


def _split(raw: str) -> list[str]:
    cleaned = raw.replace("(", "").replace(")", "")
    return [item.strip() for item in _SPLIT.split(cleaned)]


def parse_range(raw: typing.Any, argument_type: str) -> Range:
    """Parse ``min,max`` (or ``min|max``, optionally parenthesized).

    Raises:
        ParamError: If there are not exactly two bounds
    """
    if isinstance(raw, typing.Mapping):
        bounds = [raw.get("min"), raw.get("max")]
    elif isinstance(raw, (list, tuple)):
        bounds = list(raw)
    else:
        bounds = _split(str(raw))
    if len(bounds) != 2 or any(b is None or b == "" for b in bounds):
        raise _errors.ParamError(f"Invalid range {raw!r}, expected two bounds")
    low, high = (parse_single(bound, argument_type) for bound in bounds)
    return Range(low, high)


def parse_list(raw: typing.Any, argument_type: str) -> tuple[typing.Any, ...]:
    """Parse a ``,`` or ``|`` separated list, coercing every item."""
    items = list(raw) if isinstance(raw, (list, tuple, set)) else _split(str(raw))
    return tuple(parse_single(item, argument_type) for item in items)


def parse_file_size(raw: typing.Any) -> FileSize:
    """Parse ``<int><unit>`` where unit is bytes, kb, mb or gb (default bytes).

    Raises:
        ParamError: If the size string is malformed
    """
    if isinstance(raw, FileSize):
        return raw
    text = str(raw).strip()
    matched = _FILE_SIZE.match(text)
    if not matched:
        raise _errors.ParamError(f"Invalid file size format {text!r}")
    size = int(matched.group(1))
    unit = (matched.group(2) or "bytes").lower()
    return FileSize(text, size, unit, size * FILE_SIZE_UNITS[unit])


def parse_field_equals(raw: typing.Any) -> FieldEquals:
    """Split ``field=value`` on the first ``=``.

    Raises:
        ParamError: If there is no ``=``
    """
    if isinstance(raw, typing.Mapping):
        return FieldEquals(str(raw["field"]).strip(), str(raw.get("value", "")).strip())
    text = str(raw)
    if "=" not in text:
        raise _errors.ParamError(f"Invalid field condition {text!r}, expected field=value")
    field, value = text.split("=", 1)
    return FieldEquals(field.strip(), value.strip())
