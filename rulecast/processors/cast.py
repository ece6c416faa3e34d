"""Best-effort type casting processors.

A cast that raises leaves the value unchanged; casting projects a value, it
does not validate it.
"""

import datetime
import json
import typing

import dateutil.parser  # type: ignore[import-untyped]

from .base import Processor


def to_integer(value: typing.Any, param: typing.Any = None) -> int:
    """Cast to int, truncating decimal strings like ``"12.7"``."""
    if isinstance(value, str):
        value = value.strip()
        try:
            return int(value)
        except ValueError:
            return int(float(value))
    return int(value)


def to_float(value: typing.Any, param: typing.Any = None) -> float:
    return float(value.strip() if isinstance(value, str) else value)


def to_boolean(value: typing.Any, param: typing.Any = None) -> bool:
    """``"0"`` and ``"false"`` (any case) are False; otherwise truthiness."""
    if isinstance(value, str):
        value = value.strip().lower()
        return value not in ("", "0", "false")
    return bool(value)


def to_string(value: typing.Any, param: typing.Any = None) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def to_json(value: typing.Any, param: typing.Any = None) -> str:
    return json.dumps(value, default=str)


def from_json(value: typing.Any, param: typing.Any = None) -> typing.Any:
    return json.loads(value)


def to_datetime(value: typing.Any, param: typing.Any = None) -> datetime.datetime:
    if isinstance(value, datetime.datetime):
        return value
    if isinstance(value, datetime.date):
        return datetime.datetime.combine(value, datetime.time())
    return dateutil.parser.parse(value)


def to_date(value: typing.Any, param: typing.Any = None) -> datetime.date:
    if isinstance(value, datetime.date) and not isinstance(value, datetime.datetime):
        return value
    return to_datetime(value).date()


class CastProcessor(Processor):
    """``cast::<type>`` / ``preCast::<type>``."""

    def __init__(self, is_preprocessor: bool = False) -> None:
        super().__init__("cast", is_preprocessor)
        self.define("integer", to_integer, aliases=["toInteger"])
        self.define("float", to_float, aliases=["toFloat"])
        self.define("boolean", to_boolean, aliases=["toBoolean"])
        self.define("string", to_string, aliases=["toString"])
        self.define("toJson", to_json, aliases=["jsonEncode"])
        self.define("fromJson", from_json, aliases=["jsonDecode"])
        self.define("date", to_date, desc="Parses free-form dates", aliases=["toDate"])
        self.define("datetime", to_datetime, desc="Parses free-form date times", aliases=["toDatetime"])
