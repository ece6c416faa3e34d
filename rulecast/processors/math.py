"""Numeric rounding processors."""

import math
import typing

from .base import Processor


def _number(value: typing.Any) -> float:
    if isinstance(value, bool):
        raise TypeError("booleans are not numbers")
    return float(value.strip() if isinstance(value, str) else value)


def round_half_up(value: typing.Any, param: typing.Any = None) -> int:
    return math.floor(_number(value) + 0.5)


def to_fixed(value: typing.Any, digits: typing.Any = None) -> str:
    """Render with a fixed number of decimals (default 0)."""
    return f"{_number(value):.{int(digits or 0)}f}"


def _absolute(value: typing.Any, param: typing.Any = None) -> float | int:
    number = abs(_number(value))
    return int(number) if number.is_integer() else number


class MathProcessor(Processor):
    """``math::<function>`` / ``preMath::<function>``."""

    def __init__(self, is_preprocessor: bool = False) -> None:
        super().__init__("math", is_preprocessor)
        self.define("ceil", lambda value, _: math.ceil(_number(value)), aliases=["ceil", "roundUp"])
        self.define("floor", lambda value, _: math.floor(_number(value)), aliases=["floor", "roundDown"])
        self.define("round", round_half_up, aliases=["round"], desc="Rounds to the nearest integer")
        self.define(
            "toFixed",
            to_fixed,
            param_type="single",
            argument_type="integer",
            aliases=["toFixed"],
            desc="Rounds to fixed decimal places",
        )
        self.define("abs", _absolute, aliases=["abs"])
