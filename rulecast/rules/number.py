"""Numeric rule families: ``integer``, ``float`` and ``number``.

Values may arrive as numbers or as strings from a form post; refinements
convert them before comparing, and a value that cannot be converted fails
the refinement.
"""

import math
import operator
import re
import typing

from .base import BaseRule, RuleFunction, step

INTEGER = re.compile(r"^[+-]?[0-9]+$")
FLOAT = re.compile(r"^([+-]?([0-9]+[.][0-9]+))$")


def to_int(value: typing.Any) -> int:
    if isinstance(value, bool):
        raise TypeError("booleans are not integers")
    if isinstance(value, str):
        return int(value.strip())
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"{value} is not an integer")
    return int(value)


def to_float(value: typing.Any) -> float:
    if isinstance(value, bool):
        raise TypeError("booleans are not numbers")
    number = float(value.strip() if isinstance(value, str) else value)
    if not math.isfinite(number):
        raise ValueError(f"{value} is not a finite number")
    return number


def is_valid_integer(value: typing.Any) -> bool:
    return not isinstance(value, bool) and bool(INTEGER.match(str(value)))


def is_valid_float(value: typing.Any) -> bool:
    if isinstance(value, bool) or not FLOAT.match(str(value)):
        return False
    return math.isfinite(float(value))


def is_valid_number(value: typing.Any) -> bool:
    try:
        to_float(value)
    except (TypeError, ValueError):
        return False
    return True


_COMPARISONS: list[tuple[str, typing.Callable[[typing.Any, typing.Any], bool], str]] = [
    ("equals", operator.eq, "@{field} must be equal to @{param}"),
    ("notEquals", operator.ne, "@{field} must not be equal to @{param}"),
    ("gt", operator.gt, "@{field} must be greater than @{param}"),
    ("gte", operator.ge, "@{field} must be greater than or equal to @{param}"),
    ("lt", operator.lt, "@{field} must be less than @{param}"),
    ("lte", operator.le, "@{field} must be less than or equal to @{param}"),
]


class NumericRule(BaseRule):
    """Shared refinements of the numeric families.

    Args:
        type: Family tag
        type_checker: Function checking the basic type
        convert: Converts a raw value before comparisons
        argument_type: Argument type of every parameter
        noun: Word used in the positive/negative messages
        aliases: Aliases of each shared refinement (``minInt``, ``floatGt``)
    """

    def __init__(
        self,
        type: str,
        type_checker: RuleFunction,
        convert: typing.Callable[[typing.Any], typing.Any],
        argument_type: typing.Literal["integer", "float", "number"],
        noun: str,
        aliases: typing.Mapping[str, list[str]],
    ) -> None:
        super().__init__(type, type_checker)
        self.convert = convert

        self.define(
            "positive",
            step(f"@{{field}} must be a positive {noun}", lambda value, *_: convert(value) >= 0),
            argument_type=argument_type,
            aliases=aliases["positive"],
        )
        self.define(
            "negative",
            step(f"@{{field}} must be a negative {noun}", lambda value, *_: convert(value) < 0),
            argument_type=argument_type,
            aliases=aliases["negative"],
        )
        self.define(
            "min",
            step("@{field} must be at least @{param}", lambda value, limit, _: convert(value) >= limit),
            param_type="single",
            argument_type=argument_type,
            aliases=aliases["min"],
        )
        self.define(
            "max",
            step("@{field} must be at most @{param}", lambda value, limit, _: convert(value) <= limit),
            param_type="single",
            argument_type=argument_type,
            aliases=aliases["max"],
        )
        self.define(
            "between",
            step(
                "@{field} must be between @{param.min} and @{param.max}",
                lambda value, bounds, _: bounds.min <= convert(value) <= bounds.max,
            ),
            param_type="range",
            argument_type=argument_type,
            aliases=aliases["between"],
        )

    def define_comparisons(self, argument_type: str, aliases: typing.Mapping[str, list[str]]) -> None:
        for name, compare, message in _COMPARISONS:
            self.define(
                name,
                step(message, lambda value, limit, _, compare=compare: compare(self.convert(value), limit)),
                param_type="single",
                argument_type=argument_type,
                aliases=aliases[name],
            )


class IntegerRule(NumericRule):
    """``integer`` family; the type check uses ``^[+-]?[0-9]+$``."""

    def __init__(self) -> None:
        super().__init__(
            "integer",
            RuleFunction(
                "valid",
                aliases=["integer", "int"],
                steps=[step("@{field} must be a valid integer", lambda value, *_: is_valid_integer(value))],
            ),
            to_int,
            "integer",
            "integer",
            {
                "positive": ["positiveInt"],
                "negative": ["negativeInt"],
                "min": ["minInt"],
                "max": ["maxInt"],
                "between": ["intBetween"],
            },
        )
        self.define(
            "even",
            step("@{field} must be an even integer", lambda value, *_: to_int(value) % 2 == 0),
            argument_type="integer",
            aliases=["evenInt"],
        )
        self.define(
            "odd",
            step("@{field} must be an odd integer", lambda value, *_: to_int(value) % 2 != 0),
            argument_type="integer",
            aliases=["oddInt"],
        )
        self.define_comparisons(
            "integer",
            {
                "equals": ["intEquals"],
                "notEquals": ["intNotEquals"],
                "gt": ["gt", "intGt"],
                "gte": ["gte", "intGte"],
                "lt": ["lt", "intLt"],
                "lte": ["lte", "intLte"],
            },
        )


class FloatRule(NumericRule):
    """``float`` family; the type check requires a literal decimal point."""

    def __init__(self) -> None:
        super().__init__(
            "float",
            RuleFunction(
                "valid",
                aliases=["float", "double"],
                steps=[step("@{field} must be a decimal number", lambda value, *_: is_valid_float(value))],
            ),
            to_float,
            "float",
            "decimal number",
            {
                "positive": ["positiveFloat"],
                "negative": ["negativeFloat"],
                "min": ["minFloat"],
                "max": ["maxFloat"],
                "between": ["floatBetween"],
            },
        )
        self.define_comparisons(
            "float",
            {
                "equals": ["floatEquals"],
                "notEquals": ["floatNotEquals"],
                "gt": ["floatGt"],
                "gte": ["floatGte"],
                "lt": ["floatLt"],
                "lte": ["floatLte"],
            },
        )


class NumberRule(NumericRule):
    """``number`` family: any finite number, integral or not."""

    def __init__(self) -> None:
        super().__init__(
            "number",
            RuleFunction(
                "valid",
                aliases=["number", "numeric"],
                steps=[step("@{field} must be a valid number", lambda value, *_: is_valid_number(value))],
            ),
            to_float,
            "number",
            "number",
            {
                "positive": ["positiveNumber"],
                "negative": ["negativeNumber"],
                "min": ["minNum"],
                "max": ["maxNum"],
                "between": ["numBetween"],
            },
        )
        self.define(
            "multipleOf",
            step(
                "@{field} must be a multiple of @{param}",
                lambda value, factor, _: to_float(value) % factor == 0,
            ),
            param_type="single",
            argument_type="number",
            aliases=["numMultipleOf"],
        )
