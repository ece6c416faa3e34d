"""Array rule family."""

import json
import typing

from .. import predicates as _predicates
from .base import BaseRule, RuleFunction, step


def _has_unique_items(value: typing.Any) -> bool:
    seen = set()
    for item in value:
        key = json.dumps(item, sort_keys=True, default=str)
        if key in seen:
            return False
        seen.add(key)
    return True


def _is_pair(value: typing.Any, first: typing.Callable[[typing.Any], bool], second: typing.Callable[[typing.Any], bool]) -> bool:
    return (
        _predicates.is_array(value)
        and len(value) == 2
        and first(value[0])
        and second(value[1])
    )


class ArrayRule(BaseRule):
    """``array`` family; lists and tuples count as arrays."""

    def __init__(self) -> None:
        super().__init__(
            "array",
            RuleFunction(
                "valid",
                aliases=["array"],
                steps=[step("@{field} must be a valid array", lambda value, *_: _predicates.is_array(value))],
            ),
        )

        self.define(
            "notEmpty",
            step(
                "@{field} cannot be empty array",
                lambda value, *_: _predicates.is_array(value) and not _predicates.is_empty(value),
            ),
            aliases=["notEmptyArray"],
        )
        self.define(
            "unique",
            step(
                "@{field} must have unique items",
                lambda value, *_: _predicates.is_array(value) and _has_unique_items(value),
            ),
            aliases=["uniqueArray"],
        )
        self.define(
            "minItems",
            step(
                "@{field} must have at least @{param} items",
                lambda value, limit, _: _predicates.is_array(value) and len(value) >= limit,
            ),
            param_type="single",
            argument_type="integer",
            aliases=["minItems", "arrayMinLength"],
        )
        self.define(
            "maxItems",
            step(
                "@{field} must have maximum @{param} items",
                lambda value, limit, _: _predicates.is_array(value) and len(value) <= limit,
            ),
            param_type="single",
            argument_type="integer",
            aliases=["maxItems", "arrayMaxLength"],
        )
        self.define(
            "includes",
            step(
                "@{field} must include @{param}",
                lambda value, item, _: _predicates.is_array(value) and item in value,
            ),
            param_type="single",
            aliases=["arrayIncludes", "arrayContains"],
        )
        self.define(
            "excludes",
            step(
                "@{field} must not include @{param}",
                lambda value, item, _: _predicates.is_array(value) and item not in value,
            ),
            param_type="single",
            aliases=["arrayExcludes", "arrayNotContains"],
        )
        self.define(
            "latLong",
            step(
                "@{field} must be a valid [latitude, longitude] coordinate array",
                lambda value, *_: _is_pair(value, _predicates.is_latitude, _predicates.is_longitude),
            ),
            aliases=["latLongArray"],
        )
        self.define(
            "longLat",
            step(
                "@{field} must be a valid [longitude, latitude] coordinate array",
                lambda value, *_: _is_pair(value, _predicates.is_longitude, _predicates.is_latitude),
            ),
            aliases=["longLatArray"],
        )
        self.define(
            "of",
            step(
                "@{field} must be a valid array of @{param}",
                lambda value, type_name, _: _predicates.is_array_of(value, type_name),
            ),
            param_type="single",
            argument_type="string",
            aliases=["arrayOf"],
        )
        self.define(
            "notOf",
            step(
                "@{field} must not be an array of @{param}",
                lambda value, type_name, _: _predicates.is_array(value)
                and not _predicates.is_array_of(value, type_name),
            ),
            param_type="single",
            argument_type="string",
            aliases=["arrayNotOf"],
        )
