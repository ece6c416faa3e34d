"""Object (mapping) rule family."""

import typing

from pydantic.fields import PydanticUndefined

from .. import predicates as _predicates
from .base import BaseRule, RuleFunction, step


def has_path(value: typing.Any, path: str) -> bool:
    """Whether a dotted key path such as ``address.city`` exists."""
    current = value
    for key in path.split("."):
        if not _predicates.is_object(current) or key not in current:
            return False
        current = current[key]
    return True


def _keys(value: typing.Any) -> typing.KeysView[typing.Any]:
    if not _predicates.is_object(value):
        raise TypeError("not an object")
    return value.keys()


class ObjectRule(BaseRule):
    """``object`` family; any mapping counts as an object.

    ``noUndefinedValues`` rejects pydantic's undefined marker, which shows up
    in value bags assembled from partially built models.
    """

    def __init__(self) -> None:
        super().__init__(
            "object",
            RuleFunction(
                "valid",
                aliases=["object"],
                steps=[step("@{field} must be a valid object", lambda value, *_: _predicates.is_object(value))],
            ),
        )

        self.define(
            "notEmpty",
            step(
                "@{field} cannot be empty object",
                lambda value, *_: _predicates.is_object(value) and not _predicates.is_empty(value),
            ),
            aliases=["notEmptyObject"],
        )
        self.define(
            "includes",
            step("@{field} must include @{param}", lambda value, key, _: key in _keys(value)),
            param_type="single",
            argument_type="string",
            aliases=["objectIncludes", "objectContains"],
        )
        self.define(
            "excludes",
            step("@{field} must not include @{param}", lambda value, key, _: key not in _keys(value)),
            param_type="single",
            argument_type="string",
            aliases=["objectExcludes", "objectNotContains"],
        )
        self.define(
            "hasKeys",
            step(
                "@{field} must contain keys: @{param}",
                lambda value, keys, _: all(key in _keys(value) for key in keys),
            ),
            param_type="list",
            argument_type="string",
            aliases=["objectHasKeys"],
        )
        self.define(
            "hasAnyKey",
            step(
                "@{field} must contain at least one of: @{param}",
                lambda value, keys, _: any(key in _keys(value) for key in keys),
            ),
            param_type="list",
            argument_type="string",
            aliases=["objectHasAnyKey"],
        )
        self.define(
            "onlyKeys",
            step(
                "@{field} contains invalid keys",
                lambda value, keys, _: all(key in keys for key in _keys(value)),
            ),
            param_type="list",
            argument_type="string",
            aliases=["objectOnlyKeys"],
        )
        self.define(
            "minKeys",
            step("@{field} must have at least @{param} keys", lambda value, limit, _: len(_keys(value)) >= limit),
            param_type="single",
            argument_type="integer",
            aliases=["objectMinKeys"],
        )
        self.define(
            "maxKeys",
            step("@{field} must not exceed @{param} keys", lambda value, limit, _: len(_keys(value)) <= limit),
            param_type="single",
            argument_type="integer",
            aliases=["objectMaxKeys"],
        )
        self.define(
            "exactKeys",
            step(
                "@{field} must contain exactly @{param} keys",
                lambda value, count, _: len(_keys(value)) == count,
            ),
            param_type="single",
            argument_type="integer",
            aliases=["objectExactKeys"],
        )
        self.define(
            "allValuesType",
            step(
                "@{field} values must be of type @{param}",
                lambda value, type_name, _: _predicates.is_object(value)
                and all(_predicates.is_type_of(item, type_name) for item in value.values()),
            ),
            param_type="single",
            argument_type="string",
            aliases=["objectValuesType"],
        )
        self.define(
            "noNullValues",
            step(
                "@{field} must not contain null values",
                lambda value, *_: _predicates.is_object(value)
                and all(item is not None for item in value.values()),
            ),
            aliases=["objectNoNull"],
        )
        self.define(
            "noUndefinedValues",
            step(
                "@{field} must not contain undefined values",
                lambda value, *_: _predicates.is_object(value)
                and all(item is not PydanticUndefined for item in value.values()),
            ),
            aliases=["objectNoUndefined"],
        )
        self.define(
            "deepIncludes",
            step("@{field} must include nested key @{param}", lambda value, path, _: has_path(value, path)),
            param_type="single",
            argument_type="string",
            aliases=["objectDeepIncludes"],
        )
        self.define(
            "isPlain",
            step("@{field} must be a plain object", lambda value, *_: type(value) is dict),
            aliases=["plainObject"],
        )
