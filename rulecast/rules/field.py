"""Presence and cross-field rules.

Cross-field rules read the field context snapshot and never modify it. A
referenced field that is missing from the value bag counts as empty.
"""

import typing

from .. import predicates as _predicates
from .. import record as _record
from .base import BaseRule, RuleFunction, step

PRESENCE_FUNCTIONS = frozenset(
    {
        "require",
        "requireIf",
        "requireUnless",
        "requireWith",
        "requireWithout",
        "atLeastOne",
        "onlyOne",
        "allOrNone",
    }
)
"""Functions that decide whether an empty value is acceptable."""


def field_value(fields: _record.Fields, name: str) -> typing.Any:
    """Raw value of another field, or None when it is not in the context."""
    field = fields.get(name)
    return field.value if field is not None else None


def is_filled(fields: _record.Fields, name: str) -> bool:
    return not _predicates.is_empty(field_value(fields, name))


def _condition_met(fields: _record.Fields, condition: typing.Any) -> bool:
    other = field_value(fields, condition.field)
    if isinstance(other, bool):
        other = "true" if other else "false"
    elif other is None:
        other = ""
    return str(other) == condition.value


def _filled_count(value: typing.Any, others: typing.Iterable[str], fields: _record.Fields) -> int:
    return int(not _predicates.is_empty(value)) + sum(is_filled(fields, name) for name in others)


def _matches(value: typing.Any, name: str, fields: _record.Fields) -> bool:
    return name in fields and fields[name].value == value


class FieldRule(BaseRule):
    """``field`` family: require, optional, default and cross-field checks."""

    typed = False

    def __init__(self) -> None:
        super().__init__(
            "field",
            RuleFunction(
                "require",
                aliases=["require", "required"],
                steps=[step("@{field} is required", lambda value, *_: not _predicates.is_empty(value))],
            ),
        )

        self.define(
            "optional",
            aliases=["optional"],
            desc="Empty values skip every other rule",
        )
        self.define(
            "default",
            param_type="single",
            aliases=["default"],
            desc="Substituted for an empty value before validation",
        )
        self.define(
            "match",
            step("Matching field @{param} not found", lambda _, name, fields: name in fields),
            step("@{field} not matched with @{other}", _matches),
            param_type="fieldReference",
            argument_type="fieldName",
            aliases=["match", "same"],
        )
        self.define(
            "requireIf",
            step(
                "@{field} is required when @{other} is @{param.value}",
                lambda value, condition, fields: not _predicates.is_empty(value)
                or not _condition_met(fields, condition),
            ),
            param_type="fieldEquals",
            aliases=["requireIf", "requiredIf"],
        )
        self.define(
            "requireUnless",
            step(
                "@{field} is required unless @{other} is @{param.value}",
                lambda value, condition, fields: not _predicates.is_empty(value)
                or _condition_met(fields, condition),
            ),
            param_type="fieldEquals",
            aliases=["requireUnless", "requiredUnless"],
        )
        self.define(
            "requireWith",
            step(
                "@{field} is required when @{other} is present",
                lambda value, names, fields: not _predicates.is_empty(value)
                or not any(is_filled(fields, name) for name in names),
            ),
            param_type="list",
            argument_type="fieldName",
            aliases=["requireWith", "requiredWith"],
        )
        self.define(
            "requireWithout",
            step(
                "@{field} is required when @{other} is missing",
                lambda value, names, fields: not _predicates.is_empty(value)
                or any(is_filled(fields, name) for name in names),
            ),
            param_type="list",
            argument_type="fieldName",
            aliases=["requireWithout", "requiredWithout"],
        )
        self.define(
            "atLeastOne",
            step(
                "At least one of @{field}, @{other} is required",
                lambda value, names, fields: _filled_count(value, names, fields) >= 1,
            ),
            param_type="list",
            argument_type="fieldName",
            aliases=["atLeastOne"],
        )
        self.define(
            "onlyOne",
            step(
                "Exactly one of @{field}, @{other} must be provided",
                lambda value, names, fields: _filled_count(value, names, fields) == 1,
            ),
            param_type="list",
            argument_type="fieldName",
            aliases=["onlyOne"],
        )
        self.define(
            "allOrNone",
            step(
                "@{field}, @{other} must all be provided or all be empty",
                lambda value, names, fields: _filled_count(value, names, fields)
                in (0, len(names) + 1),
            ),
            param_type="list",
            argument_type="fieldName",
            aliases=["allOrNone"],
        )
