"""Boolean rule family."""

from .. import predicates as _predicates
from .base import BaseRule, RuleFunction, step


class BooleanRule(BaseRule):
    """``boolean`` family; only real booleans pass the type check."""

    def __init__(self) -> None:
        super().__init__(
            "boolean",
            RuleFunction(
                "valid",
                aliases=["boolean", "bool"],
                steps=[
                    step("@{field} must be a valid boolean", lambda value, *_: _predicates.is_boolean(value))
                ],
            ),
        )
